"""Tests for resolution/resolver.py - Node-style specifier resolution."""

import json
import os

import pytest

from affected_tests.config import ResolverConfig
from affected_tests.exceptions import UnresolvedImportError
from affected_tests.resolution import ModuleResolver, ResolutionCache


def _resolver(config: ResolverConfig, **changes) -> ModuleResolver:
    if changes:
        config = ResolverConfig(**{**config.__dict__, **changes})
    return ModuleResolver(config)


# ── Relative and absolute specifiers ──────────────────────────────


class TestPathSpecifiers:
    def test_literal_file(self, make_tree, resolver_config):
        root = make_tree({"src/a.js": "", "src/b.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "src"), "./b.js") == str(root / "src/b.js")

    def test_extension_probing(self, make_tree, resolver_config):
        root = make_tree({"src/util.ts": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "src"), "./util") == str(root / "src/util.ts")

    def test_extension_order_tie_break(self, make_tree, resolver_config):
        root = make_tree({"foo.js": "", "foo.ts": ""})
        resolver = _resolver(resolver_config, extensions=(".js", ".ts"))
        assert resolver.resolve(str(root), "./foo") == str(root / "foo.js")

        resolver = _resolver(resolver_config, extensions=(".ts", ".js"))
        assert resolver.resolve(str(root), "./foo") == str(root / "foo.ts")

    def test_literal_wins_over_extension(self, make_tree, resolver_config):
        root = make_tree({"data.json": "{}", "data.json.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "./data.json") == str(root / "data.json")

    def test_parent_directory(self, make_tree, resolver_config):
        root = make_tree({"shared.js": "", "src/deep/a.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "src/deep"), "../../shared") == str(root / "shared.js")

    def test_absolute_specifier(self, make_tree, resolver_config):
        root = make_tree({"lib/x.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "src"), str(root / "lib/x")) == str(root / "lib/x.js")

    def test_directory_index(self, make_tree, resolver_config):
        root = make_tree({"lib/index.ts": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "./lib") == str(root / "lib/index.ts")

    def test_file_beats_directory_index(self, make_tree, resolver_config):
        root = make_tree({"lib.js": "", "lib/index.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "./lib") == str(root / "lib.js")

    def test_trailing_slash_forces_directory(self, make_tree, resolver_config):
        root = make_tree({"lib.js": "", "lib/index.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "./lib/") == str(root / "lib/index.js")

    def test_dot_specifier_is_directory_index(self, make_tree, resolver_config):
        root = make_tree({"pkg/index.js": "", "pkg/a.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "pkg"), ".") == str(root / "pkg/index.js")

    def test_empty_extensions_disable_probing(self, make_tree, resolver_config):
        root = make_tree({"foo.js": ""})
        resolver = _resolver(resolver_config, extensions=())
        assert resolver.resolve(str(root), "./foo.js") == str(root / "foo.js")
        with pytest.raises(UnresolvedImportError):
            resolver.resolve(str(root), "./foo")

    def test_directory_is_not_a_file(self, make_tree, resolver_config):
        root = make_tree({"empty/readme.md": ""})
        resolver = _resolver(resolver_config)
        with pytest.raises(UnresolvedImportError):
            resolver.resolve(str(root), "./empty")


class TestUnresolved:
    def test_error_carries_specifier_and_candidates(self, make_tree, resolver_config):
        root = make_tree({"a.js": ""})
        resolver = _resolver(resolver_config, extensions=(".js", ".ts"))
        with pytest.raises(UnresolvedImportError) as exc_info:
            resolver.resolve(str(root), "./missing")
        err = exc_info.value
        assert err.specifier == "./missing"
        assert str(root / "missing") in err.tried
        assert str(root / "missing.ts") in err.tried
        assert "Cannot find module './missing'" in str(err)

    def test_unresolved_outcome_is_cached(self, make_tree, resolver_config):
        root = make_tree({"a.js": ""})
        cache = ResolutionCache()
        resolver = ModuleResolver(resolver_config, cache=cache)
        for _ in range(2):
            with pytest.raises(UnresolvedImportError):
                resolver.resolve(str(root), "./missing")
        assert cache.hits == 1


# ── Bare specifiers ───────────────────────────────────────────────


class TestModuleDirectories:
    def test_walks_upward(self, make_tree, resolver_config):
        root = make_tree({"node_modules/pkg/index.js": "", "src/deep/a.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "src/deep"), "pkg") == str(
            root / "node_modules/pkg/index.js"
        )

    def test_nearest_module_directory_wins(self, make_tree, resolver_config):
        root = make_tree(
            {
                "node_modules/pkg/index.js": "",
                "src/node_modules/pkg/index.js": "",
            }
        )
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root / "src"), "pkg") == str(
            root / "src/node_modules/pkg/index.js"
        )

    def test_stops_at_root(self, project, resolver_config):
        outside = project.parent / "node_modules" / "escaped"
        outside.mkdir(parents=True)
        (outside / "index.js").write_text("")
        (project / "src").mkdir()
        resolver = _resolver(resolver_config)
        with pytest.raises(UnresolvedImportError):
            resolver.resolve(str(project / "src"), "escaped")

    def test_module_file_with_extension_probing(self, make_tree, resolver_config):
        root = make_tree({"node_modules/lodash/get.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "lodash/get") == str(root / "node_modules/lodash/get.js")

    def test_package_main_field(self, make_tree, resolver_config):
        root = make_tree(
            {
                "node_modules/pkg/package.json": json.dumps({"main": "dist/entry"}),
                "node_modules/pkg/dist/entry.js": "",
                "node_modules/pkg/index.js": "",
            }
        )
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "pkg") == str(root / "node_modules/pkg/dist/entry.js")

    def test_main_fields_in_order(self, make_tree, resolver_config):
        root = make_tree(
            {
                "node_modules/pkg/package.json": json.dumps(
                    {"main": "cjs.js", "module": "esm.js"}
                ),
                "node_modules/pkg/cjs.js": "",
                "node_modules/pkg/esm.js": "",
            }
        )
        resolver = _resolver(resolver_config, main_fields=("module", "main"))
        assert resolver.resolve(str(root), "pkg") == str(root / "node_modules/pkg/esm.js")

    def test_broken_package_json_falls_back_to_index(self, make_tree, resolver_config):
        root = make_tree(
            {
                "node_modules/pkg/package.json": "{not json",
                "node_modules/pkg/index.js": "",
            }
        )
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "pkg") == str(root / "node_modules/pkg/index.js")

    def test_custom_module_directory_order(self, make_tree, resolver_config):
        root = make_tree({"web_modules/pkg.js": "", "node_modules/pkg.js": ""})
        resolver = _resolver(resolver_config, module_directories=("web_modules", "node_modules"))
        assert resolver.resolve(str(root), "pkg") == str(root / "web_modules/pkg.js")

    def test_absolute_module_directory(self, make_tree, resolver_config):
        root = make_tree({"vendor/lib/tool.js": ""})
        resolver = _resolver(
            resolver_config, module_directories=("node_modules", str(root / "vendor/lib"))
        )
        assert resolver.resolve(str(root / "src"), "tool") == str(root / "vendor/lib/tool.js")

    def test_in_module_directory(self, make_tree, resolver_config):
        root = make_tree({"node_modules/pkg/index.js": ""})
        resolver = _resolver(resolver_config)
        assert resolver.in_module_directory(str(root / "node_modules/pkg/index.js"))
        assert not resolver.in_module_directory(str(root / "src/a.js"))


# ── Alias, symlinks, built-ins ────────────────────────────────────


class TestAlias:
    def test_prefix_alias(self, make_tree, resolver_config):
        root = make_tree({"src/app/widgets/button.tsx": ""})
        resolver = _resolver(resolver_config, alias={"@app": ["src/app"]})
        assert resolver.resolve(str(root / "test"), "@app/widgets/button") == str(
            root / "src/app/widgets/button.tsx"
        )

    def test_exact_alias(self, make_tree, resolver_config):
        root = make_tree({"src/config/index.js": ""})
        resolver = _resolver(resolver_config, alias={"config": ["src/config"]})
        assert resolver.resolve(str(root), "config") == str(root / "src/config/index.js")

    def test_alias_prefix_needs_segment_boundary(self, make_tree, resolver_config):
        root = make_tree({"node_modules/@apple/x.js": "", "src/app/x.js": ""})
        resolver = _resolver(resolver_config, alias={"@app": ["src/app"]})
        assert resolver.resolve(str(root), "@apple/x") == str(root / "node_modules/@apple/x.js")

    def test_alias_miss_falls_through(self, make_tree, resolver_config):
        root = make_tree({"node_modules/@app/x.js": ""})
        resolver = _resolver(resolver_config, alias={"@app": ["missing"]})
        assert resolver.resolve(str(root), "@app/x") == str(root / "node_modules/@app/x.js")


class TestSymlinks:
    def test_two_routes_collapse(self, make_tree, resolver_config):
        root = make_tree({"real/target.js": ""})
        os.symlink(root / "real" / "target.js", root / "link.js")
        resolver = _resolver(resolver_config)
        assert resolver.resolve(str(root), "./link") == resolver.resolve(
            str(root), "./real/target"
        )

    def test_symlinked_package_resolves_to_real_path(self, make_tree, resolver_config):
        root = make_tree({"packages/shared/index.js": ""})
        (root / "node_modules").mkdir()
        os.symlink(root / "packages" / "shared", root / "node_modules" / "shared")
        resolver = _resolver(resolver_config)
        resolved = resolver.resolve(str(root), "shared")
        assert resolved == str(root / "packages/shared/index.js")
        assert not resolver.in_module_directory(resolved)

    def test_symlinks_off_keeps_link_path(self, make_tree, resolver_config):
        root = make_tree({"real.js": ""})
        os.symlink(root / "real.js", root / "link.js")
        resolver = _resolver(resolver_config, symlinks=False)
        assert resolver.resolve(str(root), "./link") == str(root / "link.js")


class TestBuiltins:
    def test_builtins_flagged(self, resolver_config):
        resolver = _resolver(resolver_config)
        assert resolver.is_builtin("fs")
        assert resolver.is_builtin("node:path")

    def test_builtins_disabled(self, resolver_config):
        resolver = _resolver(resolver_config, builtin_modules=False)
        assert not resolver.is_builtin("fs")


class TestCaseInsensitive:
    def test_ids_are_case_folded(self, make_tree, resolver_config):
        root = make_tree({"Src/Util.js": ""})
        resolver = _resolver(resolver_config, case_sensitive=False)
        assert resolver.resolve(str(root / "Src"), "./Util") == str(root / "Src/Util.js").casefold()


class TestResolutionCache:
    def test_shared_cache_reused_then_cleared(self, make_tree, resolver_config):
        root = make_tree({"a.js": "", "b.js": ""})
        cache = ResolutionCache()
        first = ModuleResolver(resolver_config, cache=cache)
        first.resolve(str(root), "./b")
        assert len(cache) == 1

        second = ModuleResolver(resolver_config, cache=cache)
        assert second.resolve(str(root), "./b") == str(root / "b.js")
        assert cache.hits == 1

        cache.clear()
        assert len(cache) == 0
        assert cache.hits == 0

    def test_package_manifest_memoized(self, make_tree):
        root = make_tree({"pkg/package.json": json.dumps({"main": "lib.js"})})
        cache = ResolutionCache()
        assert cache.package_manifest(str(root / "pkg")) == {"main": "lib.js"}
        (root / "pkg/package.json").write_text("{}")
        assert cache.package_manifest(str(root / "pkg")) == {"main": "lib.js"}
        assert cache.package_manifest(str(root)) is None

    def test_shared_cache_keeps_configs_apart(self, make_tree):
        root = make_tree({"a.js": "", "foo.ts": ""})
        cache = ResolutionCache()
        js_only = ResolverConfig(extensions=(".js",), root_dir=str(root), case_sensitive=True)
        with_ts = ResolverConfig(extensions=(".ts",), root_dir=str(root), case_sensitive=True)

        with pytest.raises(UnresolvedImportError):
            ModuleResolver(js_only, cache=cache).resolve(str(root), "./foo")
        assert ModuleResolver(with_ts, cache=cache).resolve(str(root), "./foo") == str(root / "foo.ts")
        assert len(cache) == 2
