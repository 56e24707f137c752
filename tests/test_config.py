"""Tests for config.py - layered configuration."""

import os
from pathlib import Path

import pytest

from affected_tests.config import AffectedConfig, ResolverConfig, load_config
from affected_tests.exceptions import InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """No global/project config files or AFFECTED_* variables leak in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("AFFECTED_"):
            monkeypatch.delenv(key)
    return home


class TestResolverConfig:
    def test_defaults(self):
        config = ResolverConfig()
        assert config.extensions[:2] == (".js", ".jsx")
        assert config.module_directories == ("node_modules",)
        assert config.builtin_modules is True

    def test_lists_coerced_to_tuples(self):
        config = ResolverConfig(extensions=[".ts"], module_directories=["lib"])
        assert config.extensions == (".ts",)
        assert config.module_directories == ("lib",)

    def test_alias_mapping_coerced(self):
        config = ResolverConfig(alias={"@": "src", "~": ["a", "b"]})
        assert config.alias_map == {"@": ("src",), "~": ("a", "b")}

    def test_invalid_extension(self):
        with pytest.raises(ValueError):
            ResolverConfig(extensions=["ts"])

    def test_empty_module_directory(self):
        with pytest.raises(ValueError):
            ResolverConfig(module_directories=[""])

    def test_from_mapping_camel_case(self):
        config = ResolverConfig.from_mapping(
            {"extensions": [".ts"], "moduleDirectories": ["nm"], "rootDir": "/r", "mainFields": ["module"]}
        )
        assert config.module_directories == ("nm",)
        assert config.root_dir == "/r"
        assert config.main_fields == ("module",)

    def test_from_mapping_unknown_key(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            ResolverConfig.from_mapping({"extension": [".js"]})
        assert exc_info.value.key == "extension"

    def test_from_mapping_is_frozen(self):
        config = ResolverConfig.from_mapping({})
        with pytest.raises(Exception):
            config.root_dir = "/elsewhere"


class TestAffectedConfig:
    def test_validation(self):
        with pytest.raises(ValueError):
            AffectedConfig(workers=0)
        with pytest.raises(ValueError):
            AffectedConfig(max_file_size_mb=0)
        with pytest.raises(ValueError):
            AffectedConfig(verbosity="loud")

    def test_max_file_size_bytes(self):
        assert AffectedConfig(max_file_size_mb=1.0).max_file_size_bytes == 1024 * 1024


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()
        assert config == AffectedConfig()

    def test_project_file_with_resolver_table(self, tmp_path):
        (tmp_path / "affected-tests.toml").write_text(
            'workers = 3\n\n[resolver]\nextensions = [".ts", ".js"]\nrootDir = "src"\n'
        )
        config = load_config()
        assert config.workers == 3
        assert config.resolver.extensions == (".ts", ".js")
        assert config.resolver.root_dir == "src"

    def test_priority_order(self, tmp_path, isolated_env, monkeypatch):
        (isolated_env / ".affected-tests.toml").write_text("workers = 1\ncache_ttl_hours = 5\n")
        (tmp_path / "affected-tests.toml").write_text("workers = 2\n")
        explicit = tmp_path / "ci.toml"
        explicit.write_text("workers = 3\nreport_cycles = true\n")
        monkeypatch.setenv("AFFECTED_WORKERS", "4")

        assert load_config(config_file=explicit).workers == 4
        config = load_config(config_file=explicit, workers=5)
        assert config.workers == 5
        assert config.report_cycles is True
        assert config.cache_ttl_hours == 5

    def test_env_resolver_lists(self, monkeypatch):
        monkeypatch.setenv("AFFECTED_RESOLVER_EXTENSIONS", ".ts, .tsx")
        monkeypatch.setenv("AFFECTED_RESOLVER_SYMLINKS", "false")
        config = load_config()
        assert config.resolver.extensions == (".ts", ".tsx")
        assert config.resolver.symlinks is False

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("AFFECTED_WORKERS", "many")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_resolver_overrides_routed(self):
        config = load_config(extensions=(".mjs",), root_dir="/proj", workers=2)
        assert config.resolver.extensions == (".mjs",)
        assert config.resolver.root_dir == "/proj"
        assert config.workers == 2

    def test_resolver_instance_override(self):
        resolver = ResolverConfig(root_dir="/given")
        assert load_config(resolver=resolver).resolver is resolver

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"

    def test_none_overrides_ignored(self):
        assert load_config(workers=None).workers is None

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(InvalidConfigError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("workers = = 3")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=bad)

    def test_invalid_value_in_file(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("workers = 0")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=bad)

    def test_unknown_key_in_file(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("colour = 'blue'")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=bad)
