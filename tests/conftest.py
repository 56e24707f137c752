"""Shared test fixtures for affected-tests."""

import os
from pathlib import Path
from typing import Callable, Mapping, Union

import pytest

from affected_tests.config import ResolverConfig

FIXTURES = Path(__file__).parent / "fixtures"


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def project(tmp_path) -> Path:
    """Real path of an empty project root."""
    root = tmp_path / "project"
    root.mkdir()
    return Path(os.path.realpath(root))


@pytest.fixture
def make_tree(project) -> Callable[[Mapping[str, Union[str, bytes]]], Path]:
    """Factory writing ``{relative path: contents}`` under the project root.

    Returns the project root. Parent directories are created as needed.
    """

    def _make(files: Mapping[str, Union[str, bytes]]) -> Path:
        for rel, contents in files.items():
            path = project / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(contents, bytes):
                path.write_bytes(contents)
            else:
                path.write_text(contents, encoding="utf-8")
        return project

    return _make


@pytest.fixture
def resolver_config(project) -> ResolverConfig:
    """Default resolver rooted at the project, case-sensitive for stable ids."""
    return ResolverConfig(root_dir=str(project), case_sensitive=True)


@pytest.fixture
def nested_fixture() -> Path:
    """Checked-in tree: two spec files that both reach another-module.js."""
    return Path(os.path.realpath(FIXTURES / "nested"))
