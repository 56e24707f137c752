"""Tests for output formatters."""

import json

import pytest

from affected_tests.formatters import (
    JsonFormatter,
    PathsFormatter,
    RichFormatter,
    get_formatter,
)
from affected_tests.formatters.base import display_path
from affected_tests.models import AffectedResult, DynamicSpecifier, UnresolvedSpecifier


@pytest.fixture
def result():
    return AffectedResult(
        files=["/proj/src/b.spec.js", "/proj/src/a.spec.js"],
        errors=[
            UnresolvedSpecifier("./missing", "/proj/src/a.spec.js", "7 candidates tried"),
            DynamicSpecifier("/proj/src/b.spec.js", 4, "name"),
        ],
    )


class TestGetFormatter:
    def test_known(self):
        assert isinstance(get_formatter("rich"), RichFormatter)
        assert isinstance(get_formatter("json"), JsonFormatter)
        assert isinstance(get_formatter("paths"), PathsFormatter)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_formatter("xml")


class TestJsonFormatter:
    def test_shape(self, result):
        data = json.loads(JsonFormatter().format(result, root="/proj"))
        assert data["files"] == ["/proj/src/a.spec.js", "/proj/src/b.spec.js"]
        assert [e["kind"] for e in data["errors"]] == ["unresolved_specifier", "dynamic_specifier"]
        assert data["errors"][0]["specifier"] == "./missing"

    def test_render_prints(self, result, capsys):
        JsonFormatter().render(result)
        assert json.loads(capsys.readouterr().out)["files"]


class TestPathsFormatter:
    def test_sorted_relative(self, result):
        assert PathsFormatter().format(result, root="/proj") == "src/a.spec.js\nsrc/b.spec.js"

    def test_absolute_without_root(self, result):
        assert PathsFormatter().format(result).splitlines()[0] == "/proj/src/a.spec.js"

    def test_empty_prints_nothing(self, capsys):
        PathsFormatter().render(AffectedResult())
        assert capsys.readouterr().out == ""


class TestRichFormatter:
    def test_table_and_errors(self, result):
        text = RichFormatter().format(result, root="/proj")
        assert "Affected tests (2)" in text
        assert "src/a.spec.js" in text
        assert "2 error(s)" in text
        assert "Cannot find module './missing'" in text

    def test_no_affected(self):
        text = RichFormatter().format(AffectedResult())
        assert "No affected tests." in text
        assert "error" not in text


class TestDisplayPath:
    def test_inside_root(self):
        assert display_path("/proj/a/b.js", "/proj") == "a/b.js"

    def test_outside_root(self):
        assert display_path("/other/b.js", "/proj") == "/other/b.js"
