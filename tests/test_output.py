"""Tests for CLI output formatting.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb colour disabling
- stdout vs stderr discipline
- The quiet flag
- JSON and plain rendering of response bodies
- Global instance management and convenience functions
"""

from __future__ import annotations

import json

import pytest

from cacheaside import output as output_module
from cacheaside.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("cacheaside.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("cacheaside.output._is_tty", lambda: True)


@pytest.fixture()
def plain(non_tty) -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True)


@pytest.fixture()
def as_json(non_tty) -> OutputManager:
    return OutputManager(format=OutputFormat.JSON, no_color=True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_flag_forces_plain_on_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_kept(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON
        assert OutputManager(format=OutputFormat.RICH).format == OutputFormat.RICH


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_print_data_goes_to_stdout(self, capfd, plain):
        plain.print_data("GET:/users:{}")
        captured = capfd.readouterr()
        assert captured.out == "GET:/users:{}\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "error"])
    def test_diagnostics_go_to_stderr(self, capfd, plain, method):
        getattr(plain, method)("cache miss")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "cache miss" in captured.err

    def test_error_prefix_without_color(self, capfd, plain):
        plain.error("down")
        assert capfd.readouterr().err == "Error: down\n"


class TestQuiet:
    def test_quiet_suppresses_info_and_success(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors_and_data(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.error("e")
        mgr.print_data("data")
        captured = capfd.readouterr()
        assert "Error: e" in captured.err
        assert captured.out == "data\n"


# ------------------------------------------------------------------ #
# Rendering response bodies
# ------------------------------------------------------------------ #


class TestJsonFormat:
    def test_dict(self, capfd, as_json):
        data = {"users": [{"id": 1, "name": "Alice"}]}
        as_json.format_response(data)
        captured = capfd.readouterr()
        assert json.loads(captured.out) == data
        assert "\n  " in captured.out

    def test_json_string_reparsed(self, capfd, as_json):
        as_json.format_response('{"key": "value"}')
        assert json.loads(capfd.readouterr().out) == {"key": "value"}

    def test_plain_string_passthrough(self, capfd, as_json):
        as_json.format_response("hello world")
        assert capfd.readouterr().out == "hello world\n"

    def test_number(self, capfd, as_json):
        as_json.format_response(42)
        assert json.loads(capfd.readouterr().out) == 42

    def test_diagnostics_do_not_leak(self, capfd, as_json):
        as_json.info("fetching")
        as_json.format_response({"result": "ok"})
        as_json.success("done")
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"result": "ok"}
        assert "fetching" in captured.err


class TestPlainFormat:
    def test_dict_as_key_value(self, capfd, plain):
        plain.format_response({"name": "Alice", "age": 30})
        assert capfd.readouterr().out == "name\tAlice\nage\t30\n"

    def test_list_of_dicts_as_rows(self, capfd, plain):
        plain.format_response([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])
        assert capfd.readouterr().out == "1\ta\n2\tb\n"

    def test_list_of_scalars(self, capfd, plain):
        plain.format_response(["x", "y"])
        assert capfd.readouterr().out == "x\ny\n"

    def test_scalar(self, capfd, plain):
        plain.format_response("text body")
        assert capfd.readouterr().out == "text body\n"


class TestRichFormat:
    def test_dict_rendered_as_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.format_response({"key": "value"})
        out = capfd.readouterr().out
        assert '"key"' in out
        assert '"value"' in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default_lazily(self, non_tty):
        reset_output()
        first = get_output()
        assert isinstance(first, OutputManager)
        assert get_output() is first

    def test_set_output(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        output_module.info("info msg")
        output_module.error("err msg")
        output_module.success("ok msg")
        output_module.format_response({"a": 1})
        captured = capfd.readouterr()
        assert "info msg" in captured.err
        assert "Error: err msg" in captured.err
        assert "ok msg" in captured.err
        assert json.loads(captured.out) == {"a": 1}
