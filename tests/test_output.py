"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- print_mapping and print_table in JSON and plain modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from codeflow import output as output_module
from codeflow.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("codeflow.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("codeflow.output._is_tty", lambda: True)


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_no_color(self, tty):
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_kept(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_default(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestDataOutput:
    def test_mapping_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_mapping({"uid": "1", "name": "Dan"})

        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"uid": "1", "name": "Dan"}
        assert captured.err == ""

    def test_mapping_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_mapping({"uid": "1", "name": "Dan"})

        assert capsys.readouterr().out == "uid\t1\nname\tDan\n"

    def test_table_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_table(
            ["provider", "status"], [["github", "ok"]]
        )

        assert json.loads(capsys.readouterr().out) == [{"provider": "github", "status": "ok"}]

    def test_table_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_table(
            ["provider", "status"], [["github", "ok"], ["example", "No user URL set"]]
        )

        assert capsys.readouterr().out == (
            "provider\tstatus\ngithub\tok\nexample\tNo user URL set\n"
        )


class TestDiagnostics:
    def test_messages_go_to_stderr(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.info("info")
        mgr.success("done")
        mgr.warning("careful")
        mgr.error("failed")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "info\ndone\nWarning: careful\nError: failed\n"

    def test_quiet_suppresses_info_and_success_only(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("info")
        mgr.success("done")
        mgr.warning("careful")
        mgr.error("failed")

        assert capsys.readouterr().err == "Warning: careful\nError: failed\n"

    def test_debug_requires_verbose(self, capsys):
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")

        assert capsys.readouterr().err == "[debug] shown\n"


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_output(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_module_helpers_delegate(self, capsys):
        set_output(OutputManager(no_color=True))
        output_module.error("boom")

        assert capsys.readouterr().err == "Error: boom\n"
