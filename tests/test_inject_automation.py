"""Tests for diffcritic.inject.automation."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from diffcritic.exceptions import AutomationError
from diffcritic.inject.automation import (
    AppleScriptChannel,
    AutomationInjector,
    escape_applescript,
    transient_script,
)

RUN = "diffcritic.inject.automation.subprocess.run"


class TestEscape:
    def test_quotes_and_backslashes(self):
        assert escape_applescript('say "hi" \\o/') == 'say \\"hi\\" \\\\o/'

    def test_newlines(self):
        assert escape_applescript("a\nb\r\nc") == "a\\nb\\nc"

    def test_tabs(self):
        assert escape_applescript("a\tb") == "a\\tb"

    def test_backslash_escaped_first(self):
        assert escape_applescript('\\"') == '\\\\\\"'


class TestBuildScript:
    def test_payload(self):
        script = AppleScriptChannel(app_name="Cursor").build_script('1. [Line 2] Bug - use "=="\nok')
        assert 'tell application "Cursor" to activate' in script
        assert 'keystroke "1. [Line 2] Bug - use \\"==\\"\\nok"' in script
        assert "key code 36" in script

    def test_app_name_escaped(self):
        script = AppleScriptChannel(app_name='Weird "App"').build_script("x")
        assert 'tell application "Weird \\"App\\"" to activate' in script


class TestTransientScript:
    def test_removed_after_use(self):
        with transient_script("display dialog 1") as path:
            assert path.read_text() == "display dialog 1"
        assert not path.exists()

    def test_removed_on_error(self):
        with pytest.raises(RuntimeError):
            with transient_script("x") as path:
                raise RuntimeError("boom")
        assert not path.exists()

    def test_unique_names(self):
        with transient_script("a") as first, transient_script("b") as second:
            assert first != second


class TestDeliver:
    def test_runs_interpreter_on_script_file(self):
        seen: dict[str, object] = {}

        def run(cmd, **kwargs):
            path = Path(cmd[1])
            seen["cmd"] = cmd
            seen["exists"] = path.exists()
            seen["source"] = path.read_text()
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        with patch(RUN, side_effect=run):
            AppleScriptChannel(app_name="Cursor").deliver("hello")

        assert seen["cmd"][0] == "osascript"
        assert seen["exists"] is True
        assert 'keystroke "hello"' in seen["source"]
        assert not Path(seen["cmd"][1]).exists()

    def test_script_failure(self):
        paths: list[Path] = []

        def run(cmd, **kwargs):
            paths.append(Path(cmd[1]))
            raise subprocess.CalledProcessError(1, cmd, stderr="execution error: not allowed")

        with patch(RUN, side_effect=run):
            with pytest.raises(AutomationError, match="not allowed"):
                AppleScriptChannel().deliver("hello")
        assert paths and not paths[0].exists()

    def test_interpreter_missing(self):
        with patch(RUN, side_effect=FileNotFoundError):
            with pytest.raises(AutomationError, match="osascript not found"):
                AppleScriptChannel().deliver("hello")

    def test_timeout(self):
        with patch(RUN, side_effect=subprocess.TimeoutExpired("osascript", 120)):
            with pytest.raises(AutomationError, match="timed out"):
                AppleScriptChannel().deliver("hello")


class TestAutomationInjector:
    def test_delivers_raw_review(self):
        channel = MagicMock()
        assert AutomationInjector(channel).deliver("1. [Line 1] x") == "1. [Line 1] x"
        channel.deliver.assert_called_once_with("1. [Line 1] x")
