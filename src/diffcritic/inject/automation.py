"""Keystroke delivery into another application through OS scripting.

Best effort only: delivery depends on window focus and on the keystroke
layer reproducing every character, and nothing confirms the text arrived.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol

from diffcritic.exceptions import AutomationError
from diffcritic.models import DEFAULT_TARGET_APP

logger = logging.getLogger(__name__)

OSASCRIPT_TIMEOUT = 120


class ExternalDeliveryChannel(Protocol):
    """Something that can push text into another running application."""

    def build_script(self, text: str) -> str: ...

    def deliver(self, text: str) -> None: ...


def escape_applescript(text: str) -> str:
    """Escape text for an AppleScript double-quoted string literal."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def escape_app_name(name: str) -> str:
    """Escape an application name for a quoted AppleScript `tell` target."""
    return name.replace("\\", "\\\\").replace('"', '\\"')


@contextmanager
def transient_script(source: str, suffix: str = ".applescript") -> Iterator[Path]:
    """Write ``source`` to a uniquely named temp file, removed on every exit path."""
    fd, name = tempfile.mkstemp(prefix="diffcritic-", suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(source)
        yield path
    finally:
        path.unlink(missing_ok=True)


class AppleScriptChannel:
    """Activate an app with osascript and type the text followed by Return."""

    def __init__(
        self,
        app_name: str = DEFAULT_TARGET_APP,
        interpreter: str = "osascript",
        activate_delay: float = 0.5,
    ) -> None:
        self.app_name = app_name
        self.interpreter = interpreter
        self.activate_delay = activate_delay

    def build_script(self, text: str) -> str:
        return (
            f'tell application "{escape_app_name(self.app_name)}" to activate\n'
            f"delay {self.activate_delay}\n"
            'tell application "System Events"\n'
            f'    keystroke "{escape_applescript(text)}"\n'
            "    key code 36\n"
            "end tell\n"
        )

    def deliver(self, text: str) -> None:
        script = self.build_script(text)
        with transient_script(script) as path:
            logger.debug("Running %s %s for %s", self.interpreter, path, self.app_name)
            try:
                subprocess.run(
                    [self.interpreter, str(path)],
                    capture_output=True,
                    text=True,
                    check=True,
                    timeout=OSASCRIPT_TIMEOUT,
                )
            except FileNotFoundError:
                raise AutomationError(
                    f"{self.interpreter} not found. UI automation requires macOS."
                ) from None
            except subprocess.CalledProcessError as e:
                raise AutomationError(f"UI automation failed: {(e.stderr or '').strip()}") from e
            except subprocess.TimeoutExpired:
                raise AutomationError(
                    f"UI automation timed out after {OSASCRIPT_TIMEOUT} seconds"
                ) from None


class AutomationInjector:
    """Type the raw review into the target application."""

    def __init__(self, channel: ExternalDeliveryChannel) -> None:
        self.channel = channel

    def deliver(self, review: str) -> str:
        self.channel.deliver(review)
        return review
