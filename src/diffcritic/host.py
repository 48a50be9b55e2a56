"""Editor host capabilities consumed by the review command."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from diffcritic.exceptions import NoActiveTargetError
from diffcritic.models import CursorPosition


class EditorHost(Protocol):
    """What the review command needs from the application hosting it."""

    def active_file(self) -> Path | None: ...

    def workspace_root(self) -> Path | None: ...

    def cursor_position(self) -> CursorPosition | None: ...

    def insert_text(self, position: CursorPosition, text: str) -> None: ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def confirm(self, message: str) -> bool: ...

    def preview(self, text: str) -> None: ...


class TerminalHost:
    """Host backed by a file on disk and the terminal.

    The "buffer" is the file itself and the cursor is a line number;
    inserted text goes before that line.
    """

    def __init__(
        self,
        file_path: str | Path,
        workspace: str | Path | None = None,
        line: int = 1,
        console: Console | None = None,
    ) -> None:
        self.file_path = Path(file_path).expanduser().resolve()
        self.workspace = Path(workspace).expanduser().resolve() if workspace else None
        self.line = line
        self.console = console or Console()

    def active_file(self) -> Path | None:
        return self.file_path if self.file_path.is_file() else None

    def workspace_root(self) -> Path | None:
        if self.workspace is not None:
            return self.workspace if self.workspace.is_dir() else None
        cwd = Path.cwd().resolve()
        if self.file_path.is_relative_to(cwd):
            return cwd
        return None

    def cursor_position(self) -> CursorPosition | None:
        if not self.file_path.is_file() or self.line < 1:
            return None
        return CursorPosition(line=self.line)

    def insert_text(self, position: CursorPosition, text: str) -> None:
        try:
            with open(self.file_path, encoding="utf-8", newline="") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise NoActiveTargetError(f"Could not read {self.file_path}: {e}") from e

        index = min(position.line - 1, len(lines))
        if index == len(lines) and lines and not lines[-1].endswith("\n"):
            lines[-1] += "\n"
        lines.insert(index, text)

        try:
            with open(self.file_path, "w", encoding="utf-8", newline="") as f:
                f.writelines(lines)
        except OSError as e:
            raise NoActiveTargetError(f"Could not write {self.file_path}: {e}") from e

    def info(self, message: str) -> None:
        self.console.print(escape(message))

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def confirm(self, message: str) -> bool:
        return typer.confirm(message, default=False)

    def preview(self, text: str) -> None:
        self.console.print(Panel(escape(text), title="Review preview"))
