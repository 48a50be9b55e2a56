"""Shared test fixtures for diffcritic."""

from __future__ import annotations

from pathlib import Path

import pytest

from diffcritic.models import CursorPosition


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate each test: temp config dir, temp home and cwd, no API keys."""
    config_dir = tmp_path / ".diffcritic"
    config_dir.mkdir()
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("DIFFCRITIC_DIR", str(config_dir))
    monkeypatch.setenv("HOME", str(home))
    for var in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        # set first so teardown also undoes values a .env file loaded
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    """Pre-created config directory."""
    d = tmp_path / ".diffcritic"
    d.mkdir(exist_ok=True)
    return d


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A directory carrying a .git marker, with a changed TypeScript file."""
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "src" / "app.ts").write_text("const a = 1;\nconst b = 2;\n")
    return root


class FakeHost:
    """In-memory EditorHost that records everything shown to the user."""

    def __init__(
        self,
        file_path: Path | None,
        workspace: Path | None,
        cursor: CursorPosition | None = CursorPosition(line=1),
        confirm_answer: bool = False,
    ) -> None:
        self.file_path = file_path
        self.workspace = workspace
        self.cursor = cursor
        self.confirm_answer = confirm_answer
        self.inserted: list[tuple[CursorPosition, str]] = []
        self.infos: list[str] = []
        self.errors: list[str] = []
        self.questions: list[str] = []
        self.previews: list[str] = []

    def active_file(self) -> Path | None:
        return self.file_path

    def workspace_root(self) -> Path | None:
        return self.workspace

    def cursor_position(self) -> CursorPosition | None:
        return self.cursor

    def insert_text(self, position: CursorPosition, text: str) -> None:
        self.inserted.append((position, text))

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.confirm_answer

    def preview(self, text: str) -> None:
        self.previews.append(text)


@pytest.fixture
def fake_host_cls() -> type[FakeHost]:
    return FakeHost
