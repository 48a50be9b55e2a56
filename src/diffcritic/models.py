"""Pydantic v2 models and enums for diffcritic."""

from __future__ import annotations

import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    from enum import StrEnum
else:
    from enum import Enum

    class StrEnum(str, Enum):
        """Backport for Python 3.10."""


from pydantic import BaseModel, ConfigDict


class Provider(StrEnum):
    """Supported chat-completion services."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class DeliveryMode(StrEnum):
    """How review text reaches the user."""

    BUFFER = "buffer"
    AUTOMATION = "automation"


class ReviewState(StrEnum):
    """States of a single review invocation."""

    IDLE = "idle"
    DIFF_DISCOVERY = "diff_discovery"
    NO_CHANGES = "no_changes"
    PROMPT_READY = "prompt_ready"
    AWAITING_SERVICE = "awaiting_service"
    REVIEW_READY = "review_ready"
    FAILED = "failed"
    INJECTED = "injected"


DEFAULT_MODELS: dict[str, str] = {
    Provider.OPENAI: "gpt-4o",
    Provider.ANTHROPIC: "claude-sonnet-4-20250514",
}

DEFAULT_PROVIDER = Provider.OPENAI
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TIMEOUT = 60.0
DEFAULT_TARGET_APP = "Cursor"


class InvocationContext(BaseModel):
    """The file under review and the project that contains it."""

    model_config = ConfigDict(frozen=True)

    file_path: Path
    workspace_root: Path

    @property
    def file_name(self) -> str:
        return self.file_path.name

    @property
    def extension(self) -> str:
        return self.file_path.suffix.lower()


class CursorPosition(BaseModel):
    """1-based cursor line in the active buffer.

    Insertion is line-granular: review blocks go before the cursor line.
    """

    model_config = ConfigDict(frozen=True)

    line: int = 1


class Settings(BaseModel):
    """Resolved configuration for one process."""

    model_config = ConfigDict(frozen=True)

    provider: Provider = DEFAULT_PROVIDER
    model: str = ""
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT
    api_key: str = ""
    delivery: DeliveryMode = DeliveryMode.BUFFER
    target_app: str = DEFAULT_TARGET_APP
    ask_preview: bool = False

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider]


class ReviewOutcome(BaseModel):
    """Terminal result of a review invocation."""

    state: ReviewState
    message: str = ""
    review: str = ""
    injected_text: str = ""

    @property
    def ok(self) -> bool:
        return self.state != ReviewState.FAILED
