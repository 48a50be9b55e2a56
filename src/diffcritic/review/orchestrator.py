"""The review command: diff → prompt → service → injection."""

from __future__ import annotations

import logging

from diffcritic.client import ReviewClient
from diffcritic.exceptions import DiffcriticError, NoWorkspaceError
from diffcritic.host import EditorHost
from diffcritic.inject.automation import (
    AppleScriptChannel,
    AutomationInjector,
    ExternalDeliveryChannel,
)
from diffcritic.inject.buffer import BufferInjector
from diffcritic.models import DeliveryMode, InvocationContext, ReviewOutcome, ReviewState, Settings
from diffcritic.review.differ import collect_diff
from diffcritic.review.locator import resolve_repository_root
from diffcritic.review.prompt import build_prompt

PREVIEW_QUESTION = "Preview the review before it is injected?"


class ReviewCommand:
    """Runs one review invocation at a time against an editor host.

    Every error raised below this class surfaces here and is reported
    through ``host.error``; the command always ends back in IDLE.
    """

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: ReviewClient | None = None,
        channel: ExternalDeliveryChannel | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.client = client or ReviewClient(
            provider=settings.provider,
            model=settings.resolved_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
        )
        self.channel = channel or AppleScriptChannel(app_name=settings.target_app)
        self.state = ReviewState.IDLE
        self.history: list[ReviewState] = []

    def _transition(self, state: ReviewState) -> None:
        self.logger.debug("%s -> %s", self.state, state)
        self.state = state
        self.history.append(state)

    def _context(self, host: EditorHost) -> InvocationContext:
        file_path = host.active_file()
        if file_path is None:
            raise NoWorkspaceError("No active file to review")
        workspace = host.workspace_root()
        if workspace is None:
            raise NoWorkspaceError("No workspace detected")
        return InvocationContext(file_path=file_path, workspace_root=workspace)

    def run(self, host: EditorHost) -> ReviewOutcome:
        self.history = []
        try:
            outcome = self._run(host)
        except DiffcriticError as e:
            self._transition(ReviewState.FAILED)
            self.logger.error("Review failed: %s", e)
            host.error(str(e))
            outcome = ReviewOutcome(state=ReviewState.FAILED, message=str(e))
        self._transition(ReviewState.IDLE)
        return outcome

    def _run(self, host: EditorHost) -> ReviewOutcome:
        ctx = self._context(host)
        self._transition(ReviewState.DIFF_DISCOVERY)
        self.logger.debug("Workspace: %s", ctx.workspace_root)
        self.logger.debug("FilePath: %s", ctx.file_path)

        repo_root = resolve_repository_root([ctx.file_path.parent, ctx.workspace_root])
        self.logger.debug("Git root: %s", repo_root)
        diff = collect_diff(repo_root, ctx.file_path)

        if not diff.strip():
            self._transition(ReviewState.NO_CHANGES)
            message = "No changes to review."
            host.info(message)
            return ReviewOutcome(state=ReviewState.NO_CHANGES, message=message)

        prompt = build_prompt(ctx.file_name, ctx.extension, diff)
        self._transition(ReviewState.PROMPT_READY)

        want_preview = self.settings.ask_preview and host.confirm(PREVIEW_QUESTION)

        self._transition(ReviewState.AWAITING_SERVICE)
        host.info(f"Reviewing {ctx.file_name} with {self.settings.provider}...")
        review = self.client.review(prompt, self.settings.api_key)
        self._transition(ReviewState.REVIEW_READY)

        if want_preview:
            host.preview(review)

        if self.settings.delivery == DeliveryMode.AUTOMATION:
            injected = AutomationInjector(self.channel).deliver(review)
            message = f"Review typed into {self.settings.target_app}."
        else:
            injected = BufferInjector().deliver(host, review, ctx.extension)
            message = f"Review injected into {ctx.file_name}."

        self._transition(ReviewState.INJECTED)
        host.info(message)
        return ReviewOutcome(
            state=ReviewState.INJECTED,
            message=message,
            review=review,
            injected_text=injected,
        )
