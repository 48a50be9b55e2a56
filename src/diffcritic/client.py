"""Chat-completion client for code reviews."""

from __future__ import annotations

import logging
import re

import anthropic
import openai

from diffcritic.exceptions import (
    AuthenticationError,
    ClientError,
    ConfigurationError,
    NetworkError,
    RateLimitError,
    ServiceError,
)
from diffcritic.models import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODELS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    Provider,
)
from diffcritic.review.prompt import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

CREDENTIAL_PATTERNS: dict[str, re.Pattern[str]] = {
    Provider.OPENAI: re.compile(r"^sk-[A-Za-z0-9_\-]+$"),
    Provider.ANTHROPIC: re.compile(r"^sk-ant-[A-Za-z0-9_\-]+$"),
}


def validate_credential(credential: str | None, provider: str = Provider.OPENAI) -> str:
    """Return the stripped credential or raise ConfigurationError."""
    key = (credential or "").strip()
    env_hint = "ANTHROPIC_API_KEY" if provider == Provider.ANTHROPIC else "OPENAI_API_KEY"
    if not key:
        raise ConfigurationError(
            f"No API key configured. Set {env_hint} in the environment or a .env file, "
            "or run 'diffcritic config set api_key <key>'."
        )
    if not CREDENTIAL_PATTERNS[provider].match(key):
        raise ConfigurationError(f"{env_hint} does not look like a valid {provider} API key.")
    return key


def classify_status(status_code: int, message: str) -> ClientError:
    """Map an HTTP error status onto the client error taxonomy."""
    if status_code == 401:
        return AuthenticationError(f"Authentication failed (401): {message}")
    if status_code == 429:
        return RateLimitError(f"Rate limit exceeded (429): {message}")
    return ServiceError(f"Review service error ({status_code}): {message}", status_code=status_code)


def _error_message(e: openai.APIStatusError | anthropic.APIStatusError) -> str:
    body = e.body
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return e.message


class ReviewClient:
    """One-shot review requests against a chat-completion service. Never retries."""

    def __init__(
        self,
        provider: str = Provider.OPENAI,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.provider = Provider(provider)
        self.model = model or DEFAULT_MODELS[self.provider]
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def review(self, prompt: str, credential: str | None) -> str:
        """Send the prompt and return the trimmed review text."""
        key = validate_credential(credential, self.provider)
        logger.debug("Requesting review from %s (%s)", self.provider, self.model)
        if self.provider == Provider.ANTHROPIC:
            text = self._review_anthropic(prompt, key)
        else:
            text = self._review_openai(prompt, key)
        text = text.strip()
        if not text:
            raise ServiceError("Review service returned an empty response")
        return text

    def _review_openai(self, prompt: str, key: str) -> str:
        client = openai.OpenAI(api_key=key, max_retries=0, timeout=self.timeout)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            raise classify_status(e.status_code, _error_message(e)) from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"Could not reach the review service: {e}") from e
        except openai.APIError as e:
            raise ServiceError(f"Review service error: {e}") from e

        if not response.choices:
            raise ServiceError("Review service returned no choices")
        return response.choices[0].message.content or ""

    def _review_anthropic(self, prompt: str, key: str) -> str:
        client = anthropic.Anthropic(api_key=key, max_retries=0, timeout=self.timeout)
        try:
            response = client.messages.create(
                model=self.model,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except anthropic.APIStatusError as e:
            raise classify_status(e.status_code, _error_message(e)) from e
        except anthropic.APIConnectionError as e:
            raise NetworkError(f"Could not reach the review service: {e}") from e
        except anthropic.APIError as e:
            raise ServiceError(f"Review service error: {e}") from e

        text = ""
        for block in response.content:
            if block.type == "text":
                text += block.text
        return text


def review(prompt: str, credential: str | None, provider: str = Provider.OPENAI) -> str:
    """Review ``prompt`` with the default client for ``provider``."""
    return ReviewClient(provider=provider).review(prompt, credential)
