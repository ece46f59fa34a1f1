"""Completion client setup and inference — wraps the openai SDK.

Works with any OpenAI-compatible backend.  The default is Gemini's
OpenAI-compatible endpoint; LM Studio or OpenRouter work by changing
``Config.base_url``.  ``create_client`` resolves the API key and refuses to
build a client for a remote backend without one.

The public interface is ``CompletionClient.complete(prompt)`` returning an
object with a ``.text`` attribute, so call sites and test doubles stay small.
"""

import logging
import os
import re
import time
import urllib.parse

import openai as _openai

from docbrief.models import Config, LLMError, MissingCredentialError

logger = logging.getLogger(__name__)

_MAX_TRANSIENT_RETRIES = 2

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})

#: Environment variables searched for an API key, in order.
API_KEY_ENV_VARS = ("LLM_API_KEY", "GEMINI_API_KEY")


# ---------------------------------------------------------------------------
# Client wrapper
# ---------------------------------------------------------------------------


class _CompletionResponse:
    """Thin wrapper presenting an openai chat response as ``response.text``."""

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text


class CompletionClient:
    """OpenAI-compatible chat completion client.

    Attributes:
        model:     The model identifier passed to every completion request.
        base_url:  The API base URL (kept for log messages).
        timeout_s: Per-request timeout handed to the SDK.
    """

    def __init__(
        self,
        model: str,
        base_url: str,
        api_key: str,
        extra_headers: dict | None = None,
        timeout_s: int = 120,
        max_output_tokens: int | None = None,
    ) -> None:
        self.model = model
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.max_output_tokens = max_output_tokens
        self._client = _openai.OpenAI(
            base_url=base_url,
            api_key=api_key,
            default_headers=extra_headers or {},
        )

    def complete(self, prompt: str) -> _CompletionResponse:
        """Send a chat completion request and return the model's reply."""
        kwargs: dict = dict(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            timeout=self.timeout_s,
        )
        if self.max_output_tokens is not None:
            kwargs["max_tokens"] = self.max_output_tokens
        response = self._client.chat.completions.create(**kwargs)
        return _CompletionResponse(text=response.choices[0].message.content or "")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def resolve_api_key(config: Config) -> str | None:
    """Return the API key from config or environment, or None if unset.

    Resolution order: ``config.api_key``, then each variable in
    ``API_KEY_ENV_VARS``.
    """
    if config.api_key:
        return config.api_key
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def is_local_backend(base_url: str) -> bool:
    """True when ``base_url`` points at this machine (e.g. LM Studio)."""
    host = urllib.parse.urlparse(base_url).hostname or ""
    return host in _LOCAL_HOSTS


def create_client(config: Config) -> CompletionClient:
    """Create a client from configuration.

    Local backends ignore the key, so the dummy ``"lm-studio"`` is used when
    none is configured.  OpenRouter headers are added when ``base_url``
    contains ``"openrouter.ai"``.

    Raises:
        MissingCredentialError: if no key is configured for a remote backend.
    """
    api_key = resolve_api_key(config)
    if api_key is None:
        if not is_local_backend(config.base_url):
            raise MissingCredentialError(
                f"No API key found for {config.base_url} "
                f"(set one of: {', '.join(API_KEY_ENV_VARS)})"
            )
        api_key = "lm-studio"

    extra_headers: dict = {}
    if "openrouter.ai" in config.base_url:
        extra_headers = {
            "HTTP-Referer": "https://github.com/docbrief",
            "X-Title": "docbrief",
        }

    return CompletionClient(
        model=config.model,
        base_url=config.base_url,
        api_key=api_key,
        extra_headers=extra_headers,
        timeout_s=config.timeout_s,
        max_output_tokens=config.max_output_tokens,
    )


def complete_text(client: CompletionClient, prompt: str) -> str:
    """Send a prompt and return the raw reply text.

    Transient 429/5xx errors are retried with backoff; anything else is
    fatal.  No attempt is made to interpret the reply.

    Raises:
        LLMError: if the call fails.
    """
    logger.info("Calling LLM  model=%s  backend=%s", client.model, client.base_url)
    logger.debug(
        "Prompt size: %s chars (~%s tokens)",
        f"{len(prompt):,}",
        f"{len(prompt) // 4:,}",
    )
    t0 = time.monotonic()
    text = _complete_with_retries(client, prompt)
    elapsed = time.monotonic() - t0
    logger.info("Response received (%.1fs, %s chars)", elapsed, f"{len(text):,}")
    return text


def _complete_with_retries(client: CompletionClient, prompt: str) -> str:
    """Run one completion with retry/backoff on transient 429/5xx errors."""
    attempts = _MAX_TRANSIENT_RETRIES + 1
    for attempt in range(1, attempts + 1):
        try:
            response = client.complete(prompt)
            return response.text
        except Exception as exc:
            if attempt >= attempts or not _is_retryable_status_error(exc):
                raise LLMError(f"LLM call failed: {exc}") from exc

            delay_s = _retry_delay_seconds(attempt)
            logger.warning(
                "Transient LLM error on attempt %d/%d (%s); retrying in %.1fs",
                attempt,
                attempts,
                exc,
                delay_s,
            )
            time.sleep(delay_s)

    raise LLMError("LLM call failed after retries")


def _retry_delay_seconds(attempt: int) -> float:
    """Exponential backoff delay: 1.0s, 2.0s, ..."""
    return float(2 ** (attempt - 1))


def _is_retryable_status_error(exc: Exception) -> bool:
    status_code = _extract_status_code(exc)
    if status_code == 429:
        return True
    return status_code is not None and 500 <= status_code <= 599


def _extract_status_code(exc: Exception) -> int | None:
    """Extract HTTP status code from common exception shapes or message text."""
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value

    code_attr = getattr(exc, "code", None)
    if isinstance(code_attr, int) and 100 <= code_attr <= 599:
        return code_attr

    match = re.search(
        r"(?:Error code:|status(?:\s*code)?\s*[:=])\s*(\d{3})",
        str(exc),
        flags=re.IGNORECASE,
    )
    if match:
        return int(match.group(1))
    return None
