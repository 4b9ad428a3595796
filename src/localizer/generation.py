"""
Chat-completion client used for translation and proofreading.
"""

import logging
import os

from openai import AsyncOpenAI, OpenAIError

logger = logging.getLogger("localizer")

DEFAULT_MODEL = "gpt-4o-mini"


class GenerationError(Exception):
    """Base class for text generation errors."""


class GenerationUnavailable(GenerationError):
    """No API credential is configured."""


class GenerationFailure(GenerationError):
    """A generation request was attempted and failed."""


class TextGenerator:
    """Send a system + user prompt and return the top response text."""

    def __init__(self, client: AsyncOpenAI, model: str = DEFAULT_MODEL, max_tokens: int | None = None):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, system: str, user: str, temperature: float = 0.1) -> str:
        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
        }
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise GenerationFailure(f"{type(e).__name__}: {e}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise GenerationFailure("Response contained no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not content or not str(content).strip():
            raise GenerationFailure("Response content is empty")

        text = str(content).strip()
        logger.debug(f"Generated {len(text)} characters with {self.model}")
        return text


def create_generator(
    api_key: str | None = None,
    model: str | None = None,
    timeout: float | None = None,
    *,
    strict: bool = False,
) -> TextGenerator | None:
    """Create a generator from arguments or environment.

    Returns ``None`` when no OPENAI_API_KEY is configured, so callers take
    their degraded path explicitly. With ``strict=True`` a missing key raises
    GenerationUnavailable instead.
    """
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        if strict:
            raise GenerationUnavailable("OpenAI client is not initialized (missing OPENAI_API_KEY)")
        logger.warning("OPENAI_API_KEY not set; translations fall back to language tagging")
        return None

    model = model or os.getenv("OPENAI_MODEL") or DEFAULT_MODEL
    if timeout is None and os.getenv("OPENAI_TIMEOUT"):
        timeout = float(os.environ["OPENAI_TIMEOUT"])

    kwargs = {"api_key": api_key}
    if timeout is not None:
        kwargs["timeout"] = timeout
    return TextGenerator(AsyncOpenAI(**kwargs), model=model)
