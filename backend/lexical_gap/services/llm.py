"""
Thin transport over the OpenAI chat completions API.

Every call is a single attempt: failures propagate to the caller, which
decides whether they become a user-visible error or an empty result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    OpenAIError,
    RateLimitError,
)

from lexical_gap.core.errors import ConfigurationError

logger = logging.getLogger("lexical_gap.services.llm")

DEFAULT_MODEL = "gpt-4.1-mini"


@dataclass
class TokenUsage:
    """Token usage reported by a chat completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @property
    def estimated_cost(self) -> float:
        """Rough USD cost at $0.40/1M input and $1.60/1M output tokens."""
        input_cost = (self.prompt_tokens / 1_000_000) * 0.40
        output_cost = (self.completion_tokens / 1_000_000) * 1.60
        return input_cost + output_cost


class LLMService:
    """Chat completion client bound to one model and API key."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        *,
        default_timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError()

        self.model = model
        self.default_timeout = default_timeout
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=default_timeout)

        logger.info("LLM service initialized", extra={"model": model})

    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float,
        max_tokens: int | None = None,
        timeout: float | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> tuple[str, TokenUsage]:
        """
        Send one chat completion request.

        Returns the message text (``""`` when the model returned no content)
        and the token usage. OpenAI errors are logged and re-raised.
        """
        request: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "timeout": timeout or self.default_timeout,
        }
        if max_tokens is not None:
            request["max_tokens"] = max_tokens
        if response_format is not None:
            request["response_format"] = response_format

        try:
            response = await self.client.chat.completions.create(**request)
        except AuthenticationError as e:
            logger.error("LLM authentication failed", extra={"error": str(e)})
            raise
        except BadRequestError as e:
            logger.error(
                "LLM bad request", extra={"error": str(e), "messages_count": len(messages)}
            )
            raise
        except RateLimitError as e:
            logger.warning("LLM rate limit exceeded", extra={"error": str(e)})
            raise
        except (APIConnectionError, APITimeoutError) as e:
            logger.warning(
                "LLM connection error", extra={"error": str(e), "error_type": type(e).__name__}
            )
            raise
        except OpenAIError as e:
            logger.error("LLM API error", extra={"error": str(e), "error_type": type(e).__name__})
            raise

        usage = TokenUsage(
            prompt_tokens=response.usage.prompt_tokens if response.usage else 0,
            completion_tokens=response.usage.completion_tokens if response.usage else 0,
            total_tokens=response.usage.total_tokens if response.usage else 0,
        )

        content = response.choices[0].message.content if response.choices else None
        if content is None:
            logger.error("LLM returned null content", extra={"model": self.model})
            return "", usage

        logger.info(
            "LLM request completed",
            extra={
                "model": self.model,
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
                "total_tokens": usage.total_tokens,
                "estimated_cost_usd": f"{usage.estimated_cost:.6f}",
            },
        )
        return content, usage


__all__ = ["DEFAULT_MODEL", "LLMService", "TokenUsage"]
