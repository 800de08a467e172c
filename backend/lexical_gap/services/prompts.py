"""
Prompt rendering and per-operation request builders.

Wording lives in Jinja2 templates under ``lexical_gap/prompts``; the builders
only choose a template, fill its context, and attach the structured-output
model the response must match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, TypeVar

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from pydantic import BaseModel

from lexical_gap.models.catalog import CEFRLevel
from lexical_gap.schemas.llm_responses import GeneratedExercise, TopicSuggestions

logger = logging.getLogger("lexical_gap.services.prompts")

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

DEFAULT_TOPIC = "General Interest (Science, Culture, or News)"
TOPIC_TEMPERATURE = 0.9
TRANSLATION_TEMPERATURE = 0.3


class PromptRenderer:
    """Renders prompts from Jinja2 templates."""

    def __init__(self, prompts_dir: str | Path = PROMPTS_DIR) -> None:
        self.prompts_dir = Path(prompts_dir)

        if not self.prompts_dir.exists():
            logger.warning(
                "Prompts directory does not exist",
                extra={"prompts_dir": str(self.prompts_dir.absolute())},
            )

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.prompts_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            autoescape=False,  # Prompts are plain text, not HTML  # noqa: S701
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """
        Render a prompt template with given context.

        Raises:
            jinja2.TemplateNotFound: If template file doesn't exist
            jinja2.UndefinedError: If the context misses a template variable
        """
        template = self.jinja_env.get_template(template_name)
        rendered: str = template.render(**context)

        logger.debug(
            "Rendered prompt template",
            extra={
                "template": template_name,
                "context_keys": list(context.keys()),
                "rendered_length": len(rendered),
            },
        )

        return rendered


ResponseT = TypeVar("ResponseT", bound=BaseModel)


@dataclass(frozen=True)
class LLMRequest(Generic[ResponseT]):
    """Everything needed for one chat completion call.

    ``response_model`` is set for structured calls and left as None for plain
    text completions.
    """

    messages: list[dict[str, str]]
    temperature: float
    response_model: type[ResponseT] | None = None


def build_topic_request(
    renderer: PromptRenderer,
    *,
    temperature: float = TOPIC_TEMPERATURE,
) -> LLMRequest[TopicSuggestions]:
    return LLMRequest(
        messages=[{"role": "user", "content": renderer.render("topics.txt", {})}],
        temperature=temperature,
        response_model=TopicSuggestions,
    )


def build_exercise_request(
    renderer: PromptRenderer,
    *,
    topic: str | None,
    level: CEFRLevel,
    language: str,
    temperature: float,
    reference_language: str = "English",
) -> LLMRequest[GeneratedExercise]:
    """Build the structured exercise generation request.

    A blank or missing topic falls back to a general-interest article.
    """
    context = {
        "language": language,
        "level": level.value,
        "topic": (topic or "").strip() or DEFAULT_TOPIC,
        "reference_language": reference_language,
    }
    return LLMRequest(
        messages=[
            {"role": "system", "content": renderer.render("system.txt", context)},
            {"role": "user", "content": renderer.render("exercise.txt", context)},
        ],
        temperature=temperature,
        response_model=GeneratedExercise,
    )


def build_translation_request(
    renderer: PromptRenderer,
    *,
    text: str,
    target_language: str,
    temperature: float = TRANSLATION_TEMPERATURE,
) -> LLMRequest[BaseModel]:
    content = renderer.render("translate.txt", {"text": text, "target_language": target_language})
    return LLMRequest(
        messages=[{"role": "user", "content": content}],
        temperature=temperature,
    )


__all__ = [
    "DEFAULT_TOPIC",
    "LLMRequest",
    "PROMPTS_DIR",
    "PromptRenderer",
    "build_exercise_request",
    "build_topic_request",
    "build_translation_request",
]
