from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import TemplateNotFound, UndefinedError

from lexical_gap.models.catalog import CEFRLevel
from lexical_gap.schemas.llm_responses import GeneratedExercise, TopicSuggestions
from lexical_gap.services.prompts import (
    DEFAULT_TOPIC,
    PROMPTS_DIR,
    PromptRenderer,
    build_exercise_request,
    build_topic_request,
    build_translation_request,
)


@pytest.fixture()
def renderer() -> PromptRenderer:
    return PromptRenderer()


def test_prompt_renderer_renders_template(tmp_path: Path) -> None:
    (tmp_path / "greeting.txt").write_text("Hola {{ name }}!", encoding="utf-8")

    rendered = PromptRenderer(prompts_dir=tmp_path).render("greeting.txt", {"name": "Maria"})

    assert rendered == "Hola Maria!"


def test_prompt_renderer_rejects_missing_variables(tmp_path: Path) -> None:
    (tmp_path / "greeting.txt").write_text("Hola {{ name }}!", encoding="utf-8")

    with pytest.raises(UndefinedError):
        PromptRenderer(prompts_dir=tmp_path).render("greeting.txt", {})


def test_prompt_renderer_missing_template(tmp_path: Path) -> None:
    with pytest.raises(TemplateNotFound):
        PromptRenderer(prompts_dir=tmp_path).render("absent.txt", {})


def test_packaged_templates_exist() -> None:
    for name in ("system.txt", "topics.txt", "exercise.txt", "translate.txt"):
        assert (PROMPTS_DIR / name).is_file()


def test_topic_request(renderer: PromptRenderer) -> None:
    request = build_topic_request(renderer, temperature=1.1)

    assert request.temperature == 1.1
    assert request.response_model is TopicSuggestions
    assert len(request.messages) == 1
    assert "Generate 6 diverse" in request.messages[0]["content"]


def test_exercise_request_embeds_parameters(renderer: PromptRenderer) -> None:
    request = build_exercise_request(
        renderer,
        topic="Coffee Culture in Vienna",
        level=CEFRLevel.C1,
        language="Italian",
        temperature=0.4,
    )

    assert request.response_model is GeneratedExercise
    assert request.temperature == 0.4
    assert [message["role"] for message in request.messages] == ["system", "user"]

    prompt = request.messages[1]["content"]
    assert "Topic: Coffee Culture in Vienna" in prompt
    assert "Target CEFR Level: C1" in prompt
    assert "student learning Italian" in prompt
    assert "placeholders {{1}}, {{2}}, etc." in prompt
    assert "exactly 4 options" in prompt
    assert "3 distractors, shuffled" in prompt
    assert "in English" in prompt


@pytest.mark.parametrize("topic", [None, "", "   "])
def test_exercise_request_defaults_topic(renderer: PromptRenderer, topic: str | None) -> None:
    request = build_exercise_request(
        renderer, topic=topic, level=CEFRLevel.B2, language="French", temperature=0.7
    )

    assert f"Topic: {DEFAULT_TOPIC}" in request.messages[1]["content"]


def test_exercise_request_uses_reference_language(renderer: PromptRenderer) -> None:
    request = build_exercise_request(
        renderer,
        topic=None,
        level=CEFRLevel.A1,
        language="Hindi",
        temperature=0.7,
        reference_language="French",
    )

    prompt = request.messages[1]["content"]
    assert "for each blank in French" in prompt
    assert "full French translation" in prompt


def test_translation_request(renderer: PromptRenderer) -> None:
    request = build_translation_request(
        renderer, text="I kicked the ball.", target_language="Ukrainian"
    )

    assert request.response_model is None
    content = request.messages[0]["content"]
    assert content.startswith("Translate the following text into Ukrainian.")
    assert "Return only the translated text." in content
    assert content.endswith('Text: "I kicked the ball."')
