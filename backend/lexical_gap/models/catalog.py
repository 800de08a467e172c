"""Static catalog of learning languages, proficiency levels, and sample topics."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Final, Literal

TextDirection = Literal["ltr", "rtl"]

MIN_TEMPERATURE: Final[float] = 0.2
MAX_TEMPERATURE: Final[float] = 1.5
DEFAULT_TEMPERATURE: Final[float] = 0.7


class CEFRLevel(str, enum.Enum):
    """Six ordered proficiency tiers of the Common European Framework."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"

    @property
    def description(self) -> str:
        return LEVEL_DESCRIPTIONS[self]


LEVEL_DESCRIPTIONS: Final[dict[CEFRLevel, str]] = {
    CEFRLevel.A1: "Beginner - Basic vocabulary",
    CEFRLevel.A2: "Elementary - Simple phrases",
    CEFRLevel.B1: "Intermediate - Standard situations",
    CEFRLevel.B2: "Upper Intermediate - Abstract topics",
    CEFRLevel.C1: "Advanced - Flexible & effective",
    CEFRLevel.C2: "Proficiency - Precise & subtle",
}

DEFAULT_LEVEL: Final[CEFRLevel] = CEFRLevel.B2


@dataclass(frozen=True, slots=True)
class LanguageConfig:
    """A learning language and the direction its script is rendered in."""

    name: str
    direction: TextDirection = "ltr"


LANGUAGES: Final[tuple[LanguageConfig, ...]] = (
    LanguageConfig("English"),
    LanguageConfig("French"),
    LanguageConfig("Hindi"),
    LanguageConfig("Italian"),
    LanguageConfig("Mandarin Chinese"),
    LanguageConfig("Portuguese"),
    LanguageConfig("Spanish"),
    LanguageConfig("Standard Arabic", "rtl"),
    LanguageConfig("Ukrainian"),
    LanguageConfig("Urdu", "rtl"),
)

SAMPLE_TOPICS: Final[tuple[str, ...]] = (
    "Technology & AI",
    "Environmental Sustainability",
    "Global Economics",
    "Modern Art Trends",
    "Travel & Culture",
    "Workplace Psychology",
)

# Language names read with a leading vowel sound ("an English text").
_VOWEL_SOUND_LANGUAGES: Final[frozenset[str]] = frozenset({"English", "Italian", "Urdu"})


def get_language(name: str) -> LanguageConfig | None:
    """Return the catalog entry for ``name`` or None when unsupported."""
    for language in LANGUAGES:
        if language.name == name:
            return language
    return None


def text_direction(name: str) -> TextDirection:
    language = get_language(name)
    return language.direction if language else "ltr"


def indefinite_article(language_name: str) -> str:
    return "an" if language_name in _VOWEL_SOUND_LANGUAGES else "a"


def loading_message(language_name: str, level: CEFRLevel) -> str:
    """Status line shown while an exercise is being generated."""
    article = indefinite_article(language_name)
    return f"Our AI linguist is preparing {article} {language_name} text at level {level.value}."


__all__ = [
    "CEFRLevel",
    "DEFAULT_LEVEL",
    "DEFAULT_TEMPERATURE",
    "LANGUAGES",
    "LEVEL_DESCRIPTIONS",
    "LanguageConfig",
    "MAX_TEMPERATURE",
    "MIN_TEMPERATURE",
    "SAMPLE_TOPICS",
    "TextDirection",
    "get_language",
    "indefinite_article",
    "loading_message",
    "text_direction",
]
