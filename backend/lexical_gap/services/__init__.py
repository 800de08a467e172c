"""Services for content generation, placeholder reconciliation, scoring, and sessions."""

from lexical_gap.services.content import ContentRequestService
from lexical_gap.services.llm import LLMService, TokenUsage
from lexical_gap.services.prompts import PromptRenderer
from lexical_gap.services.session import SessionService

__all__ = [
    "ContentRequestService",
    "LLMService",
    "PromptRenderer",
    "SessionService",
    "TokenUsage",
]
