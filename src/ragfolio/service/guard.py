"""Deny-list guard for questions the assistant should not answer."""

import logging
import re

from ragfolio.models import QueryResult

logger = logging.getLogger(__name__)

# (category, regex) pairs; any match blocks the question.
_BLOCKED_REGEXES = [
    ("credentials", r"\b(password|credit card|ssn|social security|bank account|pin|cvv)\b"),
    ("personal_contact", r"\b(address|phone number|email|personal contact)\b"),
    ("security", r"\b(hack|exploit|vulnerability|attack|malware|virus)\b"),
    ("illegal", r"\b(illegal|crime|fraud|scam)\b"),
    ("off_topic", r"\b(weather|news|politics|religion|medical advice)\b"),
    ("how_to", r"\b(how to (make|create|build))\b"),
    ("food", r"\b(recipe|cooking|food)\b"),
    ("entertainment", r"\b(movie|music|game|sport)\b"),
    ("coding_help", r"\b(write code|debug|fix|help me with|solve)\b"),
    ("generic_compute", r"\b(calculate|compute|translate)\b"),
]

BLOCKED_PATTERNS: list[tuple[str, re.Pattern]] = [
    (category, re.compile(regex, re.IGNORECASE)) for category, regex in _BLOCKED_REGEXES
]

REFUSAL_MESSAGES = {
    "en": "Sorry, I can only answer professional questions only.",
    "id": "Maaf, saya hanya dapat menjawab pertanyaan profesional saja.",
}


class ContentGuard:
    """Blocks questions matching any pattern in a category table."""

    def __init__(self, patterns: list[tuple[str, re.Pattern]] | None = None) -> None:
        self.patterns = BLOCKED_PATTERNS if patterns is None else patterns

    def match(self, question: str) -> str | None:
        """Return the first blocked category the question matches, if any."""
        for category, pattern in self.patterns:
            if pattern.search(question):
                return category
        return None

    def is_blocked(self, question: str) -> bool:
        category = self.match(question)
        if category:
            logger.info(f"🚫 Question blocked by guard category '{category}'")
        return category is not None

    @staticmethod
    def refusal(language: str = "en", show_sources: bool = True) -> QueryResult:
        """Canned refusal with zero confidence."""
        answer = REFUSAL_MESSAGES.get(language, REFUSAL_MESSAGES["en"])
        return QueryResult(answer=answer, confidence=0.0, sources=[] if show_sources else None)
