"""Relevance verdict classification.

The relevance prompt asks the provider for exactly one of two answers:

    RELEVANTE: [Critérios atendidos: 1, 3, 4] - <justification>
    NÃO RELACIONADO

classify() applies the literal marker rule and never raises. parse() checks
the answer against that grammar and raises VerdictParseError for anything
else, so malformed answers are not mistaken for "not related".
"""

import re

from app.classification.exceptions import VerdictParseError
from app.classification.models import Verdict

RELEVANT_MARKER = "RELEVANTE:"
NOT_RELATED_MARKER = "NÃO RELACIONADO"

_CRITERIA_BLOCK = re.compile(r"^\[\s*crit[ée]rios\s+atendidos\s*:\s*([^\]]*)\]", re.IGNORECASE)
_NOT_RELATED_TRAILER = re.compile(r"[\s.!]*")


class RelevanceClassifier:
    """Turns the provider's textual verdict into a relevance decision."""

    def classify(self, verdict_text: str | None) -> bool:
        if not verdict_text:
            return False
        normalized = verdict_text.strip().upper()
        return normalized.startswith(RELEVANT_MARKER) and NOT_RELATED_MARKER not in normalized

    def parse(self, verdict_text: str | None) -> Verdict:
        """Parse verdict_text against the two accepted verdict shapes.

        Raises:
            VerdictParseError: if the text is empty, carries both markers,
                or matches neither shape.
        """
        if not verdict_text or not verdict_text.strip():
            raise VerdictParseError("Verdict is empty")
        stripped = verdict_text.strip()
        normalized = stripped.upper()

        if normalized.startswith(RELEVANT_MARKER):
            if NOT_RELATED_MARKER in normalized:
                raise VerdictParseError("Verdict carries both relevance markers")
            body = stripped[len(RELEVANT_MARKER):].strip()
            criteria, justification = self._split_body(body)
            return Verdict(
                is_relevant=True,
                raw=verdict_text,
                criteria=criteria,
                justification=justification,
            )

        if normalized.startswith(NOT_RELATED_MARKER):
            trailer = normalized[len(NOT_RELATED_MARKER):]
            if _NOT_RELATED_TRAILER.fullmatch(trailer):
                return Verdict(is_relevant=False, raw=verdict_text)

        raise VerdictParseError(f"Unrecognized verdict: {stripped[:80]!r}")

    @staticmethod
    def _split_body(body: str) -> tuple[list[int], str]:
        match = _CRITERIA_BLOCK.match(body)
        if match is None:
            return [], body.lstrip("- ").strip()
        criteria = [int(number) for number in re.findall(r"\d+", match.group(1))]
        justification = body[match.end():].strip().lstrip("-–").strip()
        return criteria, justification
