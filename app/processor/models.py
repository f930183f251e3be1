from dataclasses import dataclass, field
from pathlib import Path

from app.registry.models import CandidateDocument


@dataclass(frozen=True)
class ProcessedResult:
    """Outcome of the per-item pipeline for one candidate."""

    id: str | None
    title: str | None
    year: str | None
    rapporteur: str | None
    decision_type: str | None
    session_date: str | None
    collegiate: str | None
    summary: str
    relevance_analysis: str
    is_relevant: bool
    processed_at: str

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateDocument,
        *,
        summary: str,
        relevance_analysis: str,
        is_relevant: bool,
        processed_at: str,
    ) -> "ProcessedResult":
        return cls(
            id=candidate.id,
            title=candidate.title,
            year=candidate.year,
            rapporteur=candidate.rapporteur,
            decision_type=candidate.decision_type,
            session_date=candidate.session_date,
            collegiate=candidate.collegiate,
            summary=summary,
            relevance_analysis=relevance_analysis,
            is_relevant=is_relevant,
            processed_at=processed_at,
        )


@dataclass
class BatchRunState:
    """Accumulates results and counters while one batch runs."""

    results: list[ProcessedResult] = field(default_factory=list)
    attempted: int = 0
    outstanding: set[Path] = field(default_factory=set)


@dataclass(frozen=True)
class AnalysisOutcome:
    """What a run hands back to its caller."""

    results: list[ProcessedResult]
    attempted: int
    available: int
    case_description: str = ""
    completed_at: str = ""

    @property
    def total_relevant(self) -> int:
        return len(self.results)

    @property
    def no_data(self) -> bool:
        """True when the registry had no candidates to analyze."""
        return self.available == 0
