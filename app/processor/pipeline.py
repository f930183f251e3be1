from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from app.classification.models import Verdict
from app.registry.models import CandidateDocument


@dataclass(slots=True)
class PipelineContext:
    candidate: CandidateDocument
    case_description: str
    outstanding: set[Path] = field(default_factory=set)
    extracted_text: str = ""
    summary: str = ""
    relevance_analysis: str = ""
    verdict: Verdict | None = None

    @property
    def document_id(self) -> str:
        return self.candidate.id or "unknown"


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
