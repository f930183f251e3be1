from datetime import datetime, timezone
from pathlib import Path

from app.artifacts.manager import ArtifactManager
from app.classification.classifier import RelevanceClassifier
from app.generation.gateway import GenerationGateway
from app.logging.logger import Log
from app.processor.models import ProcessedResult
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.prompt_loader import PromptBuilder
from app.processor.steps import (
    AnalyzeRelevanceStep,
    ClassifyStep,
    ExtractTextStep,
    SummarizeStep,
)
from app.registry.models import CandidateDocument


class ItemProcessor:
    """Runs the per-item pipeline for one candidate.

    Pipeline: extract text -> summarize -> analyze relevance -> classify.
    Any step failure propagates to the caller unchanged.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    async def process(
        self,
        candidate: CandidateDocument,
        case_description: str,
        outstanding: set[Path] | None = None,
    ) -> ProcessedResult:
        context = PipelineContext(
            candidate=candidate,
            case_description=case_description,
            outstanding=outstanding if outstanding is not None else set(),
        )
        Log.info(f"Processing decision {context.document_id}")
        for step in self._steps:
            context = await step.run(context)

        if context.verdict is None:
            raise RuntimeError("Pipeline finished without a relevance verdict")
        return ProcessedResult.from_candidate(
            candidate,
            summary=context.summary,
            relevance_analysis=context.relevance_analysis,
            is_relevant=context.verdict.is_relevant,
            processed_at=datetime.now(timezone.utc).isoformat(),
        )


def build_item_processor(
    *,
    artifact_manager: ArtifactManager,
    gateway: GenerationGateway,
    prompt_builder: PromptBuilder,
    classifier: RelevanceClassifier | None = None,
) -> ItemProcessor:
    """Build an ItemProcessor with the standard step order."""
    return ItemProcessor(
        steps=[
            ExtractTextStep(artifact_manager),
            SummarizeStep(gateway, prompt_builder),
            AnalyzeRelevanceStep(gateway, prompt_builder),
            ClassifyStep(classifier or RelevanceClassifier()),
        ]
    )
