"""Sequential batch processing with an early-exit result quota."""

import asyncio
from collections.abc import Sequence
from datetime import datetime, timezone

from app.artifacts.exceptions import ArtifactError
from app.artifacts.manager import ArtifactManager
from app.classification.exceptions import VerdictParseError
from app.generation.exceptions import AllProvidersFailedError
from app.logging.logger import Log
from app.pdf.exceptions import PdfExtractionError
from app.processor.models import AnalysisOutcome, BatchRunState
from app.processor.processor import ItemProcessor
from app.registry.models import CandidateDocument


class BatchOrchestrator:
    """Feeds candidates one at a time through the ItemProcessor.

    Stops once result_quota relevant results are collected. A failing item is
    logged and counted, never fatal. Items are never processed concurrently:
    the generation gateway's credential rotator is unguarded shared state.
    """

    def __init__(
        self,
        *,
        item_processor: ItemProcessor,
        artifact_manager: ArtifactManager,
        pacing_seconds: float = 1.0,
    ) -> None:
        self._item_processor = item_processor
        self._artifact_manager = artifact_manager
        self._pacing_seconds = pacing_seconds

    async def run(
        self,
        candidates: Sequence[CandidateDocument],
        case_description: str,
        result_quota: int,
    ) -> AnalysisOutcome:
        state = BatchRunState()
        try:
            await self._process_candidates(candidates, case_description, result_quota, state)
        finally:
            self._artifact_manager.release(state.outstanding)

        Log.info(
            f"Batch finished: {len(state.results)} relevant, "
            f"{state.attempted} attempted, {len(candidates)} available"
        )
        return AnalysisOutcome(
            results=list(state.results),
            attempted=state.attempted,
            available=len(candidates),
            case_description=case_description,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    async def _process_candidates(
        self,
        candidates: Sequence[CandidateDocument],
        case_description: str,
        result_quota: int,
        state: BatchRunState,
    ) -> None:
        if result_quota <= 0:
            Log.warning(f"Result quota is {result_quota}; no decisions will be processed")
            return
        for index, candidate in enumerate(candidates):
            if len(state.results) >= result_quota:
                Log.info(f"Result quota of {result_quota} reached, stopping early")
                break
            if index > 0 and self._pacing_seconds > 0:
                await asyncio.sleep(self._pacing_seconds)

            state.attempted += 1
            document_id = candidate.id or "unknown"
            try:
                result = await self._item_processor.process(
                    candidate,
                    case_description,
                    outstanding=state.outstanding,
                )
            except AllProvidersFailedError as exc:
                Log.error(f"Generation providers failed for decision {document_id}: {exc}")
                continue
            except (ArtifactError, PdfExtractionError) as exc:
                Log.error(f"Document failure for decision {document_id}: {exc}")
                continue
            except VerdictParseError as exc:
                Log.error(f"Unusable relevance verdict for decision {document_id}: {exc}")
                continue
            except Exception as exc:
                Log.exception(f"Unexpected error processing decision {document_id}: {exc}")
                continue

            if result.is_relevant:
                state.results.append(result)
