from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager, nullcontext
from datetime import datetime, timezone

import httpx

from app.artifacts.manager import ArtifactManager
from app.classification.classifier import RelevanceClassifier
from app.config.settings import Settings
from app.generation.factory import GatewayFactory
from app.generation.gateway import GenerationGateway
from app.logging.logger import Log
from app.pdf.factory import PdfExtractorFactory
from app.processor.models import AnalysisOutcome
from app.processor.orchestrator import BatchOrchestrator
from app.processor.processor import build_item_processor
from app.processor.prompt_loader import PromptBuilder
from app.registry.base import BaseCandidateRegistry
from app.registry.tcu_registry_client import TcuRegistryClient

GatewayProvider = Callable[[], AbstractAsyncContextManager[GenerationGateway]]


class AnalysisService:
    """Entry point: fetch candidates -> process batch -> return outcome."""

    def __init__(
        self,
        *,
        registry: BaseCandidateRegistry,
        artifact_manager: ArtifactManager,
        gateway_provider: GatewayProvider,
        prompt_builder: PromptBuilder,
        classifier: RelevanceClassifier | None = None,
        pacing_seconds: float = 1.0,
    ) -> None:
        self._registry = registry
        self._artifact_manager = artifact_manager
        self._gateway_provider = gateway_provider
        self._prompt_builder = prompt_builder
        self._classifier = classifier or RelevanceClassifier()
        self._pacing_seconds = pacing_seconds

    async def run(
        self,
        case_description: str,
        max_candidates: int,
        result_quota: int,
    ) -> AnalysisOutcome:
        """Analyze up to max_candidates registry decisions against a case.

        Raises:
            RegistryUnavailableError: if the candidate list cannot be fetched.
        """
        Log.info(
            f"Starting analysis: max_candidates={max_candidates}, result_quota={result_quota}"
        )
        candidates = await self._registry.fetch(max_candidates)
        if not candidates:
            Log.warning("Registry returned no decisions")
            return AnalysisOutcome(
                results=[],
                attempted=0,
                available=0,
                case_description=case_description,
                completed_at=datetime.now(timezone.utc).isoformat(),
            )

        async with self._gateway_provider() as gateway:
            item_processor = build_item_processor(
                artifact_manager=self._artifact_manager,
                gateway=gateway,
                prompt_builder=self._prompt_builder,
                classifier=self._classifier,
            )
            orchestrator = BatchOrchestrator(
                item_processor=item_processor,
                artifact_manager=self._artifact_manager,
                pacing_seconds=self._pacing_seconds,
            )
            return await orchestrator.run(candidates, case_description, result_quota)


def build_gateway_provider(settings: Settings) -> GatewayProvider:
    """Return a factory of async context managers yielding the gateway for a run.

    With credential_rotation_scope="process" every run shares one gateway, so
    keys that failed stay retired until restart; it is never closed. "run"
    starts each run with a fresh rotator and closes that gateway's provider
    clients when the run ends.
    """
    scope = settings.credential_rotation_scope.strip().lower()
    if scope == "process":
        shared = GatewayFactory.create(settings)
        return lambda: nullcontext(shared)
    if scope == "run":

        @asynccontextmanager
        async def run_scoped() -> AsyncIterator[GenerationGateway]:
            gateway = GatewayFactory.create(settings)
            try:
                yield gateway
            finally:
                await gateway.aclose()

        return run_scoped
    raise ValueError(
        f"Unknown credential_rotation_scope '{scope}'. Choose from: ['process', 'run']"
    )


def build_analysis_service(
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> AnalysisService:
    """Build an AnalysisService with all required adapters."""
    registry = TcuRegistryClient(
        http_client=http_client,
        base_url=settings.registry_base_url,
        timeout_seconds=settings.registry_timeout_seconds,
    )
    artifact_manager = ArtifactManager(
        http_client=http_client,
        pdf_extractor=PdfExtractorFactory.create(settings),
        temp_dir=settings.temp_dir,
        download_timeout_seconds=settings.download_timeout_seconds,
    )
    return AnalysisService(
        registry=registry,
        artifact_manager=artifact_manager,
        gateway_provider=build_gateway_provider(settings),
        prompt_builder=PromptBuilder(text_limit=settings.prompt_text_limit),
        pacing_seconds=settings.item_pacing_seconds,
    )
