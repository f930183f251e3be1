import asyncio
from contextlib import nullcontext
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.artifacts.manager import ArtifactManager
from app.config.settings import Settings
from app.generation.gateway import GenerationGateway
from app.processor.prompt_loader import PromptBuilder
from app.processor.service import (
    AnalysisService,
    GatewayProvider,
    build_analysis_service,
    build_gateway_provider,
)
from app.registry.base import BaseCandidateRegistry
from app.registry.exceptions import RegistryTimeoutError, RegistryUnavailableError
from app.registry.models import CandidateDocument


def _make_service(
    candidates: list[CandidateDocument] | Exception,
    gateway_provider: GatewayProvider | None = None,
) -> tuple[AnalysisService, MagicMock, Any]:
    registry = MagicMock(spec=BaseCandidateRegistry)
    if isinstance(candidates, Exception):
        registry.fetch = AsyncMock(side_effect=candidates)
    else:
        registry.fetch = AsyncMock(return_value=candidates)
    provider = gateway_provider or MagicMock(
        return_value=nullcontext(MagicMock(spec=GenerationGateway))
    )
    service = AnalysisService(
        registry=registry,
        artifact_manager=MagicMock(spec=ArtifactManager),
        gateway_provider=provider,
        prompt_builder=PromptBuilder(),
        pacing_seconds=0,
    )
    return service, registry, provider


class TestAnalysisServiceRun:
    def test_registry_failure_is_fatal(self) -> None:
        service, _registry, provider = _make_service(RegistryTimeoutError("slow"))

        with pytest.raises(RegistryUnavailableError):
            asyncio.run(service.run("caso", 10, 2))

        provider.assert_not_called()

    def test_empty_registry_is_no_data_outcome(self) -> None:
        service, registry, provider = _make_service([])

        outcome = asyncio.run(service.run("caso concreto", 10, 2))

        registry.fetch.assert_awaited_once_with(10)
        assert outcome.no_data
        assert outcome.results == []
        assert outcome.attempted == 0
        assert outcome.case_description == "caso concreto"
        provider.assert_not_called()

    def test_runs_orchestrator_with_fetched_candidates(self) -> None:
        candidates = [CandidateDocument(id="1"), CandidateDocument(id="2")]
        service, _registry, provider = _make_service(candidates)

        with patch("app.processor.service.BatchOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.run = AsyncMock(return_value="outcome")
            outcome = asyncio.run(service.run("caso", 50, 3))

        assert outcome == "outcome"
        orchestrator_cls.return_value.run.assert_awaited_once_with(candidates, "caso", 3)
        provider.assert_called_once_with()

    @pytest.mark.parametrize("fails", [False, True], ids=["completes", "raises"])
    def test_run_scoped_clients_closed_after_run(self, fails: bool) -> None:
        gateway = MagicMock(spec=GenerationGateway)
        gateway.aclose = AsyncMock()
        with patch("app.processor.service.GatewayFactory.create", return_value=gateway):
            provider = build_gateway_provider(Settings(credential_rotation_scope="run"))
            service, _registry, _ = _make_service([CandidateDocument(id="1")], provider)

            with patch("app.processor.service.BatchOrchestrator") as orchestrator_cls:
                run = AsyncMock(side_effect=RuntimeError("boom") if fails else None)
                orchestrator_cls.return_value.run = run
                if fails:
                    with pytest.raises(RuntimeError):
                        asyncio.run(service.run("caso", 5, 1))
                else:
                    asyncio.run(service.run("caso", 5, 1))

        gateway.aclose.assert_awaited_once_with()


class TestBuildGatewayProvider:
    @staticmethod
    def _enter(provider: GatewayProvider) -> GenerationGateway:
        async def enter() -> GenerationGateway:
            async with provider() as gateway:
                return gateway

        return asyncio.run(enter())

    def test_run_scope_builds_new_gateway_each_time(self) -> None:
        provider = build_gateway_provider(
            Settings(gemini_api_keys="a,b", credential_rotation_scope="run")
        )
        assert self._enter(provider) is not self._enter(provider)

    def test_run_scope_closes_gateway_when_run_ends(self) -> None:
        gateway = MagicMock(spec=GenerationGateway)
        gateway.aclose = AsyncMock()
        provider = build_gateway_provider(Settings(credential_rotation_scope="run"))

        with patch("app.processor.service.GatewayFactory.create", return_value=gateway):
            assert self._enter(provider) is gateway

        gateway.aclose.assert_awaited_once_with()

    def test_process_scope_shares_gateway(self) -> None:
        provider = build_gateway_provider(
            Settings(gemini_api_keys="a,b", credential_rotation_scope="process")
        )
        first = self._enter(provider)
        first.rotator.advance()
        assert self._enter(provider) is first
        assert self._enter(provider).rotator.current_credential() == "b"

    def test_process_scope_keeps_gateway_open(self) -> None:
        gateway = MagicMock(spec=GenerationGateway)
        gateway.aclose = AsyncMock()
        with patch("app.processor.service.GatewayFactory.create", return_value=gateway):
            provider = build_gateway_provider(Settings(credential_rotation_scope="process"))

        self._enter(provider)
        self._enter(provider)

        gateway.aclose.assert_not_awaited()

    def test_unknown_scope_raises(self) -> None:
        with pytest.raises(ValueError, match="credential_rotation_scope"):
            build_gateway_provider(Settings(credential_rotation_scope="request"))

class TestBuildAnalysisService:
    def test_wires_service_from_settings(self, tmp_path: Path) -> None:
        settings = Settings(
            temp_dir=tmp_path,
            primary_provider="example",
            secondary_provider="none",
            pdf_engine="pymupdf",
        )

        async def build() -> AnalysisService:
            async with httpx.AsyncClient() as client:
                return build_analysis_service(settings, client)

        service = asyncio.run(build())

        assert isinstance(service, AnalysisService)
