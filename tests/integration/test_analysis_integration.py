"""End-to-end runs over real PDF extraction with mocked HTTP and providers."""

import asyncio
from collections.abc import Callable
from contextlib import nullcontext
from pathlib import Path

import httpx
import pytest

from app.artifacts.manager import ArtifactManager
from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import GenerationNetworkError
from app.generation.gateway import GenerationGateway
from app.generation.rotator import CredentialRotator
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.processor.models import AnalysisOutcome
from app.processor.prompt_loader import PromptBuilder
from app.processor.service import AnalysisService
from app.registry.tcu_registry_client import TcuRegistryClient

CASE = "Município contratou obra com sobrepreço e direcionamento do edital de licitação."
RELEVANT = "RELEVANTE: [Critérios atendidos: 2, 3, 6] - mesmo padrão de sobrepreço"
REGISTRY = "https://registry.test"


class ScriptedClient(BaseGenerationClient):
    """Answers like a provider would, keyed on markers in the document text."""

    def __init__(self) -> None:
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if prompt.startswith("Faça um resumo"):
            return "Resumo: sobrepreço identificado, multa aplicada."
        if "MARKER-RELEVANT" in prompt:
            return RELEVANT
        return "NÃO RELACIONADO"


class FailingClient(BaseGenerationClient):
    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        raise GenerationNetworkError("429 quota exceeded")


def _registry_records(count: int) -> list[dict[str, object]]:
    return [
        {
            "numeroAcordao": i,
            "titulo": f"ACÓRDÃO {i}/2024 - PLENÁRIO",
            "anoAcordao": 2024,
            "relator": "WALTON ALENCAR RODRIGUES",
            "tipo": "ACÓRDÃO",
            "dataSessao": "10/04/2024",
            "colegiado": "Plenário",
            "urlArquivoPdf": f"{REGISTRY}/pdf/{i}.pdf",
        }
        for i in range(count)
    ]


def _run(
    *,
    tmp_path: Path,
    pdfs: dict[str, bytes],
    record_count: int,
    gateway: GenerationGateway,
    quota: int,
    downloads: list[str],
) -> AnalysisOutcome:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/api/acordao"):
            return httpx.Response(200, json=_registry_records(record_count))
        downloads.append(request.url.path)
        content = pdfs.get(request.url.path)
        if content is None:
            return httpx.Response(404)
        return httpx.Response(200, content=content)

    async def run() -> AnalysisOutcome:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = AnalysisService(
                registry=TcuRegistryClient(
                    http_client=client, base_url=REGISTRY, timeout_seconds=5
                ),
                artifact_manager=ArtifactManager(
                    http_client=client,
                    pdf_extractor=PdfPlumberAdapter(),
                    temp_dir=tmp_path / "artifacts",
                ),
                gateway_provider=lambda: nullcontext(gateway),
                prompt_builder=PromptBuilder(),
                pacing_seconds=0,
            )
            return await service.run(CASE, record_count, quota)

    return asyncio.run(run())


def _leftovers(tmp_path: Path) -> list[Path]:
    directory = tmp_path / "artifacts"
    return list(directory.iterdir()) if directory.exists() else []


@pytest.mark.integration
class TestAnalysisEndToEnd:
    def test_stops_after_quota_of_relevant_decisions(
        self, tmp_path: Path, pdf_factory: Callable[[str], bytes]
    ) -> None:
        pdfs = {f"/pdf/{i}.pdf": pdf_factory(f"Acordao {i} MARKER-RELEVANT") for i in range(5)}
        client = ScriptedClient()
        gateway = GenerationGateway(
            rotator=CredentialRotator(["key-1"]),
            primary_client_factory=lambda _key: client,
            backoff_seconds=0,
        )
        downloads: list[str] = []

        outcome = _run(
            tmp_path=tmp_path,
            pdfs=pdfs,
            record_count=5,
            gateway=gateway,
            quota=2,
            downloads=downloads,
        )

        assert outcome.attempted == 2
        assert outcome.available == 5
        assert [r.id for r in outcome.results] == ["0", "1"]
        assert all(r.is_relevant for r in outcome.results)
        assert outcome.results[0].summary.startswith("Resumo")
        assert downloads == ["/pdf/0.pdf", "/pdf/1.pdf"]
        assert len(client.prompts) == 4
        assert _leftovers(tmp_path) == []

    def test_mixed_failures_complete_with_counts(
        self, tmp_path: Path, pdf_factory: Callable[[str], bytes]
    ) -> None:
        pdfs = {
            "/pdf/0.pdf": pdf_factory("Acordao 0 sem relacao"),
            "/pdf/1.pdf": b"corrupted bytes",
            "/pdf/3.pdf": pdf_factory("Acordao 3 MARKER-RELEVANT"),
        }
        gateway = GenerationGateway(
            rotator=CredentialRotator(["key-1"]),
            primary_client_factory=lambda _key: ScriptedClient(),
            backoff_seconds=0,
        )

        outcome = _run(
            tmp_path=tmp_path,
            pdfs=pdfs,
            record_count=4,
            gateway=gateway,
            quota=10,
            downloads=[],
        )

        assert [r.id for r in outcome.results] == ["3"]
        assert outcome.attempted == 4
        assert outcome.available == 4
        assert _leftovers(tmp_path) == []

    def test_exhausted_keys_fall_back_to_secondary(
        self, tmp_path: Path, pdf_factory: Callable[[str], bytes]
    ) -> None:
        pdfs = {"/pdf/0.pdf": pdf_factory("Acordao 0 MARKER-RELEVANT")}
        failing = {"key-1": FailingClient(), "key-2": FailingClient()}
        secondary = ScriptedClient()
        gateway = GenerationGateway(
            rotator=CredentialRotator(list(failing)),
            primary_client_factory=lambda key: failing[key],
            secondary_client=secondary,
            backoff_seconds=0,
        )

        outcome = _run(
            tmp_path=tmp_path,
            pdfs=pdfs,
            record_count=1,
            gateway=gateway,
            quota=1,
            downloads=[],
        )

        assert [r.id for r in outcome.results] == ["0"]
        assert failing["key-1"].calls == 1
        assert failing["key-2"].calls == 1
        assert len(secondary.prompts) == 2
        assert gateway.rotator.exhausted
        assert _leftovers(tmp_path) == []

    def test_all_providers_failing_yields_empty_results(
        self, tmp_path: Path, pdf_factory: Callable[[str], bytes]
    ) -> None:
        pdfs = {f"/pdf/{i}.pdf": pdf_factory(f"Acordao {i} MARKER-RELEVANT") for i in range(3)}
        gateway = GenerationGateway(
            rotator=CredentialRotator(["key-1"]),
            primary_client_factory=lambda _key: FailingClient(),
            secondary_client=FailingClient(),
            backoff_seconds=0,
        )

        outcome = _run(
            tmp_path=tmp_path,
            pdfs=pdfs,
            record_count=3,
            gateway=gateway,
            quota=2,
            downloads=[],
        )

        assert outcome.results == []
        assert outcome.attempted == outcome.available == 3
        assert _leftovers(tmp_path) == []
