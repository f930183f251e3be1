from app.artifacts.exceptions import MissingArtifactUrlError
from app.artifacts.manager import ArtifactManager
from app.classification.classifier import RelevanceClassifier
from app.generation.gateway import GenerationGateway
from app.logging.logger import Log
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.prompt_loader import PromptBuilder


class ExtractTextStep(PipelineStep):
    def __init__(self, artifact_manager: ArtifactManager) -> None:
        self._artifact_manager = artifact_manager

    async def run(self, context: PipelineContext) -> PipelineContext:
        url = context.candidate.pdf_url
        if not url:
            raise MissingArtifactUrlError(
                f"No PDF URL available for decision {context.document_id}"
            )
        context.extracted_text = await self._artifact_manager.fetch_text(
            url,
            context.document_id,
            outstanding=context.outstanding,
        )
        return context


class SummarizeStep(PipelineStep):
    def __init__(self, gateway: GenerationGateway, prompt_builder: PromptBuilder) -> None:
        self._gateway = gateway
        self._prompt_builder = prompt_builder

    async def run(self, context: PipelineContext) -> PipelineContext:
        prompt = self._prompt_builder.summary(context.extracted_text)
        context.summary = await self._gateway.generate(prompt)
        Log.debug(f"Summary for decision {context.document_id}:\n{context.summary}")
        return context


class AnalyzeRelevanceStep(PipelineStep):
    def __init__(self, gateway: GenerationGateway, prompt_builder: PromptBuilder) -> None:
        self._gateway = gateway
        self._prompt_builder = prompt_builder

    async def run(self, context: PipelineContext) -> PipelineContext:
        prompt = self._prompt_builder.relevance(
            context.extracted_text,
            context.case_description,
        )
        context.relevance_analysis = await self._gateway.generate(prompt)
        Log.debug(
            f"Relevance verdict for decision {context.document_id}:\n"
            f"{context.relevance_analysis}"
        )
        return context


class ClassifyStep(PipelineStep):
    def __init__(self, classifier: RelevanceClassifier) -> None:
        self._classifier = classifier

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.verdict = self._classifier.parse(context.relevance_analysis)
        Log.info(
            f"Decision {context.document_id} classified as "
            f"{'relevant' if context.verdict.is_relevant else 'not related'}"
        )
        return context
