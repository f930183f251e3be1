from typing import ClassVar

from app.config.settings import Settings
from app.generation.client_base import BaseGenerationClient
from app.generation.example_client_adapter import ExampleClientAdapter
from app.generation.gateway import GenerationGateway, PrimaryClientFactory
from app.generation.gemini_client_adapter import GeminiClientAdapter
from app.generation.openai_client_adapter import OpenAIClientAdapter
from app.generation.rotator import CredentialRotator


class GatewayFactory:
    """Creates a GenerationGateway from the configured providers."""

    PRIMARY_PROVIDERS: ClassVar[tuple[str, ...]] = ("gemini", "example")
    SECONDARY_PROVIDERS: ClassVar[tuple[str, ...]] = (
        "openai",
        "openai_compatible",
        "example",
        "none",
    )

    @classmethod
    def create(cls, settings: Settings) -> GenerationGateway:
        """Build a gateway with a fresh CredentialRotator."""
        return GenerationGateway(
            rotator=cls.create_rotator(settings),
            primary_client_factory=cls._resolve_primary_factory(settings),
            secondary_client=cls._resolve_secondary_client(settings),
            backoff_seconds=settings.key_rotation_backoff_seconds,
            max_attempts=settings.generation_max_attempts or None,
        )

    @classmethod
    def create_rotator(cls, settings: Settings) -> CredentialRotator:
        provider = settings.primary_provider.strip().lower()
        if provider == "example":
            return CredentialRotator(["example"])
        return CredentialRotator(settings.gemini_keys)

    @classmethod
    def _resolve_primary_factory(cls, settings: Settings) -> PrimaryClientFactory:
        provider = settings.primary_provider.strip().lower()
        if provider == "gemini":
            def build_gemini(api_key: str) -> BaseGenerationClient:
                return GeminiClientAdapter(
                    api_key=api_key,
                    model=settings.gemini_model_name,
                    timeout_seconds=settings.gemini_timeout_seconds,
                )

            return build_gemini
        if provider == "example":
            return lambda _credential: ExampleClientAdapter()
        raise ValueError(
            f"Unknown primary provider '{provider}'. Choose from: {list(cls.PRIMARY_PROVIDERS)}"
        )

    @classmethod
    def _resolve_secondary_client(cls, settings: Settings) -> BaseGenerationClient | None:
        provider = settings.secondary_provider.strip().lower()
        if provider == "none":
            return None
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "openai":
            if not settings.openai_api_key:
                return None
            return cls._openai_client(settings, base_url=None)
        if provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for "
                    "secondary_provider=openai_compatible"
                )
            return cls._openai_client(settings, base_url=url)
        raise ValueError(
            f"Unknown secondary provider '{provider}'. "
            f"Choose from: {list(cls.SECONDARY_PROVIDERS)}"
        )

    @staticmethod
    def _openai_client(settings: Settings, base_url: str | None) -> OpenAIClientAdapter:
        return OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            model=settings.openai_model_name,
            timeout_seconds=settings.openai_timeout_seconds,
            max_tokens=settings.openai_max_tokens,
            temperature=settings.openai_temperature,
            base_url=base_url,
        )
