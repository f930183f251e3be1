from abc import ABC, abstractmethod


class BaseGenerationClient(ABC):
    """Contract for provider-specific text generation clients."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the provider's text answer to a single user prompt.

        Raises:
            GenerationNetworkError: on transport or provider API failures.
            GenerationError: when the provider answers with no text.
        """

    async def aclose(self) -> None:
        """Release the client's network resources. No-op by default."""
