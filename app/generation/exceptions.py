class GenerationError(Exception):
    """Raised when a provider fails to produce text."""


class GenerationNetworkError(GenerationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class AllProvidersFailedError(GenerationError):
    """Raised when every credential and the fallback provider have failed."""
