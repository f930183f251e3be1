class RegistryError(Exception):
    """Base exception for candidate registry errors."""


class RegistryUnavailableError(RegistryError):
    """Raised when the candidate list cannot be fetched."""


class RegistryTimeoutError(RegistryUnavailableError):
    """Raised when the candidate registry does not answer in time."""
