class ArtifactError(Exception):
    """Base exception for document artifact errors."""


class MissingArtifactUrlError(ArtifactError):
    """Raised when a candidate has no downloadable document URL."""


class DownloadFailedError(ArtifactError):
    """Raised when the document download fails or yields no bytes."""


class DownloadTimeoutError(ArtifactError):
    """Raised when the document download exceeds its timeout."""


class NoExtractableTextError(ArtifactError):
    """Raised when the downloaded document contains no readable text."""
