class VerdictParseError(Exception):
    """Raised when a relevance verdict matches neither accepted shape."""
