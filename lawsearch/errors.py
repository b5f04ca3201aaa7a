"""
Exception hierarchy for the accounting law search service.

- CorpusLoadError: corpus file missing or malformed (fatal at startup)
- NotFoundError: unknown law id (HTTP 404)
- ValidationError: rejected request input (HTTP 400)
- UpstreamError: chat model call failed or timed out (HTTP 500)
"""


class LawSearchError(Exception):
    """Base class for all service errors."""


class CorpusLoadError(LawSearchError):
    """Raised when the law corpus cannot be loaded."""


class NotFoundError(LawSearchError):
    """Raised when a requested law does not exist."""


class ValidationError(LawSearchError):
    """Raised when request input is blank or malformed."""


class UpstreamError(LawSearchError):
    """Raised when the outbound chat model call fails."""
