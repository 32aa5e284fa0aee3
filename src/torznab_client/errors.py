"""Errors raised by the Torznab client."""


class TorznabError(Exception):
    """Base class for all client errors."""


class ConfigurationError(TorznabError):
    """Host or URL is malformed. Raised at call time, never retried."""


class TransportError(TorznabError):
    """Request failed after the retry budget was exhausted."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class CancellationError(TorznabError):
    """Call deadline elapsed before a response was received."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class DecodeError(TorznabError):
    """Response body is not the expected XML document."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class TorznabAPIError(TorznabError):
    """Upstream answered with a Torznab <error> document.

    See: https://torznab.github.io/spec-1.3-draft/torznab/Specification-v1.3.html
    """

    def __init__(self, code: str, description: str, url: str | None = None):
        super().__init__(f"Torznab error {code}: {description}")
        self.code = code
        self.description = description
        self.url = url
