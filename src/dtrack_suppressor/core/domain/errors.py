from __future__ import annotations

from typing import Optional


class SuppressorError(Exception):
    """Base class for errors raised by dtrack_suppressor."""


class MissingCredential(SuppressorError):
    """Raised before any request when no bearer token is configured."""

    def __init__(self, message: str = "No API token configured (set DTRACK_API_KEY)") -> None:
        super().__init__(message)


class NotFound(SuppressorError):
    """Raised when a vulnerability cannot be resolved to a UUID."""

    def __init__(self, source: str, vuln_id: str) -> None:
        super().__init__(f"Vulnerability {source}/{vuln_id} not found")
        self.source = source
        self.vuln_id = vuln_id


class RequestFailed(SuppressorError):
    """A single call to the findings service failed.

    Attributes:
        status: HTTP status code, or None when no response was received.
        url: Request URL, when known.
    """

    def __init__(self, status: Optional[int], message: str | None = None, *, url: str | None = None) -> None:
        if message is None:
            message = f"API request failed: {status}" if status is not None else "API request failed"
        super().__init__(message)
        self.status = status
        self.url = url


class ValidationInvariant(SuppressorError, ValueError):
    """An AnalysisConfig was constructed with a justification its state does not allow."""


class FilterError(SuppressorError, ValueError):
    """A project filter expression could not be evaluated."""
