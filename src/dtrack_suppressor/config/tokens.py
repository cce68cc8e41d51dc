from __future__ import annotations


def mask_token(token: str | None, visible: int = 8) -> str:
    """Return a log-safe preview of a bearer token.

    Shows the first ``visible`` characters followed by ``...``; tokens that
    are not longer than ``visible`` are fully masked.

    Example:
        >>> mask_token("eyJhbGciOiJIUzI1NiJ9.payload")
        'eyJhbGci...'
        >>> mask_token("short")
        '***'
        >>> mask_token(None)
        '<none>'
    """
    if not token:
        return "<none>"
    if len(token) <= visible:
        return "***"
    return f"{token[:visible]}..."
