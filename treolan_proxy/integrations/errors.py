from __future__ import annotations

from typing import Optional

BODY_PREVIEW_LIMIT = 500


def truncate_body(body: Optional[str], limit: int = BODY_PREVIEW_LIMIT) -> str:
    text = (body or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class TreolanError(Exception):
    """Base class for everything the upstream integration raises."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = truncate_body(body)


class ConfigurationError(TreolanError):
    """Required credential is missing; raised before any network call."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing upstream credentials: {', '.join(missing)} not set")
        self.missing = list(missing)


class AuthenticationError(TreolanError):
    """Login exchange returned a non-success status."""

    def __init__(self, status_code: int, body: Optional[str] = None, *, path: str = "") -> None:
        preview = truncate_body(body)
        where = f" at {path}" if path else ""
        super().__init__(f"Authentication failed{where} ({status_code}): {preview}", status_code=status_code, body=body)
        self.path = path


class UpstreamError(TreolanError):
    """Non-success status from an upstream data call."""

    def __init__(self, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(f"Treolan {status_code}: {truncate_body(body)}", status_code=status_code, body=body)


class UpstreamUnavailableError(TreolanError):
    """Transport failure: timeout, DNS, refused connection."""


class DecodeError(TreolanError):
    pass


class TokenDecodeError(DecodeError):
    """Auth endpoint answered 2xx but no token-shaped value was found."""

    def __init__(self, status_code: int, body: Optional[str] = None, *, path: str = "") -> None:
        where = f" at {path}" if path else ""
        super().__init__(f"Token not found in auth response{where}: {truncate_body(body)}", status_code=status_code, body=body)
        self.path = path


class UpstreamDecodeError(DecodeError):
    """Upstream answered 2xx with a body that is not valid JSON."""

    def __init__(self, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(f"Treolan returned invalid JSON ({status_code}): {truncate_body(body)}", status_code=status_code, body=body)
