"""
Integrations layer.
This package contains all code used to communicate with the Treolan B2B API:
- token lifecycle (login exchange, in-memory cache, re-authentication)
- authenticated catalog/product calls
- reshaping of upstream payloads into the public catalog contract

Key rule:
- Route handlers MUST NOT call Treolan directly.
- Handlers go through TreolanGateway (integrations/clients/real_http).
"""

from .clients.real_http.token_manager import CachedToken, TokenManager, extract_token
from .clients.real_http.treolan import TreolanGateway
from .errors import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    TokenDecodeError,
    TreolanError,
    UpstreamDecodeError,
    UpstreamError,
    UpstreamUnavailableError,
)

__all__ = [
    "AuthenticationError",
    "CachedToken",
    "ConfigurationError",
    "DecodeError",
    "TokenDecodeError",
    "TokenManager",
    "TreolanError",
    "TreolanGateway",
    "UpstreamDecodeError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "extract_token",
]
