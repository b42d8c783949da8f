"""
Treolan bearer token lifecycle.

Purpose:
- Exchanges the configured login/password for a bearer token
- Keeps that token in memory until shortly before it expires upstream
- Serializes logins so a burst of requests on a cold cache logs in once

Implementation notes:
- The auth endpoint has answered with several shapes over time (JSON object with
  one of a few field names, a JSON string, plain text); extract_token() accepts
  all of them in a fixed order
- Candidate auth paths are tried in order; the default list holds the single
  known path
- With a pre-shared static token configured no login is ever performed
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

import httpx

from treolan_proxy.integrations.clients.real_http.transport import send
from treolan_proxy.integrations.errors import (
    AuthenticationError,
    ConfigurationError,
    TokenDecodeError,
    TreolanError,
)

logger = logging.getLogger(__name__)

# Upstream tokens live 60 minutes.
TOKEN_TTL_SECONDS = 55 * 60
MIN_TOKEN_LENGTH = 10
TOKEN_FIELDS = ("token", "accessToken", "access_token", "result")
DEFAULT_AUTH_PATHS = ("/auth/token",)


@dataclass
class CachedToken:
    token: Optional[str] = None
    expires_at: float = 0.0

    def is_valid(self, now: float) -> bool:
        return bool(self.token) and now < self.expires_at

    def store(self, token: str, expires_at: float) -> None:
        self.token = token
        self.expires_at = expires_at

    def clear(self) -> None:
        self.token = None
        self.expires_at = 0.0


def _strip_quotes(text: str) -> str:
    text = text.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def _token_candidates(text: str) -> list[Any]:
    try:
        data = json.loads(text)
    except ValueError:
        return [_strip_quotes(text)]

    if isinstance(data, dict):
        return [data.get(field) for field in TOKEN_FIELDS]
    if isinstance(data, str):
        return [data]
    return []


def extract_token(text: str, min_length: int = MIN_TOKEN_LENGTH) -> Optional[str]:
    """Return the first plausible token in an auth response body, or None."""
    for candidate in _token_candidates(text or ""):
        if not isinstance(candidate, str):
            continue
        candidate = candidate.strip()
        if len(candidate) >= min_length:
            return candidate
    return None


class TokenManager:
    """
    Owns the single cached Treolan token for this process.

    acquire_token() returns the cached token while it is fresh and otherwise
    performs a login exchange. invalidate() drops the cached token, e.g. after
    the upstream rejected it with a 401.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        login: str = "",
        password: str = "",
        *,
        static_token: str = "",
        auth_paths: Sequence[str] = DEFAULT_AUTH_PATHS,
        ttl_seconds: float = TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not auth_paths:
            raise ValueError("auth_paths must contain at least one path")
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.login = login
        self.password = password
        self.static_token = static_token
        self.auth_paths = tuple(auth_paths)
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.cache = CachedToken()
        self._lock = asyncio.Lock()

    @property
    def uses_static_token(self) -> bool:
        return bool(self.static_token)

    async def acquire_token(self) -> str:
        if self.uses_static_token:
            return self.static_token

        if self.cache.is_valid(self.clock()):
            return self.cache.token  # type: ignore[return-value]

        self._check_credentials()

        async with self._lock:
            # Another caller may have logged in while we waited.
            if self.cache.is_valid(self.clock()):
                return self.cache.token  # type: ignore[return-value]

            token = await self._login()
            self.cache.store(token, self.clock() + self.ttl_seconds)
            logger.info("Treolan token acquired (length=%d)", len(token))
            return token

    def invalidate(self) -> None:
        if self.uses_static_token:
            logger.warning("Static Treolan token was rejected; nothing to refresh")
            return
        self.cache.clear()

    def _check_credentials(self) -> None:
        missing = []
        if not self.login:
            missing.append("TREOLAN_LOGIN")
        if not self.password:
            missing.append("TREOLAN_PASSWORD")
        if missing:
            raise ConfigurationError(missing)

    async def _login(self) -> str:
        errors: List[TreolanError] = []
        for path in self.auth_paths:
            try:
                return await self._login_at(path)
            except TreolanError as e:
                logger.warning("Treolan login via %s failed: %s", path, e)
                errors.append(e)
        raise errors[-1]

    async def _login_at(self, path: str) -> str:
        url = f"{self.base_url}{path}"
        response = await send(
            self.http_client,
            "POST",
            url,
            json={"login": self.login, "password": self.password},
            headers={"Content-Type": "application/json"},
        )
        text = response.text
        if not response.is_success:
            raise AuthenticationError(response.status_code, text, path=path)

        token = extract_token(text)
        if token is None:
            raise TokenDecodeError(response.status_code, text, path=path)
        return token
