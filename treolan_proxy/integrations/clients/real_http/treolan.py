"""
Treolan B2B API HTTP Client.

Purpose:
- Performs authenticated calls against the Treolan catalog API
- Re-authenticates once when a call is rejected with 401

Usage:
- Created in treolan_proxy/api/main.py at startup and shared through the
  get_gateway dependency
- Route handlers call get_catalog() / get_product() and shape the result with
  treolan_proxy/integrations/policy/response_wrappers.py

Important:
- This client is the ONLY place that talks to Treolan for catalog data.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from treolan_proxy.integrations.clients.real_http.token_manager import TokenManager
from treolan_proxy.integrations.clients.real_http.transport import build_http_client, send
from treolan_proxy.integrations.errors import UpstreamDecodeError, UpstreamError
from treolan_proxy.utils.config_loader import UpstreamConfig

logger = logging.getLogger(__name__)

# First attempt plus one retry after re-authentication.
MAX_ATTEMPTS = 2


class TreolanGateway:
    def __init__(self, token_manager: TokenManager, http_client: httpx.AsyncClient, base_url: str) -> None:
        self.token_manager = token_manager
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_config(cls, config: UpstreamConfig) -> "TreolanGateway":
        http_client = build_http_client(config.timeout_seconds)
        token_manager = TokenManager(
            http_client,
            config.base_url,
            config.login,
            config.password,
            static_token=config.static_token,
            auth_paths=config.auth_paths,
        )
        return cls(token_manager, http_client, config.base_url)

    async def call(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform one authenticated call and return the decoded JSON body.

        Raises:
            ConfigurationError / AuthenticationError / TokenDecodeError: token acquisition failed
            UpstreamError: non-success status (including a second 401)
            UpstreamDecodeError: success status but the body is not JSON
            UpstreamUnavailableError: timeout or connection failure
        """
        url = f"{self.base_url}{path}"

        for attempt in range(1, MAX_ATTEMPTS + 1):
            token = await self.token_manager.acquire_token()
            headers = {"Authorization": f"Bearer {token}"}
            kwargs: Dict[str, Any] = {"headers": headers}
            if body is not None:
                headers["Content-Type"] = "application/json"
                kwargs["json"] = body
            if query:
                kwargs["params"] = query

            response = await send(self.http_client, method, url, **kwargs)

            if response.status_code == 401 and attempt < MAX_ATTEMPTS:
                logger.warning("Treolan rejected token for %s %s, re-authenticating", method, path)
                self.token_manager.invalidate()
                continue
            break

        if not response.is_success:
            logger.error("Treolan %s %s failed: %s", method, path, response.status_code)
            raise UpstreamError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamDecodeError(response.status_code, response.text) from e

    async def get_catalog(self, query_body: Dict[str, Any]) -> Any:
        return await self.call("POST", "/Catalog/Get", body=query_body)

    async def get_product(self, articul: str) -> Any:
        return await self.call("GET", "/Catalog/GetProduct", query={"articul": articul})

    async def get_categories(self) -> Any:
        return await self.call("GET", "/Catalog/GetCategories")

    async def aclose(self) -> None:
        await self.http_client.aclose()
