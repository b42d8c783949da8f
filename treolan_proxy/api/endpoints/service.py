import logging
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from treolan_proxy import __version__
from treolan_proxy.api.dependencies import get_config, get_gateway
from treolan_proxy.error_handler import error_handler
from treolan_proxy.integrations.clients.real_http.treolan import TreolanGateway
from treolan_proxy.integrations.errors import TreolanError
from treolan_proxy.integrations.policy.response_wrappers import isoformat_utc
from treolan_proxy.utils.config_loader import ProxyConfig

logger = logging.getLogger(__name__)

router = APIRouter()

IPIFY_URL = "https://api.ipify.org?format=json"

ENDPOINTS = {
    "GET /api/ping": "Liveness check",
    "GET /api/auth-check": "Treolan authorization check",
    "GET /api/myip": "Proxy egress IP (for the Treolan whitelist)",
    "GET /api/catalog": "M3 Mobile catalog",
    "GET /api/catalog?search=X": "Search by articul or name",
    "GET /api/product/{articul}": "Product with photos and specs",
}


async def fetch_public_ip() -> Dict[str, Any]:
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(IPIFY_URL)
        response.raise_for_status()
        return response.json()


@router.get("/")
async def root(config: ProxyConfig = Depends(get_config)):
    return {
        "name": "M3 Mobile × Treolan Proxy",
        "version": __version__,
        "vendorId": config.catalog.vendor_id,
        "auth": "static token" if config.upstream.static_token else "login",
        "endpoints": ENDPOINTS,
    }


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "treolan-proxy"}


@router.get("/api/ping")
async def ping():
    return {"status": "ok", "time": isoformat_utc()}


@router.get("/api/myip")
async def my_ip():
    try:
        data = await fetch_public_ip()
    except (httpx.HTTPError, ValueError) as e:
        return error_handler.handle_exception(e, 500, context={"route": "myip"})
    return {**data, "note": "This IP must be whitelisted by Treolan"}


@router.get("/api/auth-check")
async def auth_check(gateway: TreolanGateway = Depends(get_gateway)):
    token_manager = gateway.token_manager
    try:
        token = await token_manager.acquire_token()
        if token_manager.uses_static_token:
            # A static token can only be verified by using it.
            await gateway.get_categories()
    except TreolanError as e:
        logger.warning("Auth check failed: %s", e)
        return JSONResponse(status_code=401, content={"status": "error", "error": e.message})

    return {"status": "ok", "message": "Authorization succeeded", "tokenLength": len(token)}
