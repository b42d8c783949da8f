"""
FastAPI application - Main entry point

  uvicorn treolan_proxy.api.main:app --host 0.0.0.0 --port 3000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from treolan_proxy import __version__
from treolan_proxy.api.endpoints.catalog import router as catalog_router
from treolan_proxy.api.endpoints.service import router as service_router
from treolan_proxy.integrations.clients.real_http.treolan import TreolanGateway
from treolan_proxy.utils.config_loader import ProxyConfig, load_proxy_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_startup(config: ProxyConfig) -> None:
    upstream = config.upstream
    logger.info("M3 x Treolan proxy v%s, upstream %s", __version__, upstream.base_url)
    logger.info("vendorId M3 Mobile: %s", config.catalog.vendor_id)
    if upstream.static_token:
        logger.info("Using static Treolan token (length=%d)", len(upstream.static_token))
    elif upstream.missing_credentials():
        logger.warning("%s not set; catalog calls will fail", " and ".join(upstream.missing_credentials()))


def create_app(config: Optional[ProxyConfig] = None, gateway: Optional[TreolanGateway] = None) -> FastAPI:
    config = config or load_proxy_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.gateway is None
        if owned:
            app.state.gateway = TreolanGateway.from_config(config.upstream)
        _log_startup(config)
        try:
            yield
        finally:
            if owned:
                await app.state.gateway.aclose()
                app.state.gateway = None

    app = FastAPI(
        title="M3 Mobile × Treolan Proxy",
        description="Flat catalog and product API in front of the Treolan B2B service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(service_router)
    app.include_router(catalog_router)
    return app


_config = load_proxy_config()
logging.basicConfig(level=_config.server.log_level.upper(), format=LOG_FORMAT)

app = create_app(_config)
