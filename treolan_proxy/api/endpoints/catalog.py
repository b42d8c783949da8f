import logging

from fastapi import APIRouter, Depends, Query

from treolan_proxy.api.dependencies import get_config, get_gateway
from treolan_proxy.error_handler import error_handler
from treolan_proxy.integrations.clients.real_http.treolan import TreolanGateway
from treolan_proxy.integrations.policy.response_wrappers import (
    build_catalog_query,
    build_catalog_response,
    flatten_catalog,
    normalize_product,
)
from treolan_proxy.utils.config_loader import ProxyConfig

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/catalog", tags=["Catalog"])
async def get_catalog(
    search: str = Query(default="", description="Articul or name fragment"),
    config: ProxyConfig = Depends(get_config),
    gateway: TreolanGateway = Depends(get_gateway),
):
    vendor_id = config.catalog.vendor_id
    # vendorid 0 means "all vendors": no brand post-filter then
    brand_filter = config.catalog.brand_name if vendor_id != 0 else None
    try:
        data = await gateway.get_catalog(build_catalog_query(search, vendor_id))
        items = flatten_catalog(data, brand_filter=brand_filter)
        response = build_catalog_response(items)
    except Exception as e:
        return error_handler.handle_exception(e, 500, context={"route": "catalog", "search": search})

    logger.info("Catalog served: %d items (search=%r)", len(items), search)
    return response.model_dump(by_alias=True)


@router.get("/api/product/{articul}", tags=["Catalog"])
async def get_product(articul: str, gateway: TreolanGateway = Depends(get_gateway)):
    try:
        data = await gateway.get_product(articul)
        card = normalize_product(data, articul)
    except Exception as e:
        return error_handler.handle_exception(e, 404, context={"route": "product", "articul": articul})
    return card.model_dump(by_alias=True)
