from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from treolan_proxy.integrations.contracts.catalog import (
    CatalogItem,
    CatalogResponse,
    ProductCard,
)

# Treolan reports large stock as a word instead of a number.
MANY_STOCK_WORDS = {"много", "many"}
MANY_STOCK_VALUE = 999

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def build_catalog_query(search: Optional[str], vendor_id: int) -> Dict[str, Any]:
    return {
        "category": "",
        "vendorid": vendor_id,
        "keywords": search or "",
        "criterion": "Contains",
        "inArticul": True,
        "inName": True,
        "inMark": False,
        "showNc": 1,
        "freeNom": True,
    }


def parse_stock(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str):
        return 0
    if value.strip().lower() in MANY_STOCK_WORDS:
        return MANY_STOCK_VALUE
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def flatten_catalog(data: Any, brand_filter: Optional[str] = None) -> List[CatalogItem]:
    """
    Walk the category tree depth-first and return one item per product.

    Products inherit the nearest enclosing category name. Both upstream shapes
    are accepted: positions/category (older API) and products/children.
    When brand_filter is set, products whose vendor is missing or different are
    dropped; positions are kept and labelled with the brand.
    """
    items: List[CatalogItem] = []

    def visit(node: Any, parent_name: str) -> None:
        if not isinstance(node, dict):
            return
        name = node.get("name") or parent_name or ""

        # positions (older API) carry no vendor field and are never brand-filtered
        for product in _as_list(node.get("positions")):
            if isinstance(product, dict):
                items.append(_catalog_item(product, name, default_vendor=brand_filter or ""))

        for product in _as_list(node.get("products")):
            if not isinstance(product, dict):
                continue
            if brand_filter and product.get("vendor") != brand_filter:
                continue
            items.append(_catalog_item(product, name, default_vendor=""))

        for key in ("category", "children"):
            for child in _as_list(node.get(key)):
                visit(child, name)

    for root in _catalog_roots(data):
        visit(root, "")
    return items


def build_catalog_response(items: List[CatalogItem], now: Optional[datetime] = None) -> CatalogResponse:
    return CatalogResponse(total=len(items), updated=isoformat_utc(now), items=items)


def normalize_product(data: Any, articul: str) -> ProductCard:
    raw = data if isinstance(data, dict) else {}
    stock = parse_stock(_first_non_empty(raw, "atStock", "quantity", default=0))
    return ProductCard(
        articul=str(_first_non_empty(raw, "articul", default=articul)),
        name=str(_first_non_empty(raw, "rusName", "name", "description", default="")),
        description=str(_first_non_empty(raw, "description", default="")),
        stock=stock,
        transit=parse_stock(_first_non_empty(raw, "atTransit", "transitQuantity", default=0)),
        transit_date=_optional_str(_first_non_empty(raw, "nearestDeliveryDate", "transitDate")),
        available=stock > 0,
        photos=extract_photos(raw),
        specs=extract_specs(raw),
    )


def extract_photos(data: Dict[str, Any]) -> List[str]:
    for key in ("images", "photos"):
        if isinstance(data.get(key), list):
            return [url for url in (_photo_url(entry) for entry in data[key]) if url]
    for key in ("imageUrl", "image"):
        if data.get(key):
            return [str(data[key])]
    return []


def extract_specs(data: Dict[str, Any]) -> List[Any]:
    for key in ("properties", "attributes"):
        if isinstance(data.get(key), list):
            return [
                {"name": prop.get("name"), "value": prop.get("value")}
                for prop in data[key]
                if isinstance(prop, dict)
            ]
    if isinstance(data.get("specs"), list):
        return data["specs"]
    return []


def _catalog_item(product: Dict[str, Any], category: str, default_vendor: str) -> CatalogItem:
    stock = parse_stock(_first_non_empty(product, "atStock", "quantity", default=0))
    return CatalogItem(
        articul=str(_first_non_empty(product, "articul", default="")),
        name=str(_first_non_empty(product, "rusName", "name", "description", default="")),
        description=str(_first_non_empty(product, "description", default="")),
        category=category,
        stock=stock,
        transit=parse_stock(_first_non_empty(product, "atTransit", "transitQuantity", default=0)),
        transit_date=_optional_str(_first_non_empty(product, "nearestDeliveryDate", "transitDate")),
        available=stock > 0,
        vendor=str(_first_non_empty(product, "vendor", default=default_vendor)),
    )


def _catalog_roots(data: Any) -> Iterable[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return _as_list(data.get("categories")) or _as_list(data.get("category"))
    return []


def _photo_url(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        url = entry.get("url") or entry.get("src")
        return url if isinstance(url, str) else None
    return None


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return default


def isoformat_utc(now: Optional[datetime] = None) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
