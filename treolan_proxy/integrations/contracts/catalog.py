"""
Public catalog contract served to the storefront.

Field names are part of the frontend contract; transitDate stays camelCase on
the wire.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    articul: str = ""
    name: str = ""
    description: str = ""
    category: str = ""
    stock: int = 0
    transit: int = 0
    transit_date: Optional[str] = Field(default=None, alias="transitDate")
    available: bool = False
    vendor: str = ""


class CatalogResponse(BaseModel):
    total: int
    updated: str
    items: List[CatalogItem] = Field(default_factory=list)


class ProductCard(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    articul: str
    name: str = ""
    description: str = ""
    stock: int = 0
    transit: int = 0
    transit_date: Optional[str] = Field(default=None, alias="transitDate")
    available: bool = False
    photos: List[str] = Field(default_factory=list)
    specs: List[Any] = Field(default_factory=list)
