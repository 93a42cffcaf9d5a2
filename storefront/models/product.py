# storefront/models/product.py
from typing import Any

from pydantic import model_validator
from sqlmodel import SQLModel


class ProductSnippet(SQLModel):
    """
    Product columns pulled in through foreign-key expansion
    (`products(...)` in a select). Only what the stores render.

    The nested `stores(name)` expansion is flattened into `store_name`.
    """

    id: str
    name: str
    price: float = 0.0
    image_url: str | None = None
    description: str | None = None
    inventory_count: int | None = None
    is_active: bool = True
    store_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def flatten_store(cls, data: Any) -> Any:
        if isinstance(data, dict) and "stores" in data:
            data = dict(data)
            store = data.pop("stores") or {}
            data.setdefault("store_name", store.get("name"))
        return data


class LowStockProduct(SQLModel):
    """Row returned by get_low_stock_products(store_id_param)."""

    id: str
    name: str
    inventory_count: int
    low_stock_threshold: int
