# storefront/services/comparison_service.py
import json
import logging

from pydantic import TypeAdapter, ValidationError

from storefront.core.local_storage import LocalStorage
from storefront.schemas.compare import CompareProduct

logger = logging.getLogger(__name__)

MAX_COMPARE_ITEMS = 4
STORAGE_KEY = "compare_products"

_products = TypeAdapter(list[CompareProduct])


class ComparisonStore:
    """
    Products picked for side-by-side comparison.

    Device-local only: insertion-ordered, at most MAX_COMPARE_ITEMS, no
    duplicate ids. Written to local storage on every change and read back
    once when constructed. Unreadable stored data counts as an empty list
    and the key is cleared.
    """

    max_items = MAX_COMPARE_ITEMS

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.products: list[CompareProduct] = self._load()

    def _load(self) -> list[CompareProduct]:
        stored = self.storage.get_item(STORAGE_KEY)
        if not stored:
            return []
        try:
            products = _products.validate_json(stored)
        except ValidationError as e:
            logger.warning("discarding unreadable comparison list: %s", e.errors()[:1])
            self.storage.remove_item(STORAGE_KEY)
            return []
        # a hand-edited store may break the invariants; keep the first 4 unique
        unique: list[CompareProduct] = []
        for product in products:
            if len(unique) >= MAX_COMPARE_ITEMS:
                break
            if all(p.id != product.id for p in unique):
                unique.append(product)
        return unique

    def _persist(self) -> None:
        self.storage.set_item(
            STORAGE_KEY, json.dumps([p.model_dump(mode="json") for p in self.products])
        )

    @property
    def can_add_more(self) -> bool:
        return len(self.products) < MAX_COMPARE_ITEMS

    def is_in_compare(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self.products)

    def add_to_compare(self, product: CompareProduct) -> bool:
        """Append; no-op (False) when already present or full."""
        if self.is_in_compare(product.id) or not self.can_add_more:
            return False
        self.products = [*self.products, product]
        self._persist()
        return True

    def remove_from_compare(self, product_id: str) -> None:
        self.products = [p for p in self.products if p.id != product_id]
        self._persist()

    def clear_compare(self) -> None:
        self.products = []
        self._persist()
