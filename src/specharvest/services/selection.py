"""Multi-product selection over an immutable result.

All methods are pure - they return a new ``ProductSelection`` (or ``None``
when the result is discarded) instead of mutating state.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from specharvest.core.constants import DEFAULT_PRODUCTS_PREVIEW_LIMIT
from specharvest.core.models import Product, SearchResult
from specharvest.core.source_registry import SourceListView, truncate

logger = logging.getLogger(__name__)


def _clamp(index: int, length: int) -> Optional[int]:
    if length <= 0:
        return None
    return max(0, min(index, length - 1))


@dataclass(frozen=True)
class ProductSelection:
    """The active result together with the selected product index.

    ``active_index`` is always a valid index into ``result.products``, or
    ``None`` when the result has no products.
    """

    result: SearchResult
    active_index: Optional[int] = 0

    def __post_init__(self):
        index = self.active_index if self.active_index is not None else 0
        object.__setattr__(
            self, "active_index", _clamp(index, len(self.result.products))
        )

    @classmethod
    def of(cls, result: SearchResult, index: int = 0) -> "ProductSelection":
        return cls(result=result, active_index=index)

    @property
    def products(self):
        return self.result.products

    @property
    def active_product(self) -> Optional[Product]:
        if self.active_index is None:
            return None
        return self.result.products[self.active_index]

    @property
    def position_label(self) -> str:
        """Human-readable position, e.g. "2 / 3"."""
        if self.active_index is None:
            return "0 / 0"
        return f"{self.active_index + 1} / {len(self.result.products)}"

    def preview(
        self, limit: Optional[int] = DEFAULT_PRODUCTS_PREVIEW_LIMIT
    ) -> SourceListView[Product]:
        """First ``limit`` products for the collapsed product list."""
        return truncate(self.result.products, limit)

    def select(self, index: int) -> "ProductSelection":
        """Select a product; out-of-range indices are clamped."""
        if self.active_index is None:
            return self
        clamped = _clamp(index, len(self.result.products))
        if clamped != index:
            logger.debug("Selection index %d clamped to %s", index, clamped)
        return ProductSelection(result=self.result, active_index=clamped)

    def delete(self, index: int) -> Optional["ProductSelection"]:
        """Remove a product.

        Deleting the only product discards the whole result and returns
        ``None``. Otherwise the active index keeps pointing at the same
        logical product, or at its predecessor when it was the one removed.
        """
        count = len(self.result.products)
        if count == 0:
            return None
        if count == 1:
            logger.info("Deleted last product, discarding result")
            return None

        removed = _clamp(index, count)
        active = self.active_index if self.active_index is not None else 0
        products = tuple(p for i, p in enumerate(self.result.products) if i != removed)

        if removed == active:
            new_active = max(0, removed - 1)
        elif removed < active:
            new_active = active - 1
        else:
            new_active = active

        logger.info(
            "Deleted product %d of %d, active index %d -> %d",
            removed,
            count,
            active,
            new_active,
        )
        return ProductSelection(
            result=self.result.with_products(products), active_index=new_active
        )

    def replace_result(self, result: SearchResult) -> Optional["ProductSelection"]:
        """Swap in a new result, keeping the selected index where possible."""
        if result.is_empty:
            return None
        index = self.active_index if self.active_index is not None else 0
        return ProductSelection(result=result, active_index=index)
