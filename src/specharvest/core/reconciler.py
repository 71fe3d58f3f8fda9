"""Merge a product's extracted properties against the property catalog.

The reconciled mapping always has the same shape for a given catalog:

1. the article-number identity field,
2. the product-name identity field,
3. every other catalog property, in catalog order.

Downstream consumers (tables, export) take column order from the mapping's
insertion order, so the result must never be re-sorted.
"""

import logging
from typing import Dict, Iterable, List

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.constants import (
    ARTICLE_NUMBER_FIELD,
    IDENTITY_FIELDS,
    NOT_FOUND_VALUE,
    PRODUCT_NAME_FIELD,
    RESERVED_PREFIX,
    USER_INPUT_CONFIDENCE,
)
from specharvest.core.models import Product, PropertyMap, PropertyValue
from specharvest.core.scoring import has_value

logger = logging.getLogger(__name__)


def _identity_value(name: str, value: str) -> PropertyValue:
    return PropertyValue(
        name=name,
        value=value,
        sources=(),
        confidence=USER_INPUT_CONFIDENCE,
        is_consistent=True,
    )


def not_found(name: str) -> PropertyValue:
    """Placeholder for a catalog property the extraction did not return."""
    return PropertyValue(name=name, value=NOT_FOUND_VALUE, sources=(), confidence=0)


def reconcile(product: Product, catalog: PropertyCatalog) -> PropertyMap:
    """Build the complete, ordered property mapping for a product.

    Args:
        product: Product with raw extracted properties (possibly none).
        catalog: Ordered property definitions.

    Returns:
        Dict in emission order: identity fields first, then catalog order.
    """
    result: Dict[str, PropertyValue] = {}

    result[ARTICLE_NUMBER_FIELD] = _identity_value(
        ARTICLE_NUMBER_FIELD, product.article_number or ""
    )
    result[PRODUCT_NAME_FIELD] = _identity_value(
        PRODUCT_NAME_FIELD, product.product_name
    )

    properties = product.properties or {}
    missing = 0
    for definition in catalog:
        name = definition.name
        if name in IDENTITY_FIELDS or name.startswith(RESERVED_PREFIX):
            continue
        if name in result:
            # Duplicate catalog entry, first one wins
            continue

        extracted = properties.get(name)
        if extracted is not None:
            result[name] = extracted
        else:
            result[name] = not_found(name)
            missing += 1

    logger.debug(
        "Reconciled product %s: %d properties, %d not found",
        product.id,
        len(result),
        missing,
    )
    return result


def reconcile_all(
    products: Iterable[Product], catalog: PropertyCatalog
) -> List[PropertyMap]:
    """Reconcile every product against the same catalog."""
    return [reconcile(product, catalog) for product in products]


def found_count(reconciled: PropertyMap) -> int:
    """Count catalog properties that carry an actual value."""
    return sum(
        1
        for name, prop in reconciled.items()
        if name not in IDENTITY_FIELDS and has_value(prop.value)
    )
