"""Converters between the legacy wire format and the core value types.

The search/analysis endpoints speak a camelCase JSON format in which
product-level side data travels inside the property mapping under reserved
keys (``__meta_sources``, ``__search_status``). This module moves that data
into ``ProductMetadata`` on the way in and puts it back on the way out.

Malformed payloads never raise: a payload without a usable ``products`` list
converts to an empty result ("no result").
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from specharvest.core.constants import (
    META_SOURCES_KEY,
    META_SOURCES_LABEL,
    RAW_CONTENT_KEY,
    RESERVED_PREFIX,
    SEARCH_STATUS_KEY,
)
from specharvest.core.models import (
    Product,
    ProductMetadata,
    PropertyValue,
    ResultPhase,
    SearchMethod,
    SearchResult,
    SearchStatus,
)
from specharvest.core.source import RawContentEntry, Source
from specharvest.core.status import is_partial_result

logger = logging.getLogger(__name__)


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class PayloadConverter:
    """Convert between wire dicts and core models."""

    @staticmethod
    def source_from_payload(data: Any) -> Optional[Source]:
        if isinstance(data, str):
            return Source(url=data)
        if not isinstance(data, dict):
            return None
        return Source.from_dict(data)

    @staticmethod
    def sources_from_payload(data: Any) -> List[Source]:
        if not isinstance(data, list):
            return []
        sources = [PayloadConverter.source_from_payload(item) for item in data]
        return [s for s in sources if s is not None]

    @staticmethod
    def raw_content_from_payload(data: Any) -> List[RawContentEntry]:
        """Convert a raw content list; anything but a list yields no entries."""
        if not isinstance(data, list):
            return []
        return [
            RawContentEntry.from_dict(item)
            for item in data
            if isinstance(item, (dict, str))
        ]

    @staticmethod
    def property_from_payload(name: str, data: Any) -> PropertyValue:
        """Convert one property entry.

        Bare scalars are accepted as values without sources.
        """
        if not isinstance(data, dict):
            return PropertyValue(name=name, value="" if data is None else str(data))

        value = data.get("value")
        return PropertyValue(
            name=str(data.get("name") or name),
            value="" if value is None else str(value),
            sources=tuple(PayloadConverter.sources_from_payload(data.get("sources"))),
            confidence=_as_int(data.get("confidence")) or 0,
            is_consistent=data.get("isConsistent"),
            consistency_count=_as_int(data.get("consistencyCount")),
            source_count=_as_int(data.get("sourceCount")),
        )

    @staticmethod
    def product_from_payload(data: Dict[str, Any], index: int = 0) -> Product:
        """Convert one product, lifting reserved keys into metadata."""
        raw_properties = data.get("properties")
        if not isinstance(raw_properties, dict):
            raw_properties = {}

        properties: Dict[str, PropertyValue] = {}
        meta_sources: Optional[List[Source]] = None
        meta_label = META_SOURCES_LABEL
        search_status: Optional[str] = None

        for key, entry in raw_properties.items():
            if key == META_SOURCES_KEY:
                entry = entry if isinstance(entry, dict) else {}
                meta_sources = PayloadConverter.sources_from_payload(
                    entry.get("sources")
                )
                meta_label = str(entry.get("value") or META_SOURCES_LABEL)
            elif key == SEARCH_STATUS_KEY:
                if isinstance(entry, dict):
                    search_status = str(entry.get("value") or "searching")
                else:
                    search_status = str(entry or "searching")
            elif key.startswith(RESERVED_PREFIX):
                logger.debug("Dropping reserved property key %s", key)
            else:
                properties[key] = PayloadConverter.property_from_payload(key, entry)

        raw_content = PayloadConverter.raw_content_from_payload(
            data.get(RAW_CONTENT_KEY)
        )

        product_id = data.get("id")
        if product_id is None or product_id == "":
            product_id = f"product-{index}"

        article_number = data.get("articleNumber")
        return Product(
            id=product_id,
            product_name=str(data.get("productName") or ""),
            article_number=None if article_number is None else str(article_number),
            properties=properties,
            metadata=ProductMetadata(
                sources=tuple(meta_sources) if meta_sources is not None else None,
                sources_label=meta_label,
                search_status=search_status,
                raw_content=tuple(raw_content),
            ),
        )

    @staticmethod
    def from_payload(data: Any, tag_phase: bool = True) -> SearchResult:
        """Convert a search/analysis response.

        Args:
            data: Decoded JSON response.
            tag_phase: Derive the explicit ``phase`` tag from the legacy
                partial-result heuristic.

        Returns:
            SearchResult; empty when the payload is malformed.
        """
        if not isinstance(data, dict):
            logger.warning(
                "Malformed result payload (%s), treating as empty", type(data).__name__
            )
            return SearchResult()

        raw_products = data.get("products")
        if not isinstance(raw_products, list):
            logger.warning("Result payload without products list, treating as empty")
            raw_products = []

        products = tuple(
            PayloadConverter.product_from_payload(p, i)
            for i, p in enumerate(raw_products)
            if isinstance(p, dict)
        )

        status = data.get("searchStatus")
        try:
            search_status = SearchStatus(status) if status else None
        except ValueError:
            logger.debug("Unknown search status %r ignored", status)
            search_status = None

        status_message = data.get("statusMessage")
        if status_message is not None and not isinstance(status_message, str):
            status_message = str(status_message)

        result = SearchResult(
            products=products,
            search_method=SearchMethod.parse(data.get("searchMethod", "auto")),
            search_status=search_status,
            status_message=status_message,
            min_consistent_sources=_as_int(data.get("minConsistentSources")),
            raw_content=tuple(
                PayloadConverter.raw_content_from_payload(data.get("rawContent"))
            ),
            id=data.get("id"),
            created_at=(
                str(data["createdAt"]) if data.get("createdAt") is not None else None
            ),
        )

        if tag_phase and products:
            phase = (
                ResultPhase.PARTIAL if is_partial_result(result) else ResultPhase.FINAL
            )
            result = replace(result, phase=phase)
        return result

    @staticmethod
    def property_to_payload(prop: PropertyValue) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": prop.name,
            "value": prop.value,
            "sources": [s.to_dict() for s in prop.sources],
            "confidence": prop.confidence,
        }
        if prop.is_consistent is not None:
            data["isConsistent"] = prop.is_consistent
        if prop.consistency_count is not None:
            data["consistencyCount"] = prop.consistency_count
        if prop.source_count is not None:
            data["sourceCount"] = prop.source_count
        return data

    @staticmethod
    def product_to_payload(product: Product) -> Dict[str, Any]:
        """Convert a product back to the legacy shape, reserved keys included."""
        properties = {
            name: PayloadConverter.property_to_payload(prop)
            for name, prop in product.properties.items()
        }
        metadata = product.metadata
        if metadata.sources is not None:
            properties[META_SOURCES_KEY] = {
                "name": META_SOURCES_KEY,
                "value": metadata.sources_label,
                "sources": [s.to_dict() for s in metadata.sources],
                "confidence": 100,
                "isConsistent": True,
            }
        if metadata.search_status is not None:
            properties[SEARCH_STATUS_KEY] = {
                "name": SEARCH_STATUS_KEY,
                "value": metadata.search_status,
                "sources": [],
                "confidence": 0,
            }

        data: Dict[str, Any] = {
            "id": product.id,
            "productName": product.product_name,
            "properties": properties,
        }
        if product.article_number is not None:
            data["articleNumber"] = product.article_number
        if metadata.raw_content:
            data[RAW_CONTENT_KEY] = [e.to_dict() for e in metadata.raw_content]
        return data

    @staticmethod
    def to_payload(result: SearchResult) -> Dict[str, Any]:
        """Convert a result back to the legacy response shape."""
        data: Dict[str, Any] = {
            "searchMethod": result.search_method.value,
            "products": [
                PayloadConverter.product_to_payload(p) for p in result.products
            ],
        }
        if result.id is not None:
            data["id"] = result.id
        if result.search_status is not None:
            data["searchStatus"] = result.search_status.value
        if result.status_message is not None:
            data["statusMessage"] = result.status_message
        if result.min_consistent_sources is not None:
            data["minConsistentSources"] = result.min_consistent_sources
        if result.raw_content:
            data["rawContent"] = [e.to_dict() for e in result.raw_content]
        if result.created_at is not None:
            data["createdAt"] = result.created_at
        return data
