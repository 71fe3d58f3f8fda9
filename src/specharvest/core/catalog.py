"""Read-only adapter over the externally supplied property catalog.

The catalog is the source of truth for which properties a product has and
in which order they are displayed and exported.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from specharvest.core.constants import IDENTITY_FIELDS


@dataclass(frozen=True)
class PropertyDefinition:
    """A single catalog entry."""

    name: str
    id: Optional[int] = None
    description: Optional[str] = None
    expected_format: Optional[str] = None
    order_index: int = 0
    is_required: bool = False

    @property
    def is_identity(self) -> bool:
        return self.name in IDENTITY_FIELDS

    def to_request_dict(self) -> Dict[str, Any]:
        """Shape sent to the analysis endpoint (id, name, description, format)."""
        data: Dict[str, Any] = {"name": self.name}
        if self.id is not None:
            data["id"] = self.id
        if self.description:
            data["description"] = self.description
        if self.expected_format:
            data["expectedFormat"] = self.expected_format
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyDefinition":
        """Create from a catalog record (camelCase or snake_case keys)."""
        order_index = data.get("orderIndex", data.get("order_index"))
        return cls(
            name=str(data["name"]),
            id=data.get("id"),
            description=data.get("description") or None,
            expected_format=(
                data.get("expectedFormat", data.get("expected_format")) or None
            ),
            order_index=int(order_index) if order_index is not None else 0,
            is_required=bool(data.get("isRequired", data.get("is_required", False))),
        )


class PropertyCatalog:
    """Ordered, immutable list of property definitions.

    Iteration order is the display order. The engine never mutates a catalog;
    the constructor copies its input into a tuple.
    """

    def __init__(self, definitions: Iterable[PropertyDefinition] = ()):
        self._definitions: Tuple[PropertyDefinition, ...] = tuple(definitions)

    @classmethod
    def from_records(
        cls, records: Iterable[Union[Dict[str, Any], str]], sort: bool = True
    ) -> "PropertyCatalog":
        """Build a catalog from raw records.

        Args:
            records: Dicts with at least a ``name`` key, or bare names.
            sort: Order by ``orderIndex``. The sort is stable, so records
                sharing an index keep their supplied order.
        """
        definitions = [
            PropertyDefinition(name=r) if isinstance(r, str) else
            PropertyDefinition.from_dict(r)
            for r in records
        ]
        if sort:
            definitions.sort(key=lambda d: d.order_index)
        return cls(definitions)

    @property
    def definitions(self) -> Tuple[PropertyDefinition, ...]:
        return self._definitions

    @property
    def names(self) -> List[str]:
        return [d.name for d in self._definitions]

    def get(self, name: str) -> Optional[PropertyDefinition]:
        for definition in self._definitions:
            if definition.name == name:
                return definition
        return None

    def ordering(self) -> List[Tuple[str, int]]:
        """Return ``(name, position)`` pairs usable as an export override."""
        return [(d.name, position) for position, d in enumerate(self._definitions)]

    def to_request_list(self) -> List[Dict[str, Any]]:
        return [d.to_request_dict() for d in self._definitions]

    def __iter__(self) -> Iterator[PropertyDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return any(d.name == name for d in self._definitions)

    def __repr__(self) -> str:
        return f"PropertyCatalog({len(self)} properties)"
