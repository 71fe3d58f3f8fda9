"""Tabular export of extracted product data to CSV and Excel.

One row per product, one column group per property. Every cell carries the
support tier of its property so writers can highlight cells the same way the
result table does.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.constants import IDENTITY_FIELDS, RESERVED_PREFIX
from specharvest.core.models import Product, PropertyValue, SearchMethod
from specharvest.core.reconciler import reconcile
from specharvest.core.scoring import (
    ConsistencyTier,
    average_confidence,
    has_value,
    support_tier,
)

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "xlsx")

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

SHEET_NAME = "Product Data"
SUMMARY_SHEET_NAME = "Summary"
COLUMN_WIDTH = 18

# Cell fills matching the result table highlighting
HEADER_FILL = "F3F4F6"
TIER_FILLS = {
    ConsistencyTier.STRONG: "F0FDF4",
    ConsistencyTier.MODERATE: "F7FEE7",
    ConsistencyTier.WEAK: "FEFCE8",
    ConsistencyTier.UNKNOWN: "FFFFFF",
}
BORDER_COLOR = "E5E7EB"


@dataclass
class ExportOptions:
    """What to include in an export."""

    format: str = "xlsx"
    include_product_data: bool = True
    include_source_urls: bool = False
    include_confidence_scores: bool = False
    include_summary: bool = False
    filename: str = "product-data"

    def __post_init__(self):
        self.format = self.format.lower()
        if self.format not in EXPORT_FORMATS:
            raise ValueError(
                f"format must be one of {EXPORT_FORMATS}, got {self.format!r}"
            )
        if not self.filename or not self.filename.strip():
            raise ValueError("filename must be a non-empty string")


@dataclass(frozen=True)
class ExportCell:
    value: Any
    tier: ConsistencyTier = ConsistencyTier.UNKNOWN


@dataclass
class ExportTable:
    """Header row plus data rows of cells."""

    headers: List[str] = field(default_factory=list)
    rows: List[List[ExportCell]] = field(default_factory=list)

    def values(self) -> List[List[Any]]:
        """Plain cell values, header row first."""
        return [list(self.headers)] + [[c.value for c in row] for row in self.rows]


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    media_type: str
    content: bytes


def export_value(prop: Optional[PropertyValue]) -> str:
    """Value written to a cell; placeholders are exported blank."""
    if prop is None or not has_value(prop.value):
        return ""
    return prop.value


def column_names(
    property_maps: Iterable[Dict[str, PropertyValue]],
    ordering: Optional[Sequence[Tuple[str, int]]] = None,
) -> List[str]:
    """Collect property columns across products.

    Names appear in first-seen order. Names listed in ``ordering`` come
    first, sorted by their order index; reserved names are never exported.
    """
    seen: Dict[str, None] = {}
    for properties in property_maps:
        for name in properties:
            if not name.startswith(RESERVED_PREFIX):
                seen.setdefault(name, None)

    if not ordering:
        return list(seen)

    ordered = [
        name
        for name, _ in sorted(
            ((n, i) for n, i in ordering if n in seen), key=lambda item: item[1]
        )
    ]
    ordered = list(dict.fromkeys(ordered))
    return ordered + [name for name in seen if name not in ordered]


def build_export_table(
    products: Sequence[Product],
    search_method: SearchMethod = SearchMethod.AUTO,
    ordering: Optional[Sequence[Tuple[str, int]]] = None,
    options: Optional[ExportOptions] = None,
    catalog: Optional[PropertyCatalog] = None,
) -> ExportTable:
    """Build the export table for a set of products.

    Args:
        products: Products to export, one row each.
        search_method: Method written to the "Search Method" column.
        ordering: Optional ``(name, order_index)`` override for column order.
        options: Column selection.
        catalog: When given, products are reconciled against it first and
            its order is used when no explicit ``ordering`` is passed.
    """
    options = options or ExportOptions()
    if catalog is not None:
        property_maps = [reconcile(product, catalog) for product in products]
        if ordering is None:
            ordering = catalog.ordering()
    else:
        property_maps = [dict(product.properties) for product in products]

    names = column_names(property_maps, ordering)
    if options.include_product_data:
        # Already covered by the leading product columns
        names = [name for name in names if name not in IDENTITY_FIELDS]

    headers: List[str] = []
    if options.include_product_data:
        headers.extend(["Article Number", "Product Name", "Search Method"])
    for name in names:
        headers.append(name)
        if options.include_confidence_scores:
            headers.append(f"{name} - Confidence")
        if options.include_source_urls:
            headers.append(f"{name} - Sources")

    rows: List[List[ExportCell]] = []
    for product, properties in zip(products, property_maps):
        row: List[ExportCell] = []
        if options.include_product_data:
            row.append(ExportCell(product.article_number or ""))
            row.append(ExportCell(product.product_name or ""))
            row.append(ExportCell(search_method.value))

        for name in names:
            prop = properties.get(name)
            tier = support_tier(prop)
            row.append(ExportCell(export_value(prop), tier))
            if options.include_confidence_scores:
                row.append(
                    ExportCell(f"{prop.confidence}%" if prop is not None else "", tier)
                )
            if options.include_source_urls:
                if prop is not None and prop.sources:
                    urls = ", ".join(s.url for s in prop.sources)
                    row.append(ExportCell(urls, tier))
                else:
                    row.append(ExportCell(""))
        rows.append(row)

    logger.debug("Built export table: %d rows, %d columns", len(rows), len(headers))
    return ExportTable(headers=headers, rows=rows)


def build_summary_rows(products: Sequence[Product]) -> ExportTable:
    """One summary row per product with property count and mean confidence."""
    headers = [
        "#",
        "Article Number",
        "Product Name",
        "Properties Count",
        "Avg. Confidence",
    ]
    rows = []
    for index, product in enumerate(products, start=1):
        properties = [
            p
            for name, p in product.properties.items()
            if not name.startswith(RESERVED_PREFIX)
        ]
        rows.append(
            [
                ExportCell(index),
                ExportCell(product.article_number or ""),
                ExportCell(product.product_name),
                ExportCell(len(properties)),
                ExportCell(f"{average_confidence(properties)}%"),
            ]
        )
    return ExportTable(headers=headers, rows=rows)


def build_catalog_table(catalog: PropertyCatalog) -> ExportTable:
    """Catalog definitions in display order, for sharing a property list."""
    headers = ["Order", "Property Name", "Description", "Expected Format", "Required"]
    rows = [
        [
            ExportCell(position),
            ExportCell(definition.name),
            ExportCell(definition.description or ""),
            ExportCell(definition.expected_format or ""),
            ExportCell("Yes" if definition.is_required else "No"),
        ]
        for position, definition in enumerate(catalog, start=1)
    ]
    return ExportTable(headers=headers, rows=rows)


def write_csv(table: ExportTable) -> bytes:
    """Serialize a table as UTF-8 CSV (no highlighting)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerows(table.values())
    return buffer.getvalue().encode("utf-8")


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _write_sheet(ws, table: ExportTable) -> None:
    side = Side(style="thin", color=BORDER_COLOR)
    border = Border(top=side, bottom=side, left=side, right=side)

    ws.append(table.headers)
    for cell in ws[1]:
        cell.fill = _fill(HEADER_FILL)
        cell.font = Font(bold=True, size=11)
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = border

    for row_index, row in enumerate(table.rows, start=2):
        for col_index, export_cell in enumerate(row, start=1):
            cell = ws.cell(row=row_index, column=col_index, value=export_cell.value)
            cell.fill = _fill(TIER_FILLS[export_cell.tier])
            cell.font = Font(size=10)
            cell.alignment = Alignment(horizontal="left", vertical="center")
            cell.border = border

    for col_index in range(1, len(table.headers) + 1):
        ws.column_dimensions[get_column_letter(col_index)].width = COLUMN_WIDTH


def write_xlsx(
    table: ExportTable,
    summary: Optional[ExportTable] = None,
    sheet_name: str = SHEET_NAME,
) -> bytes:
    """Serialize a table as an Excel workbook with tier highlighting."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    _write_sheet(ws, table)

    if summary is not None:
        _write_sheet(wb.create_sheet(SUMMARY_SHEET_NAME), summary)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_products(
    products: Sequence[Product],
    search_method: SearchMethod = SearchMethod.AUTO,
    options: Optional[ExportOptions] = None,
    catalog: Optional[PropertyCatalog] = None,
    ordering: Optional[Sequence[Tuple[str, int]]] = None,
) -> ExportArtifact:
    """Build and serialize an export in the requested format."""
    options = options or ExportOptions()
    table = build_export_table(
        products,
        search_method=search_method,
        ordering=ordering,
        options=options,
        catalog=catalog,
    )

    if options.format == "csv":
        content = write_csv(table)
    else:
        summary = build_summary_rows(products) if options.include_summary else None
        content = write_xlsx(table, summary=summary)

    logger.info(
        "Exported %d products as %s (%d bytes)",
        len(products),
        options.format,
        len(content),
    )
    return ExportArtifact(
        filename=f"{options.filename}.{options.format}",
        media_type=MEDIA_TYPES[options.format],
        content=content,
    )
