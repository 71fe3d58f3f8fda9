"""Unit tests for CSV/Excel export."""

import csv
import io

import pytest
from openpyxl import load_workbook

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.models import Product, PropertyValue, SearchMethod
from specharvest.core.scoring import ConsistencyTier
from specharvest.core.source import Source
from specharvest.services.export_service import (
    ExportOptions,
    build_catalog_table,
    build_export_table,
    build_summary_rows,
    column_names,
    export_products,
    write_csv,
    write_xlsx,
)


@pytest.fixture
def products():
    sources = (Source(url="https://a.test/1"), Source(url="https://b.test/2"))
    return [
        Product(
            id=1,
            product_name="Drill X100",
            article_number="4711",
            properties={
                "Power": PropertyValue(
                    name="Power", value="500 W", confidence=85, sources=sources
                ),
                "Voltage": PropertyValue(name="Voltage", value="Not found"),
                "__meta_sources": PropertyValue(name="__meta_sources", value="x"),
            },
        ),
        Product(
            id=2,
            product_name="Drill X200",
            properties={
                "Weight": PropertyValue(
                    name="Weight", value="2 kg", confidence=60, consistency_count=3
                ),
            },
        ),
    ]


@pytest.mark.unit
class TestColumnNames:
    """Tests for column ordering."""

    def test_first_seen_order(self, products):
        """Without an override names keep first-seen order."""
        maps = [p.properties for p in products]
        assert column_names(maps) == ["Power", "Voltage", "Weight"]

    def test_override_first_then_rest(self, products):
        """Override names lead, sorted by order index; the rest follow."""
        maps = [p.properties for p in products]
        ordering = [("Weight", 0), ("Missing", 1), ("Voltage", 2)]

        assert column_names(maps, ordering) == ["Weight", "Voltage", "Power"]


@pytest.mark.unit
class TestBuildExportTable:
    """Tests for build_export_table()."""

    def test_default_columns(self, products):
        """Product columns lead, placeholders are exported blank."""
        table = build_export_table(products, SearchMethod.AUTO)

        assert table.headers == [
            "Article Number",
            "Product Name",
            "Search Method",
            "Power",
            "Voltage",
            "Weight",
        ]
        values = table.values()
        assert values[1] == ["4711", "Drill X100", "auto", "500 W", "", ""]
        assert values[2] == ["", "Drill X200", "auto", "", "", "2 kg"]

    def test_confidence_and_source_columns(self, products):
        """Optional columns follow each property column."""
        options = ExportOptions(
            include_product_data=False,
            include_confidence_scores=True,
            include_source_urls=True,
        )
        table = build_export_table(products, options=options)

        assert table.headers[:3] == ["Power", "Power - Confidence", "Power - Sources"]
        row = table.values()[1]
        assert row[:3] == ["500 W", "85%", "https://a.test/1, https://b.test/2"]
        # Missing property: blank value, blank confidence
        assert table.values()[2][:3] == ["", "", ""]

    def test_cells_carry_support_tier(self, products):
        """Cells are tiered by source support."""
        table = build_export_table(
            products, options=ExportOptions(include_product_data=False)
        )

        assert table.rows[0][0].tier == ConsistencyTier.MODERATE
        assert table.rows[0][1].tier == ConsistencyTier.UNKNOWN
        assert table.rows[1][2].tier == ConsistencyTier.STRONG

    def test_catalog_reconciles_and_orders(self, products):
        """With a catalog every product gets every catalog column."""
        catalog = PropertyCatalog.from_records(["Weight", "Power"])
        table = build_export_table(
            products,
            options=ExportOptions(include_product_data=False),
            catalog=catalog,
        )

        assert table.headers == ["Weight", "Power", "Artikelnummer", "ArtikelName"]
        assert table.values()[2][:2] == ["2 kg", ""]

    def test_identity_fields_not_repeated(self, products):
        """Product columns replace the reconciled identity fields."""
        catalog = PropertyCatalog.from_records(["Power"])
        table = build_export_table(products, catalog=catalog)

        assert table.headers == [
            "Article Number",
            "Product Name",
            "Search Method",
            "Power",
        ]


@pytest.mark.unit
class TestWriters:
    """Tests for the CSV and Excel writers."""

    def test_write_csv(self, products):
        """CSV output is UTF-8 with a header row."""
        content = write_csv(build_export_table(products))
        rows = list(csv.reader(io.StringIO(content.decode("utf-8"))))

        assert rows[0][0] == "Article Number"
        assert rows[1][3] == "500 W"
        assert len(rows) == 3

    def test_write_xlsx(self, products):
        """Excel output has the data sheet, fills and column widths."""
        content = write_xlsx(
            build_export_table(products), summary=build_summary_rows(products)
        )
        wb = load_workbook(io.BytesIO(content))

        assert wb.sheetnames == ["Product Data", "Summary"]
        ws = wb["Product Data"]
        assert ws["A1"].value == "Article Number"
        assert ws["A1"].font.bold
        assert ws["D2"].value == "500 W"
        assert ws["D2"].fill.start_color.rgb.endswith("F7FEE7")
        assert ws.column_dimensions["A"].width == 18

    def test_export_products_csv(self, products):
        """export_products returns a named artifact."""
        artifact = export_products(
            products, options=ExportOptions(format="csv", filename="drills")
        )

        assert artifact.filename == "drills.csv"
        assert artifact.media_type.startswith("text/csv")
        assert artifact.content.startswith(b"Article Number")

    def test_export_products_xlsx(self, products):
        """The default format is Excel."""
        artifact = export_products(products)
        assert artifact.filename == "product-data.xlsx"
        assert artifact.content[:2] == b"PK"

    def test_invalid_format(self):
        """Unknown formats are rejected."""
        with pytest.raises(ValueError):
            ExportOptions(format="pdf")


@pytest.mark.unit
class TestSummaryAndCatalogTables:
    """Tests for the auxiliary tables."""

    def test_summary_rows(self, products):
        """Summary excludes reserved keys and averages positive scores."""
        values = build_summary_rows(products).values()

        assert values[0][0] == "#"
        assert values[1] == [1, "4711", "Drill X100", 2, "85%"]
        assert values[2] == [2, "", "Drill X200", 1, "60%"]

    def test_catalog_table(self):
        """Catalog rows list definitions in display order."""
        catalog = PropertyCatalog.from_records(
            [
                {"name": "B", "orderIndex": 1, "isRequired": True},
                {"name": "A", "orderIndex": 0, "expectedFormat": "mm"},
            ]
        )
        values = build_catalog_table(catalog).values()

        assert values[1] == [1, "A", "", "mm", "No"]
        assert values[2] == [2, "B", "", "", "Yes"]
