#!/usr/bin/env python3
"""Command-line interface for Spec Harvest.

Reconcile stored results against a property catalog, export them, inspect
their raw page content, or start the API server.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.models import SearchResult
from specharvest.core.payload_converter import PayloadConverter
from specharvest.core.reconciler import reconcile
from specharvest.core.scoring import confidence_tier, has_value
from specharvest.services.config_service import ConfigService
from specharvest.services.export_service import export_products
from specharvest.services.raw_content import (
    bundle,
    collect_raw_content,
    content_filename,
    entry_label,
    preview,
)
from specharvest.services.selection import ProductSelection

logger = logging.getLogger(__name__)


def load_result(path: Path) -> SearchResult:
    """Read a result JSON file in the legacy wire format."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return PayloadConverter.from_payload(data)


def load_catalog(path: Path) -> PropertyCatalog:
    """Read a catalog from YAML or JSON.

    Accepts a list of records (or bare names), or a mapping with a
    ``properties`` list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("properties", [])
    return PropertyCatalog.from_records(data)


def _cmd_reconcile(args: argparse.Namespace) -> int:
    result = load_result(args.result)
    if result.is_empty:
        print("Result contains no products", file=sys.stderr)
        return 1

    catalog = load_catalog(args.catalog)
    selection = ProductSelection.of(result, args.product)
    product = selection.active_product
    reconciled = reconcile(product, catalog)

    print(f"{product.product_name} ({selection.position_label})")
    if result.is_partial:
        print("Partial result: run content analysis to extract properties")
    width = max((len(name) for name in reconciled), default=0)
    for name, prop in reconciled.items():
        tier = confidence_tier(prop.confidence).value if has_value(prop.value) else "-"
        print(f"  {name.ljust(width)}  {prop.value}  [{prop.confidence}% {tier}]")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    result = load_result(args.result)
    if result.is_empty:
        print("Result contains no products", file=sys.stderr)
        return 1

    catalog = load_catalog(args.catalog) if args.catalog else None
    output: Optional[Path] = args.output
    fmt = args.format
    if fmt is None and output is not None and output.suffix in (".csv", ".xlsx"):
        fmt = output.suffix[1:]
    options = ConfigService(args.config).get_export_options(
        format=fmt,
        include_source_urls=args.sources or None,
        include_confidence_scores=args.confidence or None,
        include_summary=args.summary or None,
        filename=output.stem if output else None,
    )
    artifact = export_products(
        result.products,
        search_method=result.search_method,
        options=options,
        catalog=catalog,
        ordering=[(name, i) for i, name in enumerate(args.order)] or None,
    )
    target = output if output else Path(artifact.filename)
    target.write_bytes(artifact.content)
    print(f"Wrote {len(result.products)} products to {target}")
    return 0


def _cmd_raw_content(args: argparse.Namespace) -> int:
    result = load_result(args.result)
    entries = collect_raw_content(result)
    if not entries:
        print("Result carries no raw content", file=sys.stderr)
        return 1

    if args.output is not None:
        target = args.output
        if target.is_dir():
            target = target / content_filename(result.first_product)
        target.write_text(bundle(entries), encoding="utf-8")
        print(f"Wrote {len(entries)} content sources to {target}")
        return 0

    max_chars = ConfigService(args.config).load().display.raw_content_preview_chars
    for number, entry in enumerate(entries, start=1):
        print(f"#{number} {entry_label(entry)} ({entry.length} characters)")
        print(preview(entry, max_chars))
        print()
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    from specharvest.api.main import serve

    serve(host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="specharvest",
        description="Reconcile, score and export product technical data",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (default: ~/.specharvest/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_reconcile = subparsers.add_parser(
        "reconcile", help="Print the reconciled properties of a product"
    )
    p_reconcile.add_argument("result", type=Path, help="Result JSON file")
    p_reconcile.add_argument(
        "--catalog", type=Path, required=True, help="Catalog YAML/JSON file"
    )
    p_reconcile.add_argument(
        "--product", type=int, default=0, help="Product index (default: 0)"
    )
    p_reconcile.set_defaults(func=_cmd_reconcile)

    p_export = subparsers.add_parser("export", help="Export a result to CSV/Excel")
    p_export.add_argument("result", type=Path, help="Result JSON file")
    p_export.add_argument("--catalog", type=Path, help="Catalog YAML/JSON file")
    p_export.add_argument("--format", choices=["csv", "xlsx"], default=None)
    p_export.add_argument("-o", "--output", type=Path, help="Output file")
    p_export.add_argument(
        "--sources", action="store_true", help="Include source URL columns"
    )
    p_export.add_argument(
        "--confidence", action="store_true", help="Include confidence columns"
    )
    p_export.add_argument(
        "--summary", action="store_true", help="Add a summary sheet (xlsx only)"
    )
    p_export.add_argument(
        "--order",
        action="append",
        default=[],
        metavar="NAME",
        help="Put this property column first (repeatable, in the given order)",
    )
    p_export.set_defaults(func=_cmd_export)

    p_raw = subparsers.add_parser(
        "raw-content", help="Show or save the raw page text of a result"
    )
    p_raw.add_argument("result", type=Path, help="Result JSON file")
    p_raw.add_argument(
        "-o", "--output", type=Path, help="Write the full bundle to a file or directory"
    )
    p_raw.set_defaults(func=_cmd_raw_content)

    p_serve = subparsers.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    from specharvest.app_utils import logging_config  # noqa: F401

    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
