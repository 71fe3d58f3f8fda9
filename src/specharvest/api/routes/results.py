"""Result reconciliation, export and raw content endpoints."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from specharvest.api.deps import ConfigDep, ConfigServiceDep
from specharvest.api.schemas import (
    ColumnOrderSchema,
    ErrorResponse,
    ExportRequest,
    ProductListSchema,
    ProductSummarySchema,
    PropertyDefinitionSchema,
    RawContentEntrySchema,
    RawContentRequest,
    RawContentResponse,
    ReconcileRequest,
    ReconcileResponse,
    ScoredPropertySchema,
    SourceListSchema,
    SourceSchema,
)
from specharvest.core.catalog import PropertyCatalog
from specharvest.core.models import Product, ResultPhase
from specharvest.core.payload_converter import PayloadConverter
from specharvest.core.reconciler import found_count, reconcile
from specharvest.core.scoring import (
    confidence_tier,
    consistency_tier,
    has_value,
    support_tier,
)
from specharvest.core.source import Source
from specharvest.core.source_registry import register, truncate
from specharvest.core.status import is_partial_result
from specharvest.services.export_service import export_products
from specharvest.services.raw_content import (
    BUNDLE_FILENAME,
    bundle,
    collect_raw_content,
    content_filename,
    entry_filename,
    entry_label,
    preview,
)
from specharvest.services.selection import ProductSelection

logger = logging.getLogger(__name__)

router = APIRouter()


def _catalog(records: List[PropertyDefinitionSchema]) -> PropertyCatalog:
    return PropertyCatalog.from_records(r.model_dump() for r in records)


def _source_schema(source: Source) -> SourceSchema:
    return SourceSchema(
        url=source.url, title=source.title, source_label=source.source_label
    )


def _product_summary(product: Product) -> ProductSummarySchema:
    return ProductSummarySchema(
        id=str(product.id),
        product_name=product.product_name,
        article_number=product.article_number,
    )


def _ordering(entries: List[ColumnOrderSchema]):
    return [(entry.name, entry.order_index) for entry in entries]


ERROR_RESPONSES = {400: {"model": ErrorResponse}}


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_result(
    request: ReconcileRequest, config: ConfigDep
) -> ReconcileResponse:
    """Reconcile the selected product of a result against a catalog."""
    result = PayloadConverter.from_payload(request.result, tag_phase=False)
    if result.is_empty:
        raise HTTPException(status_code=422, detail="Result contains no products")

    selection = ProductSelection.of(result, request.product_index)
    product = selection.active_product
    catalog = _catalog(request.catalog)
    reconciled = reconcile(product, catalog)
    logger.debug(
        "Reconciled product %s against %d catalog entries", product.id, len(catalog)
    )

    scoring = config.scoring
    automated = result.is_automated
    properties = []
    for name, prop in reconciled.items():
        present = has_value(prop.value)
        properties.append(
            ScoredPropertySchema(
                name=name,
                value=prop.value,
                found=present,
                confidence=prop.confidence,
                confidence_tier=confidence_tier(
                    prop.confidence,
                    high=scoring.high_confidence,
                    medium=scoring.medium_confidence,
                    low=scoring.low_confidence,
                ).value,
                consistency_tier=consistency_tier(
                    present,
                    automated,
                    prop.consistency_count,
                    strong=scoring.strong_agreement,
                    moderate=scoring.moderate_agreement,
                ).value,
                support_tier=support_tier(prop).value,
                sources=[_source_schema(s) for s in prop.sources],
            )
        )

    limit = request.sources_limit
    if limit is None:
        limit = config.display.sources_preview_limit
    view = truncate(register(product.sources), limit)
    product_view = selection.preview(config.display.products_preview_limit)

    markers = config.workflow.step_one_markers
    if result.phase is not None:
        partial = result.phase == ResultPhase.PARTIAL
    else:
        partial = is_partial_result(result, markers)

    return ReconcileResponse(
        product_id=str(product.id),
        product_name=product.product_name,
        article_number=product.article_number,
        position=selection.position_label,
        is_partial=partial,
        found_count=found_count(reconciled),
        properties=properties,
        sources=SourceListSchema(
            shown=[_source_schema(s) for s in view.shown],
            total=view.total,
            has_more=view.has_more,
        ),
        products=ProductListSchema(
            shown=[_product_summary(p) for p in product_view.shown],
            total=product_view.total,
            has_more=product_view.has_more,
        ),
    )


@router.post("/export", responses=ERROR_RESPONSES)
async def export_result(
    request: ExportRequest, config_service: ConfigServiceDep
) -> Response:
    """Export all products of a result as CSV or Excel."""
    result = PayloadConverter.from_payload(request.result, tag_phase=False)
    if result.is_empty:
        raise HTTPException(status_code=422, detail="Result contains no products")

    try:
        options = config_service.get_export_options(
            format=request.format,
            include_product_data=request.include_product_data,
            include_source_urls=request.include_source_urls,
            include_confidence_scores=request.include_confidence_scores,
            include_summary=request.include_summary,
            filename=request.filename,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    catalog = _catalog(request.catalog) if request.catalog else None
    artifact = export_products(
        result.products,
        search_method=result.search_method,
        options=options,
        catalog=catalog,
        ordering=_ordering(request.ordering) if request.ordering else None,
    )
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.filename}"'
        },
    )


@router.post("/raw-content", response_model=RawContentResponse)
async def inspect_raw_content(
    request: RawContentRequest, config: ConfigDep
) -> RawContentResponse:
    """Raw page text collected for a result, previewed and bundled."""
    result = PayloadConverter.from_payload(request.result, tag_phase=False)
    if result.is_empty:
        raise HTTPException(status_code=422, detail="Result contains no products")

    max_chars = request.preview_chars or config.display.raw_content_preview_chars
    entries = collect_raw_content(result)
    logger.debug("Inspecting %d raw content entries", len(entries))
    return RawContentResponse(
        entries=[
            RawContentEntrySchema(
                label=entry_label(entry),
                url=entry.url,
                length=entry.length,
                preview=preview(entry, max_chars),
                filename=entry_filename(index),
            )
            for index, entry in enumerate(entries)
        ],
        bundle=bundle(entries),
        bundle_filename=BUNDLE_FILENAME,
        content_filename=content_filename(result.first_product),
    )
