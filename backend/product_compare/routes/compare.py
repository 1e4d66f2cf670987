"""
Product Comparison Route
POST /api/compare-products — scrape (or take markdown for) two products, extract
their structured info and score their similarity field by field.
"""

import logging
from typing import Optional, Tuple

from fastapi import APIRouter, HTTPException

from product_compare.core.async_helpers import run_blocking, run_pair
from product_compare.core.config import get_settings
from product_compare.models.product import CamelModel, ProductInfo
from product_compare.modules.comparator import STRATEGY_EMBEDDING, STRATEGY_TOKEN, compare, similarity_verdict
from product_compare.modules.product_extractor import ExtractionError, extract_product_info
from product_compare.modules.scraper import ScrapeError, scrape_markdown
from product_compare.utils.validators import validate_url

logger = logging.getLogger(__name__)

router = APIRouter()


class CompareRequest(CamelModel):
    source_url: Optional[str] = None
    target_url: Optional[str] = None
    source_markdown: Optional[str] = None
    target_markdown: Optional[str] = None
    strategy: Optional[str] = None


def _resolve_side(url: Optional[str], markdown: Optional[str], label: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (validated_url, markdown) for one side; the URL wins when both are given."""
    if url:
        return validate_url(url, field=f"{label} URL"), None
    if markdown and markdown.strip():
        return None, markdown
    raise ValueError(f"Either {label.lower()}Url or {label.lower()}Markdown must be provided")


async def _markdown_for(url: Optional[str], markdown: Optional[str]) -> str:
    if url:
        return await run_blocking(scrape_markdown, url)
    return markdown


@router.post("/compare-products")
async def compare_products_endpoint(req: CompareRequest):
    """
    Compare two products.
    Both pages are scraped in parallel, then both extractions run in parallel.
    """
    try:
        source_url, source_md = _resolve_side(req.source_url, req.source_markdown, "Source")
        target_url, target_md = _resolve_side(req.target_url, req.target_markdown, "Target")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    strategy = (req.strategy or get_settings().similarity_strategy).strip().lower()
    if strategy not in (STRATEGY_EMBEDDING, STRATEGY_TOKEN):
        raise HTTPException(
            status_code=400,
            detail=f"Unknown similarity strategy: {strategy!r}. Use '{STRATEGY_EMBEDDING}' or '{STRATEGY_TOKEN}'.",
        )

    logger.info("🚀 COMPARE START: source=%s target=%s strategy=%s", source_url or "markdown", target_url or "markdown", strategy)

    try:
        source_md, target_md = await run_pair(
            _markdown_for(source_url, source_md),
            _markdown_for(target_url, target_md),
        )
        source_product, target_product = await run_pair(
            extract_product_info(source_md),
            extract_product_info(target_md),
        )
    except ScrapeError as e:
        logger.error("❌ Scraping failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    except ExtractionError as e:
        logger.error("❌ Extraction failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))

    try:
        result = await compare(source_product, target_product, strategy=strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("✅ COMPARE COMPLETED: overall=%d", result.overall_similarity_score)
    return {
        "success": True,
        "sourceUrl": source_url,
        "targetUrl": target_url,
        **result.to_wire(),
        "verdict": similarity_verdict(result.overall_similarity_score),
        "sourceProduct": _product_payload(source_product),
        "targetProduct": _product_payload(target_product),
    }


def _product_payload(product: ProductInfo) -> dict:
    return product.model_dump(by_alias=True, exclude_none=True)
