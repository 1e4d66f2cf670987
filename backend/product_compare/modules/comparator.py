"""
Product Comparison Orchestrator
Builds the six-field comparison (title, description, price, features, variants,
warranty) between two extracted products and the overall similarity score.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from langchain_core.embeddings import Embeddings

from product_compare.models.product import (
    ComparisonEntry,
    ComparisonResult,
    ProductInfo,
    ProductVariant,
)
from product_compare.modules.similarity import (
    array_embedding_similarity,
    array_similarity,
    embedding_similarity,
    round_half_up,
    similarity,
    variant_similarity,
    variants_embedding_similarity,
)

logger = logging.getLogger(__name__)

STRATEGY_EMBEDDING = "embedding"
STRATEGY_TOKEN = "token"

ELEMENTS = ["Product Title", "Description", "Price", "Features", "Variants", "Warranty"]


def _require(source: Optional[ProductInfo], target: Optional[ProductInfo]) -> None:
    if source is None or target is None:
        missing = "source" if source is None else "target"
        raise ValueError(f"Cannot compare products: {missing} product is missing")


def format_features(features: Sequence[str]) -> str:
    return "\n".join(features or [])


def format_variants(variants: Optional[Sequence[ProductVariant]]) -> str:
    """One line per variant: 'Color: Red, Blue (€10)'."""
    if not variants:
        return ""
    lines = []
    for v in variants:
        options = ", ".join(v.options) if v.options else ""
        price = f"({v.price})" if v.price else ""
        lines.append(f"{v.name or ''}: {options} {price}")
    return "\n".join(lines)


def _field_contents(product: ProductInfo) -> List[str]:
    # same order as ELEMENTS
    return [
        product.product_title,
        product.description,
        product.price,
        format_features(product.features),
        format_variants(product.product_variants),
        product.warranty or "",
    ]


def overall_score(entries: Sequence[ComparisonEntry]) -> int:
    if not entries:
        return 0
    return round_half_up(sum(e.similarity_score for e in entries) / len(entries))


def similarity_verdict(score: int) -> str:
    """Band an overall score: high (>80), moderate (>60) or low."""
    if score > 80:
        return "high"
    if score > 60:
        return "moderate"
    return "low"


def _build_result(source: ProductInfo, target: ProductInfo, scores: Sequence[int]) -> ComparisonResult:
    entries = [
        ComparisonEntry(
            element=element,
            source_content=source_content,
            target_content=target_content,
            similarity_score=score,
        )
        for element, source_content, target_content, score in zip(
            ELEMENTS, _field_contents(source), _field_contents(target), scores
        )
    ]
    return ComparisonResult(overall_similarity_score=overall_score(entries), comparison=entries)


def compare_products(source: ProductInfo, target: ProductInfo) -> ComparisonResult:
    """
    Token-set comparison of two products. Pure: no I/O.

    Raises:
        ValueError: If either product is missing.
    """
    _require(source, target)
    scores = [
        similarity(source.product_title, target.product_title),
        similarity(source.description, target.description),
        similarity(source.price, target.price),
        array_similarity(source.features, target.features),
        variant_similarity(source.product_variants, target.product_variants),
        similarity(source.warranty or "", target.warranty or ""),
    ]
    return _build_result(source, target, scores)


async def compare_products_semantic(
    source: ProductInfo,
    target: ProductInfo,
    embeddings: Optional[Embeddings] = None,
) -> ComparisonResult:
    """
    Embedding comparison of two products.
    The six field scores are requested concurrently; entry order stays fixed.
    """
    _require(source, target)
    scores = await asyncio.gather(
        embedding_similarity(source.product_title, target.product_title, embeddings),
        embedding_similarity(source.description, target.description, embeddings),
        embedding_similarity(source.price, target.price, embeddings),
        array_embedding_similarity(source.features, target.features, embeddings),
        variants_embedding_similarity(source.product_variants, target.product_variants, embeddings),
        embedding_similarity(source.warranty or "", target.warranty or "", embeddings),
    )
    return _build_result(source, target, scores)


async def compare(
    source: ProductInfo,
    target: ProductInfo,
    strategy: str = STRATEGY_EMBEDDING,
    embeddings: Optional[Embeddings] = None,
) -> ComparisonResult:
    """Compare with the requested strategy ('embedding' or 'token')."""
    strategy = (strategy or STRATEGY_EMBEDDING).lower().strip()
    if strategy == STRATEGY_TOKEN:
        result = compare_products(source, target)
    elif strategy == STRATEGY_EMBEDDING:
        result = await compare_products_semantic(source, target, embeddings)
    else:
        raise ValueError(
            f"Unsupported similarity strategy: '{strategy}'. "
            f"Supported: {STRATEGY_EMBEDDING}, {STRATEGY_TOKEN}"
        )
    logger.info(
        "Compared '%s' vs '%s' (%s): overall=%d",
        source.product_title[:60], target.product_title[:60], strategy, result.overall_similarity_score,
    )
    return result
