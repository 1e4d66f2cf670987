"""
Embedding-based similarity.
Scores two texts by the cosine similarity of their OpenAI embeddings, mapped from
[-1, 1] to [0, 100]. Any failure of the embedding provider falls back to the
token-set score for the same inputs; callers never see the error.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from langchain_core.embeddings import Embeddings

from product_compare.core.embeddings import get_embeddings
from product_compare.models.product import ProductVariant
from .text_similarity import round_half_up, similarity, variant_text

logger = logging.getLogger(__name__)


def cosine_similarity(u: Sequence[float], v: Sequence[float]) -> float:
    a = np.asarray(u, dtype=float)
    b = np.asarray(v, dtype=float)
    if a.ndim != 1 or a.shape != b.shape or a.size == 0:
        raise ValueError(f"Embedding shapes do not match: {a.shape} vs {b.shape}")
    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0:
        raise ValueError("Cannot compute cosine similarity of a zero vector")
    return float(np.dot(a, b) / norm)


async def _embedding_score(a: str, b: str, embeddings: Optional[Embeddings]) -> int:
    client = embeddings or get_embeddings()
    vectors = await client.aembed_documents([a, b])
    if not vectors or len(vectors) != 2:
        raise ValueError(f"Expected 2 embeddings, got {len(vectors) if vectors else 0}")

    cos = cosine_similarity(vectors[0], vectors[1])
    score = round_half_up((cos + 1) * 50)
    return max(0, min(100, score))


async def embedding_similarity(
    a: Optional[str],
    b: Optional[str],
    embeddings: Optional[Embeddings] = None,
) -> int:
    """
    Semantic similarity of two texts (0-100).

    Args:
        a, b: Texts to compare
        embeddings: Embeddings client; the shared OpenAI client when omitted

    Returns:
        round((cos + 1) * 50), or the token-set score if the embedding call fails
    """
    if not a and not b:
        return 100
    if not a or not b:
        return 0

    try:
        return await _embedding_score(a, b, embeddings)
    except Exception as e:
        logger.warning("Embedding similarity failed, using token fallback: %s", e)
        return similarity(a, b)


async def array_embedding_similarity(
    a: Optional[Sequence[str]],
    b: Optional[Sequence[str]],
    embeddings: Optional[Embeddings] = None,
) -> int:
    if not a and not b:
        return 100
    if not a or not b:
        return 0
    return await embedding_similarity(" ".join(a), " ".join(b), embeddings)


async def variants_embedding_similarity(
    a: Optional[Sequence[ProductVariant]],
    b: Optional[Sequence[ProductVariant]],
    embeddings: Optional[Embeddings] = None,
) -> int:
    if not a and not b:
        return 100
    if not a or not b:
        return 0
    return await embedding_similarity(variant_text(a), variant_text(b), embeddings)
