"""
Similarity Module
Token-set (Jaccard) and embedding (cosine) scoring for product fields.
"""

from .text_similarity import (
    round_half_up,
    tokenize,
    similarity,
    array_similarity,
    variant_text,
    variant_similarity,
)
from .semantic_similarity import (
    cosine_similarity,
    embedding_similarity,
    array_embedding_similarity,
    variants_embedding_similarity,
)

__all__ = [
    # Token-set scoring
    "round_half_up",
    "tokenize",
    "similarity",
    "array_similarity",
    "variant_text",
    "variant_similarity",

    # Embedding scoring
    "cosine_similarity",
    "embedding_similarity",
    "array_embedding_similarity",
    "variants_embedding_similarity",
]
