"""
Singleton Embeddings Manager
Manages the OpenAI embeddings client used for semantic similarity.
All modules should use get_embeddings() instead of creating new instances.
"""

import logging
from typing import Optional

from langchain_openai import OpenAIEmbeddings

from product_compare.core.config import get_settings

logger = logging.getLogger(__name__)

_embeddings_instance: Optional[OpenAIEmbeddings] = None


def get_embeddings() -> OpenAIEmbeddings:
    """
    Get the singleton OpenAI Embeddings instance.
    Uses text-embedding-3-small unless EMBEDDING_MODEL says otherwise.
    """
    global _embeddings_instance
    if _embeddings_instance is None:
        settings = get_settings()
        _embeddings_instance = OpenAIEmbeddings(
            model=settings.embedding_model,
            api_key=settings.openai_api_key or None,
        )
        logger.info("OpenAI Embeddings initialized with model=%s", settings.embedding_model)
    return _embeddings_instance


def reset_embeddings():
    """Reset the singleton instance (for testing)."""
    global _embeddings_instance
    _embeddings_instance = None
