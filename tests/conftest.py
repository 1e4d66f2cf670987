import asyncio
from typing import Dict, List, Sequence

import pytest

from product_compare.core.config import get_settings
from product_compare.core.embeddings import reset_embeddings
from product_compare.core.llm_factory import reset_llm_instances
from product_compare.models.product import ProductInfo, ProductVariant


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Every test starts from env-derived settings and empty singletons."""
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("FIRECRAWL_API_KEY", "")
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_MODEL", "")
    monkeypatch.setenv("SIMILARITY_STRATEGY", "embedding")
    get_settings.cache_clear()
    reset_llm_instances(clear_overrides=True)
    reset_embeddings()
    yield
    get_settings.cache_clear()
    reset_llm_instances(clear_overrides=True)
    reset_embeddings()


class FakeEmbeddings:
    """
    Deterministic embeddings: each text maps to a fixed vector (or a default).
    Records every batch it is asked to embed.
    """

    def __init__(self, vectors: Dict[str, List[float]] | None = None, default=None, delays=None):
        self.vectors = vectors or {}
        self.default = default or [1.0, 0.0, 0.0]
        self.delays = delays or {}
        self.calls: List[List[str]] = []

    def _vector(self, text: str) -> List[float]:
        return self.vectors.get(text, self.default)

    def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        return self._vector(text)

    async def aembed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        delay = max((self.delays.get(t, 0) for t in texts), default=0)
        if delay:
            await asyncio.sleep(delay)
        return self.embed_documents(texts)


class FailingEmbeddings(FakeEmbeddings):
    async def aembed_documents(self, texts):
        self.calls.append(list(texts))
        raise RuntimeError("insufficient_quota")


class MalformedEmbeddings(FakeEmbeddings):
    async def aembed_documents(self, texts):
        self.calls.append(list(texts))
        return [[0.1, 0.2]]


@pytest.fixture
def headphones() -> ProductInfo:
    return ProductInfo(
        product_title="Acme Wireless Headphones X1",
        description="Over-ear wireless headphones with active noise cancellation",
        price="$199.99",
        features=["Noise Cancellation", "30-hour battery", "Bluetooth 5.3"],
        product_variants=[
            ProductVariant(name="Color", options=["Black", "Silver"]),
            ProductVariant(name="Edition", options=["Standard", "Pro"], price="$249.99"),
        ],
        warranty="2 year limited warranty",
    )


@pytest.fixture
def cheaper_headphones(headphones) -> ProductInfo:
    return headphones.model_copy(update={"price": "$149.99"})
