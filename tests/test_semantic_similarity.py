import asyncio

import pytest

from product_compare.models.product import ProductVariant
from product_compare.modules.similarity import (
    array_embedding_similarity,
    cosine_similarity,
    embedding_similarity,
    similarity,
    variant_text,
    variants_embedding_similarity,
)
from product_compare.modules.similarity import semantic_similarity

from conftest import FailingEmbeddings, FakeEmbeddings, MalformedEmbeddings


def test_cosine_similarity_bounds():
    assert cosine_similarity([1, 0], [1, 0]) == pytest.approx(1.0)
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)


def test_cosine_similarity_rejects_bad_vectors():
    with pytest.raises(ValueError):
        cosine_similarity([0, 0], [1, 0])
    with pytest.raises(ValueError):
        cosine_similarity([1, 0, 0], [1, 0])


@pytest.mark.parametrize("vb, expected", [
    ([1.0, 0.0], 100),   # cos 1
    ([0.0, 1.0], 50),    # cos 0
    ([-1.0, 0.0], 0),    # cos -1
])
def test_embedding_similarity_maps_cosine_to_percent(vb, expected):
    fake = FakeEmbeddings({"a": [1.0, 0.0], "b": vb})
    assert asyncio.run(embedding_similarity("a", "b", fake)) == expected


def test_embedding_similarity_makes_one_batched_request():
    fake = FakeEmbeddings()
    asyncio.run(embedding_similarity("first text", "second text", fake))
    assert fake.calls == [["first text", "second text"]]


def test_embedding_similarity_short_circuits_empty_inputs():
    fake = FakeEmbeddings()
    assert asyncio.run(embedding_similarity("", "", fake)) == 100
    assert asyncio.run(embedding_similarity(None, "x", fake)) == 0
    assert asyncio.run(embedding_similarity("x", "", fake)) == 0
    assert fake.calls == []


@pytest.mark.parametrize("client_cls", [FailingEmbeddings, MalformedEmbeddings])
def test_embedding_similarity_falls_back_to_tokens(client_cls):
    a, b = "red blue green", "red blue yellow"
    client = client_cls()
    assert asyncio.run(embedding_similarity(a, b, client)) == similarity(a, b) == 50
    assert client.calls == [[a, b]]


def test_embedding_similarity_falls_back_on_zero_vector():
    fake = FakeEmbeddings({"a b": [0.0, 0.0], "a c": [1.0, 0.0]})
    assert asyncio.run(embedding_similarity("a b", "a c", fake)) == similarity("a b", "a c")


def test_embedding_similarity_falls_back_when_client_unavailable(monkeypatch):
    def broken():
        raise RuntimeError("api_key must be set")

    monkeypatch.setattr(semantic_similarity, "get_embeddings", broken)
    assert asyncio.run(embedding_similarity("one two", "two three")) == similarity("one two", "two three")


def test_embedding_similarity_uses_shared_client_by_default(monkeypatch):
    fake = FakeEmbeddings()
    monkeypatch.setattr(semantic_similarity, "get_embeddings", lambda: fake)
    assert asyncio.run(embedding_similarity("x", "y")) == 100
    assert fake.calls == [["x", "y"]]


def test_array_embedding_similarity_joins_with_spaces():
    fake = FakeEmbeddings()
    assert asyncio.run(array_embedding_similarity([], [], fake)) == 100
    assert asyncio.run(array_embedding_similarity(["a"], [], fake)) == 0
    asyncio.run(array_embedding_similarity(["Noise Cancellation", "USB-C"], ["Bluetooth"], fake))
    assert fake.calls == [["Noise Cancellation USB-C", "Bluetooth"]]


def test_variants_embedding_similarity_flattens_variants():
    fake = FakeEmbeddings()
    a = [ProductVariant(name="Color", options=["Red"], price="$10")]
    b = [ProductVariant(options=["Blue"])]
    assert asyncio.run(variants_embedding_similarity(None, [], fake)) == 100
    assert asyncio.run(variants_embedding_similarity(a, None, fake)) == 0
    asyncio.run(variants_embedding_similarity(a, b, fake))
    assert fake.calls == [[variant_text(a), variant_text(b)]]
    assert fake.calls[0][1] == " Blue "
