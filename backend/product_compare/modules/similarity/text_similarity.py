# product_compare/modules/similarity/text_similarity.py
import math
import re
from typing import Iterable, Optional, Sequence, Set

from product_compare.models.product import ProductVariant

_WHITESPACE = re.compile(r"\s+")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def tokenize(text: str) -> Set[str]:
    """
    Lowercase and split on runs of whitespace; duplicates collapse.
    Leading or trailing whitespace yields an empty-string token.
    """
    if not text:
        return set()
    return set(_WHITESPACE.split(text.lower()))


def similarity(a: Optional[str], b: Optional[str]) -> int:
    """
    Jaccard overlap of the token sets of a and b, scaled to 0-100.
    Both empty is a full match, exactly one empty is no match.
    """
    if not a and not b:
        return 100
    if not a or not b:
        return 0

    ta = tokenize(a)
    tb = tokenize(b)
    return round_half_up(len(ta & tb) / len(ta | tb) * 100)


def array_similarity(a: Optional[Sequence[str]], b: Optional[Sequence[str]]) -> int:
    """Join each list with a single space, then compare as text."""
    if not a and not b:
        return 100
    if not a or not b:
        return 0
    return similarity(" ".join(a), " ".join(b))


def _variant_line(variant: ProductVariant) -> str:
    options = " ".join(variant.options) if variant.options else ""
    return f"{variant.name or ''} {options} {variant.price or ''}"


def variant_text(variants: Iterable[ProductVariant]) -> str:
    """
    Flatten variants to "{name} {options} {price}" per variant, joined by a space.
    Absent fields render as "" so the interior double spaces are kept.
    """
    return " ".join(_variant_line(v) for v in variants)


def variant_similarity(
    a: Optional[Sequence[ProductVariant]],
    b: Optional[Sequence[ProductVariant]],
) -> int:
    if not a and not b:
        return 100
    if not a or not b:
        return 0
    return similarity(variant_text(a), variant_text(b))
