"""
Product and comparison models.
Attributes are snake_case in Python and camelCase on the wire
(productTitle, productVariants, similarityScore, overallSimilarityScore, ...).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductVariant(CamelModel):
    """A configuration axis of a product (e.g. Color, Size)."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(None, description="Variant name (e.g., 'Color', 'Size')")
    options: Optional[List[str]] = Field(None, description="Option values for this variant")
    price: Optional[str] = Field(
        None, description="Price if different from base price (include currency symbol)"
    )


class ProductInfo(CamelModel):
    """Structured product information extracted from a product page."""

    model_config = ConfigDict(frozen=True)

    product_title: str = Field(..., description="The title of the product")
    description: str = Field(..., description="A concise description of the product")
    price: str = Field(..., description="The price of the product (include currency symbol)")
    features: List[str] = Field(default_factory=list, description="Product features")
    product_variants: Optional[List[ProductVariant]] = Field(None, description="Product variants")
    warranty: Optional[str] = Field(None, description="Warranty information if available")


class ComparisonEntry(CamelModel):
    element: str
    source_content: str
    target_content: str
    similarity_score: int = Field(..., ge=0, le=100)


class ComparisonResult(CamelModel):
    overall_similarity_score: int = Field(..., ge=0, le=100)
    comparison: List[ComparisonEntry]

    def to_wire(self) -> dict:
        """Serialize with the camelCase field names clients expect."""
        return self.model_dump(by_alias=True)
