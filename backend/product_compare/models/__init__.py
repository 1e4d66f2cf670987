from .product import ProductVariant, ProductInfo, ComparisonEntry, ComparisonResult

__all__ = [
    "ProductVariant",
    "ProductInfo",
    "ComparisonEntry",
    "ComparisonResult",
]
