from .product import ProductViewSet

__all__ = [
    "ProductViewSet",
]
