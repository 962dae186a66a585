from .catalog import get_product_snapshot

__all__ = [
    "get_product_snapshot",
]
