# catalog/services/catalog.py

"""
CATALOG READ SERVICE

Purpose:
- Load product snapshots for pricing (product + offer + modifiers + options)
  in a fixed number of queries.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db.models import Prefetch

from catalog.models import ModifierOption, Product, ProductModifier


def product_snapshot_queryset():
    return Product.objects.select_related("offer").prefetch_related(
        Prefetch(
            "modifiers",
            queryset=ProductModifier.objects.prefetch_related(
                Prefetch("options", queryset=ModifierOption.objects.all())
            ),
        )
    )


def get_product_snapshot(product_id) -> Product | None:
    """
    Product with offer and modifier options loaded, or None when missing.

    Inactive products are returned as-is; callers decide whether that is
    an error.
    """
    try:
        return product_snapshot_queryset().filter(id=product_id).first()
    except (ValidationError, ValueError):
        return None


def find_modifier_option(product: Product, modifier_id, option_id):
    """
    Resolve (modifier, option) on a product snapshot, or (None, None).
    """
    for modifier in product.modifiers.all():
        if str(modifier.id) != str(modifier_id):
            continue
        for option in modifier.options.all():
            if str(option.id) == str(option_id):
                return modifier, option
        return modifier, None
    return None, None
