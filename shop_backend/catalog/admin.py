# catalog/admin.py
"""
=====================================================
PATH: catalog/admin.py
=====================================================

Admin rules:
- Products are edited with their modifiers inline.
- Modifier options are edited on the modifier page.
- Option price deltas only affect orders placed after the edit
  (order items keep their own snapshot).
"""

from django.contrib import admin

from catalog.models import ModifierOption, Product, ProductModifier


class ProductModifierInline(admin.TabularInline):
    model = ProductModifier
    extra = 0
    show_change_link = True


class ModifierOptionInline(admin.TabularInline):
    model = ModifierOption
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "price", "offer", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "sku")
    autocomplete_fields = ("offer",)
    inlines = [ProductModifierInline]


@admin.register(ProductModifier)
class ProductModifierAdmin(admin.ModelAdmin):
    list_display = ("name", "product", "position")
    search_fields = ("name", "product__name")
    inlines = [ModifierOptionInline]
