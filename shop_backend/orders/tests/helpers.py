# orders/tests/helpers.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from catalog.models import ModifierOption, Product, ProductModifier
from orders.models import Address
from promotions.models import Coupon, DiscountType, Offer

User = get_user_model()


def make_customer(username="customer", **extra):
    return User.objects.create_user(username=username, password="pass", **extra)


def make_staff(username="staff"):
    return User.objects.create_user(username=username, password="pass", is_staff=True)


def make_address(user, **overrides):
    data = {
        "full_name": "Sara Ali",
        "phone": "+966500000000",
        "line1": "King Fahd Rd 1",
        "city": "Riyadh",
    }
    data.update(overrides)
    return Address.objects.create(user=user, **data)


def make_product(sku="BURGER", price="100.00", offer=None, name=None, **extra):
    return Product.objects.create(
        sku=sku,
        name=name or sku.title(),
        price=Decimal(price),
        offer=offer,
        **extra,
    )


def add_modifier(product, name="Size", options=(("Large", "4.00"),)):
    modifier = ProductModifier.objects.create(product=product, name=name)
    created = [
        ModifierOption.objects.create(modifier=modifier, name=label, price=Decimal(delta))
        for label, delta in options
    ]
    return modifier, created


def make_offer(
    *,
    discount_type=DiscountType.PERCENTAGE,
    value="20.00",
    scope=Offer.Scope.PRODUCT,
    name=None,
    **extra,
):
    now = timezone.now()
    data = {
        "name": name or f"{scope} {value}",
        "discount_type": discount_type,
        "value": Decimal(value),
        "scope": scope,
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=1),
    }
    data.update(extra)
    return Offer.objects.create(**data)


def make_coupon(code="SAVE10", *, discount_type=DiscountType.PERCENTAGE, value="10.00", **extra):
    data = {
        "code": code,
        "discount_type": discount_type,
        "value": Decimal(value),
        "expire_at": timezone.now() + timedelta(days=7),
    }
    data.update(extra)
    return Coupon.objects.create(**data)


def line(product, quantity=1, modifiers=None):
    return {
        "product_id": product.id,
        "quantity": quantity,
        "modifiers": modifiers or [],
    }
