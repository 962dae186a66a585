from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from catalog.models import ModifierOption, Product, ProductModifier
from promotions.models import Coupon, DiscountType, Offer


class Command(BaseCommand):
    help = "Seed products (with modifiers), offers and coupons for local development"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding catalog and promotions..."))

        now = timezone.now()

        # -------------------------------
        # OFFERS
        # -------------------------------
        global_offer, _ = Offer.objects.get_or_create(
            name="Store-wide Weekend Sale",
            defaults={
                "discount_type": DiscountType.PERCENTAGE,
                "value": Decimal("5.00"),
                "scope": Offer.Scope.GLOBAL,
                "start_date": now - timedelta(days=1),
                "end_date": now + timedelta(days=30),
            },
        )
        product_offer, _ = Offer.objects.get_or_create(
            name="20% Off Selected Items",
            defaults={
                "discount_type": DiscountType.PERCENTAGE,
                "value": Decimal("20.00"),
                "scope": Offer.Scope.PRODUCT,
                "start_date": now - timedelta(days=1),
                "end_date": now + timedelta(days=30),
            },
        )
        fixed_offer, _ = Offer.objects.get_or_create(
            name="5 Off",
            defaults={
                "discount_type": DiscountType.FIXED,
                "value": Decimal("5.00"),
                "scope": Offer.Scope.PRODUCT,
                "start_date": now - timedelta(days=1),
                "end_date": now + timedelta(days=30),
            },
        )

        # -------------------------------
        # PRODUCTS
        # -------------------------------
        products_data = [
            ("BURGER-CL", "Classic Burger", Decimal("32.00"), product_offer),
            ("BURGER-CH", "Chicken Burger", Decimal("28.00"), fixed_offer),
            ("FRIES-REG", "Fries", Decimal("9.00"), None),
            ("DRINK-COLA", "Cola", Decimal("6.00"), None),
        ]

        for sku, name, price, offer in products_data:
            product, created = Product.objects.get_or_create(
                sku=sku,
                defaults={"name": name, "price": price, "offer": offer},
            )
            if not created:
                continue

            size = ProductModifier.objects.create(product=product, name="Size", position=0)
            for position, (label, delta) in enumerate(
                [("Regular", "0.00"), ("Large", "4.00")]
            ):
                ModifierOption.objects.create(
                    modifier=size, name=label, price=Decimal(delta), position=position
                )

        # -------------------------------
        # COUPONS
        # -------------------------------
        coupons = [
            ("WELCOME10", DiscountType.PERCENTAGE, "10.00", "50.00", None),
            ("SAVE20", DiscountType.FIXED, "20.00", "100.00", 100),
            ("VIP25", DiscountType.PERCENTAGE, "25.00", None, 10),
        ]
        for code, dtype, value, min_purchase, limit in coupons:
            Coupon.objects.get_or_create(
                code=code,
                defaults={
                    "discount_type": dtype,
                    "value": Decimal(value),
                    "min_purchase": Decimal(min_purchase) if min_purchase else None,
                    "limit": limit,
                    "expire_at": now + timedelta(days=90),
                },
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded catalog (global offer: {global_offer.name}) and coupons."
            )
        )
