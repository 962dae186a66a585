# promotions/models/coupon.py

import uuid

from django.db import models
from django.db.models import F, Q

from .offer import DiscountType


class Coupon(models.Model):
    """
    Code-redeemable discount with usage-count enforcement.

    Rules:
    - code is case-insensitive on input and stored upper-cased
    - used_count only moves through promotions.services.coupons
      (reserve on order placement, release on cancellation)
    - used_count never exceeds limit (DB check constraint)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=20, unique=True, db_index=True)

    discount_type = models.CharField(
        max_length=16,
        choices=DiscountType.choices,
        default=DiscountType.PERCENTAGE,
    )
    value = models.DecimalField(max_digits=12, decimal_places=2)

    min_purchase = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )
    limit = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Maximum number of redemptions. Empty means unlimited.",
    )
    used_count = models.PositiveIntegerField(default=0)

    expire_at = models.DateTimeField()
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(limit__isnull=True) | Q(used_count__lte=F("limit")),
                name="coupon_used_count_within_limit",
            ),
        ]

    @staticmethod
    def normalize_code(code) -> str:
        return str(code or "").strip().upper()

    def save(self, *args, **kwargs):
        self.code = self.normalize_code(self.code)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.code} | {self.used_count}/{self.limit or '∞'}"
