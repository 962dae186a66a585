# promotions/models/offer.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class DiscountType(models.TextChoices):
    PERCENTAGE = "PERCENTAGE", "Percentage"
    FIXED = "FIXED", "Fixed Amount"


class Offer(models.Model):
    """
    Time-bounded discount rule.

    Scope:
    - GLOBAL: store-wide, applied to the aggregate order total
    - PRODUCT: applied per unit to the products that reference it

    Active window is half-open: [start_date, end_date).
    """

    class Scope(models.TextChoices):
        GLOBAL = "GLOBAL", "Store-wide"
        PRODUCT = "PRODUCT", "Product"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")

    discount_type = models.CharField(
        max_length=16,
        choices=DiscountType.choices,
        default=DiscountType.PERCENTAGE,
    )
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Percent (e.g. 20.00) if PERCENTAGE; currency amount if FIXED.",
    )
    scope = models.CharField(
        max_length=16,
        choices=Scope.choices,
        default=Scope.PRODUCT,
    )

    is_active = models.BooleanField(default=True)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["scope", "is_active"], name="promotions__scope_8c1f2a_idx"),
            models.Index(
                fields=["start_date", "end_date"], name="promotions__start_d_4e7b90_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(value__gt=0), name="offer_value_positive"),
            models.CheckConstraint(
                condition=Q(end_date__gt=F("start_date")),
                name="offer_end_after_start",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.discount_type} {self.value})"

    def clean(self):
        if self.value is None or self.value <= 0:
            raise ValidationError("Offer value must be greater than zero")
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError("end_date must be after start_date")
