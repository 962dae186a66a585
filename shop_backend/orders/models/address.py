# orders/models/address.py

import uuid

from django.conf import settings
from django.db import models


class Address(models.Model):
    """
    Saved customer address. Orders copy it into Order.shipping_address,
    so editing or deleting an address never rewrites a placed order.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    label = models.CharField(max_length=60, blank=True, default="")
    full_name = models.CharField(max_length=120)
    phone = models.CharField(max_length=40)
    line1 = models.CharField(max_length=255)
    line2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=120)
    region = models.CharField(max_length=120, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=2, default="SA")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    SNAPSHOT_FIELDS = (
        "label",
        "full_name",
        "phone",
        "line1",
        "line2",
        "city",
        "region",
        "postal_code",
        "country",
    )

    def to_snapshot(self) -> dict:
        data = {name: getattr(self, name) for name in self.SNAPSHOT_FIELDS}
        data["address_id"] = str(self.id)
        return data

    def __str__(self):
        return f"{self.full_name}, {self.line1}, {self.city}"
