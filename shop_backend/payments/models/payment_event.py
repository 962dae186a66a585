# payments/models/payment_event.py

import uuid

from django.db import models


class PaymentEvent(models.Model):
    """
    Append-only journal of reconciliation attempts.

    One row per webhook delivery, poll or callback. FAILED rows are the
    persisted record of attempts that need a manual retry.
    """

    class Source(models.TextChoices):
        WEBHOOK = "WEBHOOK", "Webhook"
        POLL = "POLL", "Poll"
        CALLBACK = "CALLBACK", "Callback"

    class Outcome(models.TextChoices):
        RECEIVED = "RECEIVED", "Received"
        PROCESSED = "PROCESSED", "Processed"
        IGNORED = "IGNORED", "Ignored"
        FAILED = "FAILED", "Failed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    source = models.CharField(max_length=16, choices=Source.choices)
    event_type = models.CharField(max_length=64, blank=True, default="")
    payment_id = models.CharField(max_length=128, blank=True, default="", db_index=True)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payment_events",
    )

    outcome = models.CharField(
        max_length=16,
        choices=Outcome.choices,
        default=Outcome.RECEIVED,
    )
    error = models.TextField(blank=True, default="")
    payload = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["outcome", "created_at"], name="payments_pa_outcome_3d8e51_idx"),
        ]

    def __str__(self):
        return f"{self.source}:{self.event_type or '-'} {self.payment_id} [{self.outcome}]"
