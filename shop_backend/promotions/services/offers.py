# promotions/services/offers.py

from __future__ import annotations

from django.utils import timezone

from promotions.models import Offer


def active_offers(now=None):
    now = now or timezone.now()
    return Offer.objects.filter(
        is_active=True,
        start_date__lte=now,
        end_date__gt=now,
    )


def get_active_global_offer(now=None) -> Offer | None:
    """
    The single authoritative store-wide offer at `now`.

    Several GLOBAL offers may overlap; the most recently created one wins.
    """
    return (
        active_offers(now)
        .filter(scope=Offer.Scope.GLOBAL)
        .order_by("-created_at")
        .first()
    )
