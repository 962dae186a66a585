# payments/apps.py

"""
PAYMENTS APP CONFIG

Online payment settlement:
- Moyasar gateway client
- Webhook + poll reconciliation
- Payment event journal
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
