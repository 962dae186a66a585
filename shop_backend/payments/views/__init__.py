from .callback import MoyasarCallbackView
from .checkout import OrderPaymentCreateView
from .status import PaymentStatusView
from .webhook import MoyasarWebhookView

__all__ = [
    "MoyasarCallbackView",
    "MoyasarWebhookView",
    "OrderPaymentCreateView",
    "PaymentStatusView",
]
