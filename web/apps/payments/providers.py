"""Wire ``PaymentService`` with the HTTP provider client or the stub."""

from django.conf import settings

from .adapters import PaymentLinkStub
from .domain import PaymentService
from .http_adapters import HttpPaymentLinkClient


def get_payment_service() -> PaymentService:
    """Return a PaymentService for the current settings.

    ``USE_HTTP_ADAPTERS`` selects the real provider client; otherwise the
    in-process stub is used.
    """
    if getattr(settings, "USE_HTTP_ADAPTERS", False):
        provider = HttpPaymentLinkClient()
    else:
        provider = PaymentLinkStub()
    return PaymentService(provider=provider, currency=settings.PAYMENT_CURRENCY)
