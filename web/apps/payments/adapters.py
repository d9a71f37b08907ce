"""In-process stub for the payment provider port.

Used for tests and local development, where no provider account is
configured. Identifiers are derived from the order number, so the same
order always gets the same link.
"""

from typing import Optional

from .domain import LinkRequest, PaymentLinkRefs, PaymentProviderPort


class PaymentLinkStub(PaymentProviderPort):
    BASE_URL = "https://payments.invalid/pay"

    def create_payment_link(self, req: LinkRequest, idempotency_key: Optional[str] = None) -> PaymentLinkRefs:
        suffix = req.order_number.lower().replace("-", "_")
        link_id = f"plink_stub_{suffix}"
        return PaymentLinkRefs(
            url=f"{self.BASE_URL}/{link_id}",
            product_id=f"prod_stub_{suffix}",
            price_id=f"price_stub_{suffix}",
            payment_link_id=link_id,
        )
