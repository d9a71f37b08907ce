"""HTTP client for the payment provider with retries and a circuit breaker.

This module implements the ``PaymentProviderPort`` against a Stripe-style
REST API using ``httpx``. It adds:

- Request correlation: propagates ``X-Request-ID`` from the ContextVar set
  by the gateway middleware.
- A circuit breaker shared by all provider calls, to stop hammering an
  unhealthy provider, with HALF_OPEN probing after a timeout.
- A bounded retry policy with exponential backoff for transport errors and
  5xx responses. ``HTTP_RETRY_MAX`` is the total number of attempts and
  defaults to 1 (single attempt).
- Idempotency: every request carries an ``Idempotency-Key`` derived from
  the caller's key, so a retried request cannot create a second resource.
"""

import logging
import threading
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import httpx
from django.conf import settings

from apps.common.errors import UpstreamUnavailable
from gateway.middleware import REQUEST_ID_CTX

from .domain import LinkRequest, PaymentLinkRefs, PaymentProviderPort

logger = logging.getLogger("storefront.payments")


class CircuitOpen(UpstreamUnavailable):
    def __init__(self, name: str):
        super().__init__(f"Payment provider unavailable ({name} circuit open)")


# ---------------- Circuit Breaker ---------------- #

class CircuitBreaker:
    """Minimal circuit breaker with CLOSED/OPEN/HALF_OPEN states.

    Transitions:
    - CLOSED -> OPEN when failures reach ``fail_threshold``.
    - OPEN -> HALF_OPEN after ``reset_timeout`` seconds.
    - HALF_OPEN -> CLOSED on a successful probe; only one probe may be in
      flight; a failed probe opens the circuit again.

    Thread-safe via an internal lock.
    """

    def __init__(self, name: str, fail_threshold: int, reset_timeout: float):
        self.name = name
        self.fail_threshold = fail_threshold
        self.reset_timeout = reset_timeout
        self._lock = threading.RLock()
        self._failures = 0
        self._state = "CLOSED"  # CLOSED | OPEN | HALF_OPEN
        self._opened_at = 0.0
        self._half_open_probe_in_flight = False

    @property
    def state(self) -> str:
        with self._lock:
            if self._state == "OPEN" and (time.monotonic() - self._opened_at) >= self.reset_timeout:
                self._state = "HALF_OPEN"
                self._half_open_probe_in_flight = False
            return self._state

    def before_call(self) -> str:
        """Check and update state before a protected call.

        Raises:
            CircuitOpen: If the circuit is OPEN or a HALF_OPEN probe is busy.
        """
        with self._lock:
            st = self.state
            if st == "OPEN":
                raise CircuitOpen(self.name)
            if st == "HALF_OPEN":
                if self._half_open_probe_in_flight:
                    raise CircuitOpen(self.name)
                self._half_open_probe_in_flight = True
            return st

    def on_success(self):
        with self._lock:
            self._failures = 0
            self._state = "CLOSED"
            self._half_open_probe_in_flight = False

    def on_failure(self):
        with self._lock:
            self._failures += 1
            if self._state == "HALF_OPEN" or (self._failures >= self.fail_threshold and self._state != "OPEN"):
                self._state = "OPEN"
                self._opened_at = time.monotonic()
                self._half_open_probe_in_flight = False
                logger.warning("circuit opened", extra={"circuit": self.name, "failures": self._failures})

    def on_finish(self):
        with self._lock:
            if self._state == "HALF_OPEN":
                self._half_open_probe_in_flight = False


_provider_cb = CircuitBreaker(
    "payment_provider",
    getattr(settings, "HTTP_CIRCUIT_FAIL_THRESHOLD", 5),
    getattr(settings, "HTTP_CIRCUIT_RESET_TIMEOUT", 30.0),
)


# ---------------- Helpers ---------------- #

def _request_headers(extra: Optional[dict] = None) -> dict:
    """Base headers: ``X-Request-ID`` from the ContextVar, plus ``extra``."""
    headers: dict[str, str] = {}
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    if extra:
        headers.update(extra)
    return headers


def _retry_policy():
    """Return retry configuration as (max_attempts, backoff_base, max_sleep)."""
    return (
        max(1, getattr(settings, "HTTP_RETRY_MAX", 1)),
        getattr(settings, "HTTP_RETRY_BACKOFF_BASE", 0.15),
        getattr(settings, "HTTP_RETRY_MAX_SLEEP", 0.5),
    )


def _should_retry(resp: Optional[httpx.Response], exc: Optional[Exception]) -> bool:
    # Transport errors and 5xx only
    if exc is not None:
        return True
    return resp is not None and 500 <= resp.status_code < 600


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ---------------- Provider Adapter ---------------- #

class HttpPaymentLinkClient(PaymentProviderPort):
    """Creates payment links with three calls: product, price, payment link."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.PAYMENT_PROVIDER_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.PAYMENT_PROVIDER_API_KEY
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECS

    def _post(self, client: httpx.Client, path: str, data: dict, idem_key: Optional[str]) -> dict:
        """POST a form-encoded body with circuit breaker and retries.

        Business mappings:
        - 2xx -> parsed JSON body.
        - other 4xx -> ``UpstreamUnavailable`` with status 502; not retried
          and not counted as a circuit failure.

        Raises:
            UpstreamUnavailable: Circuit open, retries exhausted, or the
                provider rejected the request.
        """
        max_attempts, backoff, cap = _retry_policy()
        extras = {"Authorization": f"Bearer {self.api_key}", "X-Retry-Count": "0"}
        if idem_key:
            extras["Idempotency-Key"] = idem_key
        headers = _request_headers(extras)

        state = _provider_cb.before_call()
        headers["X-Circuit-State"] = state
        tries = 0
        try:
            while True:
                resp = None
                exc = None
                try:
                    resp = client.post(f"{self.base_url}{path}", data=data, headers=headers)
                    if 200 <= resp.status_code < 300:
                        _provider_cb.on_success()
                        return resp.json()
                    if not _should_retry(resp, None):
                        _provider_cb.on_success()  # business outcome, not a circuit failure
                        logger.warning("payment provider rejected request", extra={"path": path, "status": resp.status_code})
                        raise UpstreamUnavailable(
                            f"Payment provider rejected the request ({resp.status_code})", status_code=502
                        )
                except httpx.RequestError as e:
                    exc = e

                tries += 1
                headers["X-Retry-Count"] = str(tries)

                if tries >= max_attempts:
                    _provider_cb.on_failure()
                    logger.error(
                        "payment provider unavailable",
                        extra={"path": path, "attempts": tries, "status": resp.status_code if resp is not None else None},
                    )
                    raise UpstreamUnavailable("Payment provider unavailable") from exc

                time.sleep(min(backoff * (2 ** (tries - 1)), cap))
        finally:
            _provider_cb.on_finish()

    def create_payment_link(self, req: LinkRequest, idempotency_key: Optional[str] = None) -> PaymentLinkRefs:
        def key(step):
            return f"{idempotency_key}-{step}" if idempotency_key else None

        with httpx.Client(timeout=self.timeout) as client:
            product = self._post(
                client,
                "/v1/products",
                {"name": f"Order {req.order_number}", "metadata[order_id]": str(req.order_id)},
                key("product"),
            )
            price = self._post(
                client,
                "/v1/prices",
                {
                    "product": product["id"],
                    "unit_amount": str(to_minor_units(req.amount)),
                    "currency": req.currency,
                },
                key("price"),
            )
            link = self._post(
                client,
                "/v1/payment_links",
                {
                    "line_items[0][price]": price["id"],
                    "line_items[0][quantity]": "1",
                    "metadata[order_id]": str(req.order_id),
                    "metadata[order_number]": req.order_number,
                },
                key("link"),
            )
        return PaymentLinkRefs(url=link["url"], product_id=product["id"], price_id=price["id"], payment_link_id=link["id"])
