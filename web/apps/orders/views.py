"""HTTP views for the orders app.

Views are kept small: they validate requests (via Pydantic), map them to
domain commands, delegate to the ``OrderService`` from
``get_order_service()`` and wrap the result in the response envelope.
Domain errors propagate to the envelope exception handler.

Idempotency: when an ``Idempotency-Key`` header is sent to the create
endpoint, the first request creates a record and, once it has an outcome,
stores the response. Retries with the same payload get the stored response
back with ``Idempotent-Replay: true``; the same key with a different
payload is a 409. Server-side failures (5xx) are not stored, so the client
can retry them with the same key.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.common.errors import Conflict, StoreError, ValidationError
from apps.common.responses import fail, ok, validate

from . import providers
from .domain import Customer, LineRequest, PlaceOrder
from .idempotency import finalize, get_or_create_idempotent, is_complete
from .repository import OrderRepository
from .schemas import OrderStatusDTO, PlaceOrderDTO


def _to_command(dto: PlaceOrderDTO) -> PlaceOrder:
    return PlaceOrder(
        customer=Customer(
            name=dto.customer_name or "",
            email=dto.customer_email or "",
            phone=dto.customer_phone or "",
            shipping_address=dto.shipping_address,
            billing_address=dto.billing_address,
        ),
        items=[LineRequest(product_id=i.product_id, quantity=i.quantity) for i in dto.items],
        payment_method=dto.payment_method,
        notes=dto.notes or "",
    )


def _parse_limit(raw):
    if not raw:
        return None
    try:
        limit = int(raw)
    except ValueError:
        raise ValidationError("limit must be a positive integer")
    if limit < 1:
        raise ValidationError("limit must be a positive integer")
    return limit


class OrdersCollectionView(APIView):
    """List orders and place new ones."""

    throttle_classes = [ScopedRateThrottle]

    def get_throttles(self):
        # DRF evaluates throttles in initial(), before get/post
        self.throttle_scope = "orders_list" if self.request.method == "GET" else "orders_create"
        return [throttle() for throttle in self.throttle_classes]

    def get(self, request):
        params = request.query_params
        orders = OrderRepository().list_orders(
            status=params.get("status") or None,
            customer_email=params.get("customer_email") or None,
            limit=_parse_limit(params.get("limit")),
        )
        return Response(ok(orders))

    def post(self, request):
        """Place an order.

        Returns:
            Response: One of the following responses.
            - 201 with the created order and its items.
            - 201 with the stored body, plus ``Idempotent-Replay: true``,
              when a completed request is retried with the same key.
            - 400 for an empty cart or a malformed payload.
            - 409 when a line cannot be covered by stock, or when an
              Idempotency-Key is reused with a different payload.
        """
        dto = validate(PlaceOrderDTO, request.data)

        idem_key = request.headers.get("Idempotency-Key")
        rec = None
        if idem_key:
            existing, rec = get_or_create_idempotent(idem_key, request.data)
            if existing:
                if not is_complete(rec):
                    raise Conflict("A request with this Idempotency-Key is still in progress")
                resp = Response(rec.response_body, status=rec.response_status)
                resp["Idempotent-Replay"] = "true"
                return resp

        try:
            order_id = providers.get_order_service().place_order(_to_command(dto))
        except Exception as e:
            if rec is not None:
                code = e.status_code if isinstance(e, StoreError) else 500
                if code < 500:
                    finalize(rec, code, fail(e.message))
                else:
                    rec.delete()
            raise

        body = ok(OrderRepository().get_order(order_id), message="Order created successfully")
        if rec is not None:
            finalize(rec, status.HTTP_201_CREATED, body, order_id=order_id)
        return Response(body, status=status.HTTP_201_CREATED)


class RetrieveOrderView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"

    def get(self, request, order_id: int):
        return Response(ok(OrderRepository().get_order(order_id)))


class OrderStatusView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"

    def put(self, request, order_id: int):
        dto = validate(OrderStatusDTO, request.data)
        new_status = providers.get_order_service().change_status(order_id, dto.status)
        return Response(
            ok(OrderRepository().get_order(order_id), message=f"Order status updated to {new_status}")
        )
