"""HTTP views for payment links and payment status."""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.common.errors import ValidationError
from apps.common.responses import ok, validate

from . import providers
from .domain import PaymentLinkRefs, payment_link_view
from .schemas import ConfirmPaymentDTO, CreatePaymentDTO, SavePaymentLinkDTO


class PaymentsView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "payments"


class CheckPaymentView(PaymentsView):
    def get(self, request):
        raw = request.query_params.get("orderId")
        if not raw:
            raise ValidationError("Order ID is required")
        try:
            order_id = int(raw)
        except ValueError:
            raise ValidationError("Order ID must be an integer")
        return Response(ok(providers.get_payment_service().get_payment_status(order_id)))


class SavePaymentLinkView(PaymentsView):
    def post(self, request):
        dto = validate(SavePaymentLinkDTO, request.data)
        refs = PaymentLinkRefs(
            url=dto.stripePaymentLinkUrl,
            product_id=dto.stripeProductId or "",
            price_id=dto.stripePriceId or "",
            payment_link_id=dto.stripePaymentLinkId or "",
        )
        order = providers.get_payment_service().attach_payment_link(dto.orderId, refs)
        return Response(ok(payment_link_view(order), message="Stripe payment link saved successfully"))


class CreatePaymentView(PaymentsView):
    def post(self, request):
        dto = validate(CreatePaymentDTO, request.data)
        data, created = providers.get_payment_service().create_payment_link(dto.orderId)
        if created:
            return Response(ok(data, message="Payment link created"), status=status.HTTP_201_CREATED)
        return Response(ok(data, message="Payment link already exists"))


class ConfirmPaymentView(PaymentsView):
    def post(self, request):
        dto = validate(ConfirmPaymentDTO, request.data)
        data = providers.get_payment_service().confirm_payment(dto.orderId, dto.paymentStatus)
        return Response(ok(data))
