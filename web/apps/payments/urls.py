from django.urls import path

from .views import CheckPaymentView, ConfirmPaymentView, CreatePaymentView, SavePaymentLinkView

app_name = "payments"

urlpatterns = [
    path("check-payment/", CheckPaymentView.as_view(), name="check-payment"),
    path("save-payment-link/", SavePaymentLinkView.as_view(), name="save-payment-link"),
    path("create-payment/", CreatePaymentView.as_view(), name="create-payment"),
    path("confirm-payment/", ConfirmPaymentView.as_view(), name="confirm-payment"),
]
