from django.db import models
from django.utils import timezone


class RevenueTransaction(models.Model):
    class Type(models.TextChoices):
        ORDER = "order"

    transaction_type = models.CharField(max_length=32, choices=Type.choices, default=Type.ORDER, db_index=True)
    # One ledger row per paid order
    order = models.OneToOneField(
        "orders.Order", null=True, blank=True, on_delete=models.SET_NULL, related_name="revenue_transaction"
    )
    reference_number = models.CharField(max_length=64)
    customer_name = models.CharField(max_length=255, blank=True, default="")
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=32, default="stripe")
    transaction_date = models.DateTimeField(default=timezone.now, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "revenue_transactions"
        ordering = ["-transaction_date", "-id"]
