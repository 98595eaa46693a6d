from rest_framework import serializers

from reporting.api import RULE
from .models import Expense, FeePayment


def _positive(value, label):
    if value is None or value <= 0:
        raise serializers.ValidationError(f"{label} must be greater than 0", code=RULE)
    return value


class PaymentSerializer(serializers.Serializer):
    feeId = serializers.IntegerField()
    studentId = serializers.IntegerField()
    amountPaid = serializers.DecimalField(max_digits=10, decimal_places=2)
    paymentMethod = serializers.ChoiceField(
        choices=[c[0] for c in FeePayment.METHOD_CHOICES], required=False, allow_blank=True, default=""
    )
    transactionId = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_amountPaid(self, value):
        return _positive(value, "Amount")


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value):
        value = value.strip().upper()
        if value not in {c[0] for c in FeePayment.STATUS_CHOICES}:
            raise serializers.ValidationError("Invalid payment status", code=RULE)
        return value


class ExpenseSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField(required=False)
    vendorName = serializers.CharField(required=False, allow_blank=True, default="")
    vendorContact = serializers.CharField(required=False, allow_blank=True, default="")
    invoiceNumber = serializers.CharField(required=False, allow_blank=True, default="")
    paymentMethod = serializers.CharField(required=False, allow_blank=True, default="")
    fiscalYear = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
    fiscalMonth = serializers.IntegerField(required=False, min_value=1, max_value=12)

    def validate_category(self, value):
        value = value.strip().upper()
        if value not in {c[0] for c in Expense.CATEGORY_CHOICES}:
            raise serializers.ValidationError("Invalid expense category", code=RULE)
        return value

    def validate_status(self, value):
        value = value.strip().upper()
        if value not in {c[0] for c in Expense.STATUS_CHOICES}:
            raise serializers.ValidationError("Invalid expense status", code=RULE)
        return value

    def validate_amount(self, value):
        return _positive(value, "Amount")


class PayrollRequestSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    overtime = serializers.DictField(child=serializers.DecimalField(max_digits=10, decimal_places=2), required=False)
