from decimal import Decimal
from django.conf import settings
from rest_framework import serializers
from .models import FundTransaction, TransactionType


# =============================================================================
# Input Serializers
# =============================================================================

class FundTransactionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the transaction history.

    Query Parameters:
        apartment (UUID): Filter by apartment
        type (str): deposit or withdrawal
        date_from (date): Transaction date on or after
        date_to (date): Transaction date before
    """

    apartment = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })
        return attrs


class _MovementInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    currency = serializers.CharField(max_length=3, required=False)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    apartment = serializers.UUIDField(required=False, allow_null=True)
    transaction_date = serializers.DateField(required=False)

    def validate_currency(self, value):
        return value.upper()

    def validate(self, attrs):
        attrs.setdefault('currency', settings.BASE_CURRENCY)
        return attrs


class DepositInputSerializer(_MovementInputSerializer):
    """Validate a manual deposit."""

    source = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class WithdrawInputSerializer(_MovementInputSerializer):
    """Validate a withdrawal. Overdrawing is allowed."""

    pass


# =============================================================================
# Output Serializers
# =============================================================================

class FundTransactionSerializer(serializers.ModelSerializer):
    booking_reference = serializers.CharField(source='booking.reference', read_only=True, default=None)

    class Meta:
        model = FundTransaction
        fields = [
            'id',
            'transaction_type',
            'amount',
            'currency',
            'amount_base',
            'amount_secondary',
            'exchange_rate',
            'transaction_date',
            'apartment',
            'booking',
            'booking_reference',
            'source',
            'description',
            'is_system_generated',
            'resulted_in_debt',
            'created_at',
        ]
        read_only_fields = fields


class FundBalanceSerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    secondary_currency = serializers.CharField()
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance_secondary = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_deposits = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_withdrawals = serializers.DecimalField(max_digits=14, decimal_places=2)
    transaction_count = serializers.IntegerField()
    is_debt = serializers.BooleanField()
    debt = serializers.DecimalField(max_digits=14, decimal_places=2)


class WithdrawResponseSerializer(serializers.Serializer):
    transaction = FundTransactionSerializer()
    went_negative = serializers.BooleanField()
    warning = serializers.CharField(allow_null=True)
    balance = FundBalanceSerializer()
