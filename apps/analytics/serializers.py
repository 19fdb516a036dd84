"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    MonthlySummaryQuerySerializer - Validates year/month/apartment_id parameters
    LeaderboardQuerySerializer - Validates the ROI leaderboard limit

Response Serializers:
    ROISummarySerializer - Investment recovery of one apartment
    MonthlySummarySerializer - Dashboard roll-up for one month
"""

from rest_framework import serializers
from django.utils import timezone


MONEY = {'max_digits': 14, 'decimal_places': 2}


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class MonthlySummaryQuerySerializer(serializers.Serializer):
    """
    Validate monthly summary query parameters.

    Query Parameters:
        year (int): Calendar year (defaults to the current year)
        month (int): Calendar month 1-12 (defaults to the current month)
        apartment_id (UUID): Restrict the summary to one apartment
    """

    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    apartment_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        today = timezone.localdate()
        attrs.setdefault('year', today.year)
        attrs.setdefault('month', today.month)
        return attrs


class LeaderboardQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)


# =============================================================================
# Response Serializers (Documentation & Output)
# =============================================================================

class ROISummarySerializer(serializers.Serializer):
    """Investment recovery of one apartment (base currency)."""

    apartment_id = serializers.UUIDField()
    apartment_name = serializers.CharField()
    has_investment = serializers.BooleanField()
    investment_target = serializers.DecimalField(**MONEY)
    investment_start_date = serializers.DateField(allow_null=True)
    recovered = serializers.DecimalField(**MONEY)
    remaining = serializers.DecimalField(**MONEY)
    recovery_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    is_complete = serializers.BooleanField()
    status_color = serializers.ChoiceField(choices=['red', 'yellow', 'green'])
    booking_count = serializers.IntegerField()


class NoInvestmentSerializer(serializers.Serializer):
    has_investment = serializers.BooleanField()


class MonthlyTotalsSerializer(serializers.Serializer):
    revenue = serializers.DecimalField(**MONEY)
    paid = serializers.DecimalField(**MONEY)
    remaining = serializers.DecimalField(**MONEY)
    platform_commission = serializers.DecimalField(**MONEY)
    development_deduction = serializers.DecimalField(**MONEY)
    partner_share = serializers.DecimalField(**MONEY)
    net_profit = serializers.DecimalField(**MONEY)
    expected_profit_active = serializers.DecimalField(**MONEY)
    expected_profit_upcoming = serializers.DecimalField(**MONEY)


class PartnerProfitSerializer(serializers.Serializer):
    partner_id = serializers.UUIDField()
    name = serializers.CharField()
    partner_type = serializers.CharField()
    amount = serializers.DecimalField(**MONEY)


class FundPeriodSerializer(serializers.Serializer):
    deposits = serializers.DecimalField(**MONEY)
    withdrawals = serializers.DecimalField(**MONEY)
    net = serializers.DecimalField(**MONEY)
    transaction_count = serializers.IntegerField()


class MonthlyExpenseSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    kind = serializers.ChoiceField(choices=['expense', 'recurring'])
    category = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    apartment_id = serializers.UUIDField(allow_null=True)
    date = serializers.DateField()
    amount = serializers.DecimalField(**MONEY)
    currency = serializers.CharField()
    amount_base = serializers.DecimalField(**MONEY)


class MonthlyBookingSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    reference = serializers.CharField()
    guest_name = serializers.CharField()
    apartment_id = serializers.UUIDField()
    apartment_name = serializers.CharField()
    room_number = serializers.CharField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    effective_status = serializers.CharField()
    total = serializers.DecimalField(allow_null=True, **MONEY)
    net_profit = serializers.DecimalField(allow_null=True, **MONEY)


class MonthlySummarySerializer(serializers.Serializer):
    """Dashboard roll-up for one calendar month (base currency)."""

    year = serializers.IntegerField()
    month = serializers.IntegerField()
    apartment_id = serializers.UUIDField(allow_null=True)
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    base_currency = serializers.CharField()
    booking_count = serializers.IntegerField()
    status_counts = serializers.DictField(child=serializers.IntegerField())
    totals = MonthlyTotalsSerializer()
    partner_profits = PartnerProfitSerializer(many=True)
    payments_by_method = serializers.DictField(child=serializers.DecimalField(**MONEY))
    fund = FundPeriodSerializer()
    expenses = MonthlyExpenseSerializer(many=True)
    total_expenses = serializers.DecimalField(**MONEY)
    net_after_expenses = serializers.DecimalField(**MONEY)
    bookings = MonthlyBookingSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
