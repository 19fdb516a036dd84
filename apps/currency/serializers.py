from rest_framework import serializers
from .models import CurrencyRate


# =============================================================================
# Input Serializers
# =============================================================================

class RateUpdateInputSerializer(serializers.Serializer):
    """Validate a single rate update."""

    units_per_base = serializers.DecimalField(
        max_digits=14,
        decimal_places=6,
        min_value=0,
        help_text='Units of this currency equal to one unit of the base currency'
    )
    source = serializers.CharField(max_length=50, required=False, default='manual')


class ReferenceRatesInputSerializer(serializers.Serializer):
    """
    Validate a rate feed quoted against a reference currency.

    Fields:
        reference_currency (str): Currency the feed is quoted in (e.g. EGP)
        rates (dict): currency -> reference units per one unit of currency
    """

    reference_currency = serializers.CharField(max_length=3)
    rates = serializers.DictField(
        child=serializers.DecimalField(max_digits=14, decimal_places=6, min_value=0)
    )
    source = serializers.CharField(max_length=50, required=False, default='feed')

    def validate_rates(self, value):
        if not value:
            raise serializers.ValidationError('At least one rate is required')
        return value


# =============================================================================
# Output Serializers
# =============================================================================

class CurrencyRateSerializer(serializers.ModelSerializer):

    class Meta:
        model = CurrencyRate
        fields = ['currency', 'units_per_base', 'source', 'updated_at']
        read_only_fields = fields


class RateTableResponseSerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    rates = CurrencyRateSerializer(many=True)
