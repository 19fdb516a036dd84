from rest_framework import serializers
from .models import Apartment, Room, Partner, PartnerAgreement, Expense, ExpenseCategory, RecurringExpense


# =============================================================================
# Input Serializers
# =============================================================================

class ExpenseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for expense filtering.

    Query Parameters:
        apartment (UUID): Filter by apartment
        date_from (date): Expenses on or after this date
        date_to (date): Expenses before this date
    """

    apartment = serializers.UUIDField(required=False)
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


class ExpenseCreateSerializer(serializers.ModelSerializer):

    class Meta:
        model = Expense
        fields = ['apartment', 'category', 'amount', 'currency', 'date', 'description']

    def validate_category(self, value):
        if value == ExpenseCategory.TRANSFER_COMMISSION:
            raise serializers.ValidationError('Transfer commissions are recorded automatically')
        return value


# =============================================================================
# Output Serializers
# =============================================================================

class RoomSerializer(serializers.ModelSerializer):

    class Meta:
        model = Room
        fields = ['id', 'apartment', 'room_number', 'room_type', 'bed_count', 'bathroom_type', 'position']
        read_only_fields = fields


class PartnerAgreementSerializer(serializers.ModelSerializer):
    partner_id = serializers.UUIDField(source='partner.id', read_only=True)
    name = serializers.CharField(source='partner.name', read_only=True)

    class Meta:
        model = PartnerAgreement
        fields = ['partner_id', 'name', 'percentage', 'partner_type']
        read_only_fields = fields


class RecurringExpenseSerializer(serializers.ModelSerializer):

    class Meta:
        model = RecurringExpense
        fields = ['id', 'name', 'amount', 'currency']
        read_only_fields = fields


class ApartmentSerializer(serializers.ModelSerializer):
    """Full apartment with rooms and partners."""

    rooms = RoomSerializer(many=True, read_only=True)
    partners = PartnerAgreementSerializer(source='partner_agreements', many=True, read_only=True)
    recurring_expenses = RecurringExpenseSerializer(many=True, read_only=True)

    class Meta:
        model = Apartment
        fields = [
            'id',
            'name',
            'address',
            'description',
            'investment_target',
            'investment_start_date',
            'rooms',
            'partners',
            'recurring_expenses',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ApartmentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    room_count = serializers.IntegerField(source='rooms.count', read_only=True)

    class Meta:
        model = Apartment
        fields = ['id', 'name', 'address', 'room_count', 'investment_target']
        read_only_fields = fields


class PartnerSerializer(serializers.ModelSerializer):

    class Meta:
        model = Partner
        fields = ['id', 'name', 'phone', 'email']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    apartment_name = serializers.CharField(source='apartment.name', read_only=True, default=None)

    class Meta:
        model = Expense
        fields = [
            'id',
            'apartment',
            'apartment_name',
            'category',
            'amount',
            'currency',
            'date',
            'description',
            'is_system_generated',
            'booking_reference',
            'created_at',
        ]
        read_only_fields = fields
