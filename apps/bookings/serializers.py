from decimal import Decimal
from rest_framework import serializers
from .models import (
    Booking,
    BookingExtension,
    BookingStatus,
    DevDeductionType,
    Payment,
    PaymentMethod,
)
from .services import effective_status, normalize_payments


# =============================================================================
# Input Serializers
# =============================================================================

class BookingFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for booking filtering.

    Query Parameters:
        apartment (UUID): Filter by apartment
        room (UUID): Filter by room
        status (str): Stored status (pending, confirmed, cancelled, ended-early)
        date_from (date): Check-in on or after this date
        date_to (date): Check-in before this date
        guest (str): Guest name contains
    """

    apartment = serializers.UUIDField(required=False)
    room = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    guest = serializers.CharField(max_length=200, required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })
        return attrs


class PaymentInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    currency = serializers.CharField(max_length=3, required=False)
    method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)


class BookingCreateSerializer(serializers.Serializer):
    """
    Validate input for creating a booking.

    Payments may be sent either as a `payments` list or as one
    `single_payment`; both end up as a list.
    """

    apartment = serializers.UUIDField()
    room = serializers.UUIDField()
    guest_name = serializers.CharField(max_length=200)
    guest_phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    guest_email = serializers.EmailField(required=False, allow_blank=True, default='')
    guest_nationality = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    status = serializers.ChoiceField(
        choices=[BookingStatus.PENDING, BookingStatus.CONFIRMED],
        default=BookingStatus.CONFIRMED
    )
    total_booking_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    currency = serializers.CharField(max_length=3, required=False)
    exchange_rate = serializers.DecimalField(max_digits=14, decimal_places=6, required=False, min_value=0)
    source = serializers.CharField(max_length=50, required=False)
    platform_commission = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=Decimal('0.00'))
    dev_deduction_type = serializers.ChoiceField(choices=DevDeductionType.choices, default=DevDeductionType.NONE)
    dev_deduction_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=Decimal('0.00'))
    payments = PaymentInputSerializer(many=True, required=False)
    single_payment = PaymentInputSerializer(required=False)
    origin_apartment = serializers.UUIDField(required=False, allow_null=True)
    origin_room = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['check_out'] <= attrs['check_in']:
            raise serializers.ValidationError({
                'check_out': 'Check-out date must be after check-in date'
            })
        attrs['payments'] = normalize_payments(
            attrs.pop('payments', None),
            attrs.pop('single_payment', None),
        )
        return attrs

    def to_service_kwargs(self):
        data = dict(self.validated_data)
        data['apartment_id'] = data.pop('apartment')
        data['room_id'] = data.pop('room')
        data['origin_apartment_id'] = data.pop('origin_apartment', None)
        data['origin_room_id'] = data.pop('origin_room', None)
        return data


class BookingUpdateSerializer(serializers.Serializer):
    """Validate input for editing a booking. Every field is optional."""

    room = serializers.UUIDField(required=False)
    guest_name = serializers.CharField(max_length=200, required=False)
    guest_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    guest_email = serializers.EmailField(required=False, allow_blank=True)
    guest_nationality = serializers.CharField(max_length=100, required=False, allow_blank=True)
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    total_booking_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    currency = serializers.CharField(max_length=3, required=False)
    source = serializers.CharField(max_length=50, required=False)
    platform_commission = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    dev_deduction_type = serializers.ChoiceField(choices=DevDeductionType.choices, required=False)
    dev_deduction_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    payments = PaymentInputSerializer(many=True, required=False)
    single_payment = PaymentInputSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        payments = attrs.pop('payments', None)
        single_payment = attrs.pop('single_payment', None)
        if payments is not None or single_payment is not None:
            attrs['payments'] = normalize_payments(payments, single_payment)
        return attrs

    def to_service_kwargs(self):
        data = dict(self.validated_data)
        if 'room' in data:
            data['room_id'] = data.pop('room')
        return data


class ExtendInputSerializer(serializers.Serializer):
    extension_days = serializers.IntegerField(min_value=1)
    extension_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))


class EndEarlyInputSerializer(serializers.Serializer):
    actual_check_out = serializers.DateField(required=False)


class AvailabilityQuerySerializer(serializers.Serializer):
    room = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    exclude_booking = serializers.UUIDField(required=False)

    def validate(self, attrs):
        if attrs['check_out'] <= attrs['check_in']:
            raise serializers.ValidationError({
                'check_out': 'Check-out date must be after check-in date'
            })
        return attrs


class TransferOriginQuerySerializer(serializers.Serializer):
    origin_room = serializers.UUIDField()
    origin_apartment = serializers.UUIDField(required=False)
    guest_name = serializers.CharField(max_length=200)


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = ['id', 'amount', 'currency', 'method', 'position']
        read_only_fields = fields


class BookingExtensionSerializer(serializers.ModelSerializer):

    class Meta:
        model = BookingExtension
        fields = ['extra_days', 'extra_amount', 'previous_check_out', 'new_check_out', 'created_at']
        read_only_fields = fields


class BookingConflictSerializer(serializers.ModelSerializer):
    """Minimal booking info returned with a 409 conflict."""

    class Meta:
        model = Booking
        fields = ['id', 'reference', 'guest_name', 'room', 'check_in', 'check_out', 'status']
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Main serializer for bookings."""

    effective_status = serializers.SerializerMethodField()
    payments = PaymentSerializer(many=True, read_only=True)
    extensions = BookingExtensionSerializer(many=True, read_only=True)
    apartment_name = serializers.CharField(source='apartment.name', read_only=True)
    room_number = serializers.CharField(source='room.room_number', read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id',
            'reference',
            'apartment',
            'apartment_name',
            'room',
            'room_number',
            'guest_name',
            'guest_phone',
            'guest_email',
            'guest_nationality',
            'check_in',
            'check_out',
            'number_of_nights',
            'status',
            'effective_status',
            'total_booking_price',
            'currency',
            'exchange_rate',
            'locked_rates',
            'source',
            'platform_commission',
            'dev_deduction_type',
            'dev_deduction_value',
            'development_deduction',
            'payments',
            'origin_apartment',
            'origin_room',
            'transfer_from_booking',
            'transfer_commission_amount',
            'actual_check_out',
            'refund_amount',
            'ended_at',
            'extensions',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_effective_status(self, obj) -> str:
        return effective_status(obj)


class BookingListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    effective_status = serializers.SerializerMethodField()
    room_number = serializers.CharField(source='room.room_number', read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id',
            'reference',
            'apartment',
            'room',
            'room_number',
            'guest_name',
            'check_in',
            'check_out',
            'number_of_nights',
            'status',
            'effective_status',
            'total_booking_price',
            'currency',
            'source',
        ]
        read_only_fields = fields

    def get_effective_status(self, obj) -> str:
        return effective_status(obj)


class PartnerShareSerializer(serializers.Serializer):
    partner_id = serializers.UUIDField()
    name = serializers.CharField()
    partner_type = serializers.CharField()
    percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class DistributionSerializer(serializers.Serializer):
    """Revenue split of one booking (base currency)."""

    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    platform_commission = serializers.DecimalField(max_digits=12, decimal_places=2)
    development_deduction = serializers.DecimalField(max_digits=12, decimal_places=2)
    distributable = serializers.DecimalField(max_digits=12, decimal_places=2)
    partner_share = serializers.DecimalField(max_digits=12, decimal_places=2)
    net_profit = serializers.DecimalField(max_digits=12, decimal_places=2)
    partner_shares = PartnerShareSerializer(many=True)
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class PaymentSummarySerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_fully_paid = serializers.BooleanField()
    payment_count = serializers.IntegerField()
    payments_by_method = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2)
    )


class AvailabilityResponseSerializer(serializers.Serializer):
    available = serializers.BooleanField()
    conflicts = BookingConflictSerializer(many=True)
