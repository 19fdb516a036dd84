# ==========================================
# apps/bookings/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Booking, Payment, BookingExtension, BookingStatus, EffectiveStatus
from .services import effective_status


STATUS_COLORS = {
    EffectiveStatus.UPCOMING: ('#E5C49A', '#2C1810'),
    EffectiveStatus.ACTIVE: ('#6B8E5E', 'white'),
    EffectiveStatus.COMPLETED: ('#8C8C8C', 'white'),
    EffectiveStatus.CANCELLED: ('#B85C5C', 'white'),
    EffectiveStatus.ENDED_EARLY: ('#A47449', 'white'),
}


class PaymentInline(admin.TabularInline):
    """Inline admin for payments within a booking."""
    model = Payment
    extra = 0
    fields = ['amount', 'currency', 'method', 'position']


class BookingExtensionInline(admin.TabularInline):
    model = BookingExtension
    extra = 0
    fields = ['extra_days', 'extra_amount', 'previous_check_out', 'new_check_out', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Extensions are created by the extend action."""
        return False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """
    Admin interface for Bookings.

    Provides booking management including:
    - Listing with computed status badge
    - Inline payments and extension history
    - Filtering by apartment, status, source and check-in date
    """

    list_display = [
        'reference',
        'guest_name',
        'apartment',
        'room',
        'check_in',
        'check_out',
        'total_booking_price',
        'currency',
        'status_badge',
    ]

    list_filter = [
        'status',
        'source',
        'apartment',
        'check_in',
    ]

    search_fields = [
        'reference',
        'guest_name',
        'guest_phone',
        'guest_email',
    ]

    readonly_fields = [
        'reference',
        'number_of_nights',
        'exchange_rate',
        'locked_rates',
        'development_deduction',
        'transfer_from_booking',
        'transfer_commission_amount',
        'actual_check_out',
        'refund_amount',
        'ended_at',
        'created_at',
        'updated_at',
    ]

    inlines = [PaymentInline, BookingExtensionInline]
    date_hierarchy = 'check_in'
    ordering = ['-check_in']

    fieldsets = (
        ('Guest', {
            'fields': ('guest_name', 'guest_phone', 'guest_email', 'guest_nationality')
        }),
        ('Stay', {
            'fields': ('reference', 'apartment', 'room', 'check_in', 'check_out', 'number_of_nights', 'status')
        }),
        ('Price', {
            'fields': (
                'total_booking_price',
                'currency',
                'exchange_rate',
                'locked_rates',
                'source',
                'platform_commission',
                'dev_deduction_type',
                'dev_deduction_value',
                'development_deduction',
            )
        }),
        ('Transfer', {
            'fields': ('origin_apartment', 'origin_room', 'transfer_from_booking', 'transfer_commission_amount'),
            'classes': ('collapse',),
        }),
        ('Early Termination', {
            'fields': ('actual_check_out', 'refund_amount', 'ended_at'),
            'classes': ('collapse',),
        }),
        ('Notes', {
            'fields': ('notes',),
            'classes': ('collapse',),
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def status_badge(self, obj):
        """Display computed status as colored badge."""
        current = effective_status(obj)
        bg, fg = STATUS_COLORS.get(current, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, EffectiveStatus(current).label
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('apartment', 'room')

    def has_delete_permission(self, request, obj=None):
        """Deleting from admin would bypass the fund correction; use the API."""
        return False

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj and obj.status in (BookingStatus.CANCELLED, BookingStatus.ENDED_EARLY):
            fields += ['check_in', 'check_out', 'room', 'status']
        return fields
