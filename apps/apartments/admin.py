from django.contrib import admin
from .models import Apartment, Room, Partner, PartnerAgreement, Expense, RecurringExpense


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ['room_number', 'room_type', 'bed_count', 'bathroom_type', 'position']


class PartnerAgreementInline(admin.TabularInline):
    model = PartnerAgreement
    extra = 0
    fields = ['partner', 'percentage', 'partner_type']


class RecurringExpenseInline(admin.TabularInline):
    model = RecurringExpense
    extra = 0
    fields = ['name', 'amount', 'currency']


@admin.register(Apartment)
class ApartmentAdmin(admin.ModelAdmin):
    """
    Admin interface for Apartments.

    Rooms, partner agreements and recurring expenses are edited inline.
    """

    list_display = ['name', 'address', 'get_room_count', 'investment_target', 'investment_start_date']
    search_fields = ['name', 'address']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [RoomInline, PartnerAgreementInline, RecurringExpenseInline]

    fieldsets = (
        ('Apartment', {
            'fields': ('name', 'address', 'description')
        }),
        ('Investment', {
            'fields': ('investment_target', 'investment_start_date')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_room_count(self, obj):
        return obj.rooms.count()
    get_room_count.short_description = 'Rooms'


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'email', 'created_at']
    search_fields = ['name', 'email']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['date', 'category', 'amount', 'currency', 'apartment', 'is_system_generated']
    list_filter = ['category', 'is_system_generated', 'apartment']
    search_fields = ['description', 'booking_reference']
    date_hierarchy = 'date'
    readonly_fields = ['is_system_generated', 'booking_reference', 'created_at']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('apartment')
