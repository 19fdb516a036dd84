from django.contrib import admin
from django.utils.html import format_html
from .models import FundTransaction, TransactionType


@admin.register(FundTransaction)
class FundTransactionAdmin(admin.ModelAdmin):
    """Read-only ledger view. Corrections go through the fund API."""

    list_display = [
        'transaction_date',
        'type_badge',
        'amount',
        'currency',
        'amount_base',
        'apartment',
        'booking',
        'is_system_generated',
        'resulted_in_debt',
    ]
    list_filter = ['transaction_type', 'is_system_generated', 'resulted_in_debt', 'apartment']
    search_fields = ['description', 'source', 'booking__reference']
    date_hierarchy = 'transaction_date'

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def type_badge(self, obj):
        color = '#6B8E5E' if obj.transaction_type == TransactionType.DEPOSIT else '#B85C5C'
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color, obj.get_transaction_type_display()
        )
    type_badge.short_description = 'Type'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
