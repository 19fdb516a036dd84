from django.contrib import admin
from .models import CurrencyRate


@admin.register(CurrencyRate)
class CurrencyRateAdmin(admin.ModelAdmin):
    list_display = ['currency', 'units_per_base', 'source', 'updated_at']
    search_fields = ['currency']
    readonly_fields = ['updated_at']
    ordering = ['currency']
