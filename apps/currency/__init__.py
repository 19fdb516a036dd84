"""
Currency App - Exchange Rate Table

Holds the rate table used to convert booking prices, payments and fund
movements into the base currency.

Architecture:
- Models: CurrencyRate
- Services: RateTable, set_rate, import_reference_rates
- Views: rate listing and admin-only rate updates
"""
