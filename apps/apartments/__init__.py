"""
Apartments App - Property Inventory

Apartments, their rooms, partner agreements and operating expenses.

Architecture:
- Models: Apartment, Room, Partner, PartnerAgreement, Expense, RecurringExpense
- Views: read-only apartment/room endpoints, expense listing and recording
"""
