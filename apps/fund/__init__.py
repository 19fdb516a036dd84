"""
Fund App - Development Fund Ledger

Append-only ledger of deposits and withdrawals for the shared development
fund. Bookings with a development deduction post their contribution here
automatically; staff record manual deposits and spending.

Architecture:
- Models: FundTransaction (immutable once written)
- Services: deposit, withdraw, get_balance, record_booking_contribution
- Views: balance, transaction history, deposit and withdraw endpoints
"""
