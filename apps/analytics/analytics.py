"""
Analytics Module
=================

Read-only reporting over bookings, the development fund and expenses.

Classes:
    AnalyticsQueries: Static methods for ROI recovery and monthly summaries.

Key Features:
    - Investment recovery per apartment (recovered, remaining, percentage)
    - ROI leaderboard across invested apartments
    - Monthly dashboard roll-up: revenue, payments, profit, partner shares,
      fund movement and expenses

Example:
    Getting a month's numbers::

        from apps.analytics.analytics import AnalyticsQueries

        summary = AnalyticsQueries.monthly_summary(year=2025, month=1)
        print(f"Net profit: {summary['totals']['net_profit']}")

Note:
    A booking belongs to the month that contains its check-in date, even
    when the stay runs into the next month. Nothing here writes data.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.utils import timezone

from apps.apartments.models import Apartment, RecurringExpense
from apps.apartments.services import get_apartment_by_id, get_expenses
from apps.bookings.models import Booking, BookingStatus, EffectiveStatus
from apps.bookings.services import (
    booking_payment_summary,
    distribute,
    effective_status,
    quantize_money,
)
from apps.currency.services import get_rate_table
from apps.fund.services import period_totals
from .exceptions import InvalidPeriodError

HUNDRED = Decimal('100')
ZERO = Decimal('0.00')

TOTAL_KEYS = (
    'revenue',
    'paid',
    'remaining',
    'platform_commission',
    'development_deduction',
    'partner_share',
    'net_profit',
    'expected_profit_active',
    'expected_profit_upcoming',
)


def month_bounds(year: int, month: int) -> tuple:
    """Return (first day of month, first day of next month)."""
    if not 1 <= month <= 12:
        raise InvalidPeriodError("Month must be between 1 and 12")
    if not 1 <= year <= 9998:
        raise InvalidPeriodError("Year is out of range")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def status_color(recovery_percentage: Decimal) -> str:
    """Traffic-light colour for an ROI recovery percentage."""
    if recovery_percentage >= 80:
        return 'green'
    if recovery_percentage >= 30:
        return 'yellow'
    return 'red'


class AnalyticsQueries:
    """
    Reporting queries for the booking engine.

    Methods:
        apartment_roi: Investment recovery of one apartment.
        roi_leaderboard: Recovery of every invested apartment, best first.
        monthly_summary: Dashboard roll-up for one calendar month.
    """

    @staticmethod
    def apartment_roi(apartment_id: UUID, apartment: Optional[Apartment] = None) -> Optional[dict]:
        """
        Calculate how much of an apartment's investment has been recovered.

        Recovered is the sum of net profit over the apartment's non-cancelled
        bookings checking in on or after the investment start date (all
        bookings when no start date is set).

        Args:
            apartment_id: Apartment to evaluate.
            apartment: Already-loaded apartment (skips the lookup).

        Returns:
            dict with investment_target, recovered, remaining,
            recovery_percentage (capped at 100), is_complete, status_color
            and booking_count; None when the apartment has no investment target.

        Raises:
            ApartmentNotFoundError: If the apartment doesn't exist.
        """
        apartment = apartment or get_apartment_by_id(apartment_id=apartment_id)
        if not apartment.has_investment:
            return None

        bookings = apartment.bookings.exclude(
            status=BookingStatus.CANCELLED
        ).prefetch_related('payments')
        if apartment.investment_start_date:
            bookings = bookings.filter(check_in__gte=apartment.investment_start_date)

        recovered = ZERO
        booking_count = 0
        for booking in bookings:
            recovered += distribute(booking, apartment)['net_profit']
            booking_count += 1

        target = apartment.investment_target
        remaining = max(ZERO, target - recovered)
        percentage = min(HUNDRED, quantize_money(recovered / target * HUNDRED))

        return {
            'apartment_id': apartment.id,
            'apartment_name': apartment.name,
            'has_investment': True,
            'investment_target': target,
            'investment_start_date': apartment.investment_start_date,
            'recovered': quantize_money(recovered),
            'remaining': quantize_money(remaining),
            'recovery_percentage': percentage,
            'is_complete': recovered >= target,
            'status_color': status_color(percentage),
            'booking_count': booking_count,
        }

    @staticmethod
    def roi_leaderboard(limit: Optional[int] = None) -> list:
        """
        ROI of every apartment with an investment target.

        Returns:
            list of apartment_roi dicts, highest recovery percentage first.
        """
        results = []
        for apartment in Apartment.objects.filter(investment_target__gt=0):
            summary = AnalyticsQueries.apartment_roi(apartment.id, apartment=apartment)
            if summary:
                results.append(summary)

        results.sort(key=lambda r: (r['recovery_percentage'], r['recovered']), reverse=True)
        if limit:
            results = results[:limit]
        return results

    @staticmethod
    def monthly_summary(
        year: int,
        month: int,
        apartment_id: Optional[UUID] = None,
        today: Optional[date] = None,
    ) -> dict:
        """
        Roll up one calendar month for the dashboard.

        Bookings are attributed to the month containing their check-in.
        Cancelled bookings are counted by status but excluded from every
        money total. Recurring expenses are charged once for each apartment
        with at least one non-cancelled booking in the month, or for the
        filtered apartment whether or not it was booked.

        Args:
            year: Calendar year.
            month: Calendar month (1-12).
            apartment_id: Restrict to one apartment.
            today: Reference date for computed statuses.

        Returns:
            dict with period, booking_count, status_counts, totals,
            partner_profits, payments_by_method, fund, expenses,
            total_expenses, net_after_expenses and bookings.

        Raises:
            InvalidPeriodError: If month/year are out of range.
            ApartmentNotFoundError: If apartment_id doesn't exist.
        """
        start, end = month_bounds(year, month)
        today = today or timezone.localdate()
        if apartment_id:
            get_apartment_by_id(apartment_id=apartment_id)

        bookings = Booking.objects.filter(
            check_in__gte=start,
            check_in__lt=end,
        ).select_related('apartment', 'room').prefetch_related('payments').order_by('check_in', 'created_at')
        if apartment_id:
            bookings = bookings.filter(apartment_id=apartment_id)

        status_counts = {value: 0 for value in EffectiveStatus.values}
        totals = {key: ZERO for key in TOTAL_KEYS}
        partner_profits = {}
        payments_by_method = {}
        apartments_with_bookings = set()
        rows = []

        for booking in bookings:
            current = effective_status(booking, today)
            status_counts[current] += 1

            row = {
                'id': booking.id,
                'reference': booking.reference,
                'guest_name': booking.guest_name,
                'apartment_id': booking.apartment_id,
                'apartment_name': booking.apartment.name,
                'room_number': booking.room.room_number,
                'check_in': booking.check_in,
                'check_out': booking.check_out,
                'effective_status': current,
                'total': None,
                'net_profit': None,
            }
            rows.append(row)
            if booking.status == BookingStatus.CANCELLED:
                continue

            split = distribute(booking)
            row['total'] = split['total']
            row['net_profit'] = split['net_profit']
            apartments_with_bookings.add(booking.apartment_id)

            totals['revenue'] += split['total']
            totals['paid'] += split['paid_amount']
            totals['remaining'] += split['remaining_amount']
            totals['platform_commission'] += split['platform_commission']
            totals['development_deduction'] += split['development_deduction']
            totals['partner_share'] += split['partner_share']
            totals['net_profit'] += split['net_profit']
            if current == EffectiveStatus.ACTIVE:
                totals['expected_profit_active'] += split['net_profit']
            elif current == EffectiveStatus.UPCOMING:
                totals['expected_profit_upcoming'] += split['net_profit']

            for share in split['partner_shares']:
                entry = partner_profits.setdefault(share['partner_id'], {
                    'partner_id': share['partner_id'],
                    'name': share['name'],
                    'partner_type': share['partner_type'],
                    'amount': ZERO,
                })
                entry['amount'] += share['amount']

            for method, amount in booking_payment_summary(booking)['payments_by_method'].items():
                payments_by_method[method] = payments_by_method.get(method, ZERO) + amount

        table = get_rate_table()
        expenses = []
        for expense in get_expenses(start_date=start, end_date=end, apartment_id=apartment_id):
            expenses.append({
                'id': expense.id,
                'kind': 'expense',
                'category': expense.category,
                'description': expense.description,
                'apartment_id': expense.apartment_id,
                'date': expense.date,
                'amount': expense.amount,
                'currency': expense.currency,
                'amount_base': quantize_money(
                    table.to_base(expense.amount, expense.currency, settings.DEFAULT_EXCHANGE_RATE)
                ),
            })
        # A filtered apartment pays its running costs even in an empty month
        charged = {apartment_id} if apartment_id else apartments_with_bookings
        recurring = RecurringExpense.objects.filter(
            apartment_id__in=charged
        ).order_by('apartment_id', 'name')
        for expense in recurring:
            expenses.append({
                'id': expense.id,
                'kind': 'recurring',
                'category': 'recurring',
                'description': expense.name,
                'apartment_id': expense.apartment_id,
                'date': start,
                'amount': expense.amount,
                'currency': expense.currency,
                'amount_base': quantize_money(
                    table.to_base(expense.amount, expense.currency, settings.DEFAULT_EXCHANGE_RATE)
                ),
            })
        total_expenses = sum((e['amount_base'] for e in expenses), ZERO)

        return {
            'year': year,
            'month': month,
            'apartment_id': apartment_id,
            'period_start': start,
            'period_end': end,
            'base_currency': settings.BASE_CURRENCY,
            'booking_count': len(rows),
            'status_counts': status_counts,
            'totals': totals,
            'partner_profits': sorted(
                partner_profits.values(), key=lambda p: p['amount'], reverse=True
            ),
            'payments_by_method': payments_by_method,
            'fund': period_totals(start_date=start, end_date=end, apartment_id=apartment_id),
            'expenses': expenses,
            'total_expenses': total_expenses,
            'net_after_expenses': totals['net_profit'] - total_expenses,
            'bookings': rows,
        }
