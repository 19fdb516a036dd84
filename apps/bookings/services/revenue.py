"""
Revenue distribution for a single booking.

The split is applied in a fixed order:

    1. development deduction   (percent of total, or fixed / exchange rate)
    2. distributable           = total - platform commission - deduction
    3. partner share           = investor shares + company-owner shares
         investors take their % of the distributable amount; company owners
         take theirs from what is left after investors. No share is negative.
    4. net profit              = max(0, distributable - partner share)

All amounts are in the base currency. `distribute` only reads the booking
and its apartment, so calling it repeatedly gives the same result.
"""

from decimal import Decimal
from typing import Optional

from apps.apartments.models import PartnerType
from apps.bookings.models import DevDeductionType
from apps.currency.services import RateTable
from .payments import (
    quantize_money,
    booking_rate_table,
    booking_total_in_base,
    booking_paid_in_base,
    remaining,
)

HUNDRED = Decimal('100')
ZERO = Decimal('0')


def development_deduction_amount(booking, total_in_base: Decimal) -> Decimal:
    """
    Amount withheld for the development fund (unrounded).

    Percent deductions apply to the base-currency total. Fixed deductions
    are entered in the secondary currency and converted with the booking's
    locked exchange rate.
    """
    value = booking.dev_deduction_value or Decimal('0')
    if booking.dev_deduction_type == DevDeductionType.PERCENT:
        return value * total_in_base / HUNDRED
    if booking.dev_deduction_type == DevDeductionType.FIXED and booking.exchange_rate:
        return value / booking.exchange_rate
    return Decimal('0')


def effective_commission(booking) -> Decimal:
    """Platform commission, forced to zero for direct (External) bookings."""
    if booking.is_external:
        return Decimal('0.00')
    return booking.platform_commission or Decimal('0.00')


def partner_shares(agreements, distributable: Decimal) -> list:
    """
    Waterfall split of the distributable amount between partners.

    Investors are paid first from the distributable amount; company owners
    share the company profit left over. Shares are never negative, so a
    loss-making booking pays partners nothing.
    """
    profit = max(ZERO, distributable)
    investors = [a for a in agreements if a.partner_type != PartnerType.COMPANY_OWNER]
    owners = [a for a in agreements if a.partner_type == PartnerType.COMPANY_OWNER]

    shares = []
    for agreement in investors:
        shares.append(_share(agreement, profit * agreement.percentage / HUNDRED))

    company_profit = max(ZERO, profit - sum((s['amount'] for s in shares), ZERO))
    for agreement in owners:
        shares.append(_share(agreement, company_profit * agreement.percentage / HUNDRED))
    return shares


def _share(agreement, amount: Decimal) -> dict:
    return {
        'partner_id': agreement.partner_id,
        'name': agreement.partner.name,
        'partner_type': agreement.partner_type,
        'percentage': agreement.percentage,
        'amount': amount,
    }


def distribute(booking, apartment=None, rate_table: Optional[RateTable] = None) -> dict:
    """
    Split a booking's revenue between platform, fund, partners and operator.

    Args:
        booking: Booking to split
        apartment: Apartment whose partner agreements apply
            (defaults to booking.apartment)
        rate_table: Rates to convert with (defaults to the booking's locked rates)

    Returns:
        dict with total, platform_commission, development_deduction,
        distributable, partner_share, net_profit, partner_shares,
        paid_amount and remaining_amount
    """
    apartment = apartment or booking.apartment
    table = rate_table or booking_rate_table(booking)

    total = booking_total_in_base(booking, table)
    commission = effective_commission(booking)
    deduction = development_deduction_amount(booking, total)
    distributable = total - commission - deduction

    agreements = list(apartment.partner_agreements.select_related('partner'))
    shares = partner_shares(agreements, distributable)
    partner_share = sum((share['amount'] for share in shares), ZERO)
    net_profit = max(Decimal('0'), distributable - partner_share)

    paid = booking_paid_in_base(booking, table)

    return {
        'total': quantize_money(total),
        'platform_commission': quantize_money(commission),
        'development_deduction': quantize_money(deduction),
        'distributable': quantize_money(distributable),
        'partner_share': quantize_money(partner_share),
        'net_profit': quantize_money(net_profit),
        'partner_shares': [
            dict(share, amount=quantize_money(share['amount'])) for share in shares
        ],
        'paid_amount': paid,
        'remaining_amount': remaining(total, paid),
    }
