"""
Currency Services Module
=========================

Exchange-rate lookup and conversion for the booking engine.

All internal money arithmetic happens in the base currency
(``settings.BASE_CURRENCY``). A rate is stored as the number of units of a
currency that equal one unit of the base currency, so converting into the
base currency is a division and converting out of it is a multiplication.

Classes:
    RateTable: Refreshable currency -> rate map with conversion helpers.

Functions:
    get_rate_table: Load the current rate table from the database.
    set_rate: Create or update a single stored rate.
    import_reference_rates: Store a feed quoted against another currency.

Example:
    Converting a payment::

        from apps.currency.services import get_rate_table

        table = get_rate_table()
        usd = table.to_base(Decimal('500'), 'EGP')
"""

import logging
from decimal import Decimal
from typing import Mapping, Optional

from django.conf import settings
from django.db import transaction

from .exceptions import InvalidRateError, RateUnavailableError
from .models import CurrencyRate

logger = logging.getLogger(__name__)

RATE_PLACES = Decimal('0.000001')


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class RateTable:
    """
    In-memory map of currency code to units-per-base rate.

    The base currency always resolves to 1. Lookups for unknown currencies
    raise RateUnavailableError unless the caller supplies a default rate,
    in which case the default is used and a warning is logged.

    Methods:
        refresh: Replace the whole map.
        rate_for: Look up a rate (with optional default).
        to_base / from_base / convert: Amount conversion.
        snapshot / from_snapshot: Serialize for locking onto a booking.
        from_reference_rates: Build from a feed quoted in another currency.
        current: Build from the stored CurrencyRate rows.
    """

    def __init__(self, rates: Optional[Mapping] = None, base_currency: Optional[str] = None):
        self.base_currency = (base_currency or settings.BASE_CURRENCY).upper()
        self._rates = {}
        self.refresh(rates or {})

    def __contains__(self, currency):
        return currency.upper() in self._rates

    def __repr__(self):
        return f"<RateTable base={self.base_currency} currencies={sorted(self._rates)}>"

    def refresh(self, rates: Mapping) -> None:
        """Replace all rates. Rejects non-positive values."""
        parsed = {}
        for code, value in rates.items():
            rate = _to_decimal(value)
            if rate <= 0:
                raise InvalidRateError(f"Rate for {code} must be positive")
            parsed[code.upper()] = rate
        parsed[self.base_currency] = Decimal('1')
        self._rates = parsed

    def rate_for(self, currency: str, default=None) -> Decimal:
        """
        Return units of `currency` per one base unit.

        Raises:
            RateUnavailableError: If the currency is unknown and no default given.
        """
        code = currency.upper()
        if code in self._rates:
            return self._rates[code]
        if default is not None:
            logger.warning(
                "No rate for %s, falling back to default rate %s", code, default
            )
            return _to_decimal(default)
        raise RateUnavailableError(code)

    def to_base(self, amount, currency: str, default_rate=None) -> Decimal:
        """Convert an amount in `currency` into the base currency (unrounded)."""
        amount = _to_decimal(amount)
        if currency.upper() == self.base_currency:
            return amount
        return amount / self.rate_for(currency, default_rate)

    def from_base(self, amount, currency: str, default_rate=None) -> Decimal:
        """Convert a base-currency amount into `currency` (unrounded)."""
        amount = _to_decimal(amount)
        if currency.upper() == self.base_currency:
            return amount
        return amount * self.rate_for(currency, default_rate)

    def convert(self, amount, from_currency: str, to_currency: str) -> Decimal:
        return self.from_base(self.to_base(amount, from_currency), to_currency)

    def snapshot(self) -> dict:
        """JSON-safe copy of the table, used to lock rates onto a booking."""
        return {code: str(rate) for code, rate in sorted(self._rates.items())}

    @classmethod
    def from_snapshot(cls, snapshot: Optional[Mapping], base_currency: Optional[str] = None):
        return cls(snapshot or {}, base_currency=base_currency)

    @classmethod
    def from_reference_rates(
        cls,
        reference_rates: Mapping,
        reference_currency: str,
        base_currency: Optional[str] = None,
    ):
        """
        Build a table from a feed quoted as "reference units per 1 currency unit".

        A rate feed often quotes every currency against a local currency,
        e.g. ``{'USD': 50, 'EUR': 54}`` meaning 1 USD = 50 EGP. The feed must
        contain the base currency.

        Raises:
            RateUnavailableError: If the feed has no quote for the base currency.
        """
        base = (base_currency or settings.BASE_CURRENCY).upper()
        quotes = {code.upper(): _to_decimal(value) for code, value in reference_rates.items()}
        if base not in quotes:
            raise RateUnavailableError(base)

        base_in_reference = quotes[base]
        if base_in_reference <= 0:
            raise InvalidRateError(f"Rate for {base} must be positive")

        rates = {reference_currency.upper(): base_in_reference}
        for code, reference_per_unit in quotes.items():
            if reference_per_unit <= 0:
                raise InvalidRateError(f"Rate for {code} must be positive")
            rates[code] = base_in_reference / reference_per_unit
        return cls(rates, base_currency=base)

    @classmethod
    def current(cls):
        """Load the table from stored CurrencyRate rows."""
        rates = dict(CurrencyRate.objects.values_list('currency', 'units_per_base'))
        return cls(rates)


def get_rate_table() -> RateTable:
    """Return the current rate table."""
    return RateTable.current()


def set_rate(*, currency: str, units_per_base, source: str = 'manual') -> CurrencyRate:
    """
    Create or update the stored rate for one currency.

    Raises:
        InvalidRateError: If the rate is not positive or targets the base currency.
    """
    code = currency.upper()
    rate = _to_decimal(units_per_base)
    if rate <= 0:
        raise InvalidRateError(f"Rate for {code} must be positive")
    if code == settings.BASE_CURRENCY.upper() and rate != 1:
        raise InvalidRateError(f"{code} is the base currency; its rate is always 1")

    obj, _ = CurrencyRate.objects.update_or_create(
        currency=code,
        defaults={'units_per_base': rate.quantize(RATE_PLACES), 'source': source},
    )
    logger.info("Rate for %s set to %s (%s)", code, obj.units_per_base, source)
    return obj


@transaction.atomic
def import_reference_rates(
    *,
    rates: Mapping,
    reference_currency: str,
    source: str = 'feed',
) -> list:
    """
    Store every rate of a reference-quoted feed.

    Returns:
        List of stored CurrencyRate rows (base currency excluded).
    """
    table = RateTable.from_reference_rates(rates, reference_currency)
    stored = []
    for code, rate in table.snapshot().items():
        if code == table.base_currency:
            continue
        stored.append(set_rate(currency=code, units_per_base=rate, source=source))
    return stored
