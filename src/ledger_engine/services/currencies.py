"""Currencies, exchange rates and conversion."""

import logging
import re
from decimal import Decimal

from ledger_engine.exceptions import (
    DuplicateError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import Currency
from ledger_engine.money import quantize, to_decimal
from ledger_engine.services.base import BaseService

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")
_ONE = Decimal(1)


class CurrencyConverter(BaseService):
    """Stores currencies with their rate against the base currency.

    At most one currency is the base at any time and its rate is always 1.
    Changing the base does not rescale the other rates.
    """

    def save(self, currency: Currency) -> Currency:
        """Insert or update a currency.

        A base currency is stored with rate 1 and any previous base is demoted.

        Raises:
            ValidationError: Code is not three upper-case letters, or rate <= 0
            DuplicateError: A different currency already uses the code
            StateConflictError: The stored base would be demoted or deactivated
        """
        logger.info("Saving currency: %s", currency.code)
        currency.code = (currency.code or "").strip()
        if not _CODE_PATTERN.match(currency.code):
            msg = f"Currency code must be three upper-case letters: {currency.code!r}"
            raise ValidationError(msg, field="code")
        currency.exchange_rate = to_decimal(currency.exchange_rate, field="exchange_rate")
        if currency.exchange_rate <= 0:
            msg = f"Exchange rate must be positive: {currency.exchange_rate}"
            raise ValidationError(msg, field="exchange_rate")

        with self.store.transaction():
            existing = self.store.currencies.find_by_code(currency.code)
            if existing is not None and existing.id != currency.id:
                raise DuplicateError("Currency", currency.code)

            stored = (
                self.store.currencies.find_by_id(currency.id) if currency.id is not None else None
            )
            if stored is not None and stored.base_currency and not currency.base_currency:
                raise StateConflictError(
                    f"Base currency {stored.code} can only be replaced by promoting another one"
                )
            if currency.base_currency and not currency.active:
                raise StateConflictError(f"Base currency {currency.code} cannot be deactivated")

            if currency.base_currency:
                currency.exchange_rate = _ONE
                self._demote_base(keep_id=currency.id)

            if currency.id is None:
                self.store.currencies.save(currency)
            else:
                self.store.currencies.update(currency)

        return currency

    def _demote_base(self, keep_id: int | None = None) -> None:
        base = self.store.currencies.find_base()
        if base is not None and base.id != keep_id:
            logger.debug("Demoting previous base currency %s", base.code)
            base.base_currency = False
            base.exchange_rate = _ONE
            self.store.currencies.update(base)

    def update_exchange_rate(self, code: str, rate: Decimal | int | str) -> Currency:
        """Set a new rate for a currency.

        Raises:
            NotFoundError: Unknown code
            ValidationError: Rate <= 0
            StateConflictError: Attempt to move the base currency off 1
        """
        rate = to_decimal(rate, field="exchange_rate")
        logger.info("Updating exchange rate for %s: %s", code, rate)
        if rate <= 0:
            raise ValidationError(f"Exchange rate must be positive: {rate}", field="exchange_rate")

        with self.store.transaction():
            currency = self.get_by_code(code)
            if currency.base_currency and rate != _ONE:
                raise StateConflictError(f"Base currency {code} must keep a rate of 1")
            currency.exchange_rate = rate
            self.store.currencies.update(currency)
        return currency

    def set_as_base_currency(self, code: str) -> Currency:
        """Promote a currency to base, demoting the previous one (both get rate 1)."""
        logger.info("Setting %s as base currency", code)

        with self.store.transaction():
            currency = self.get_by_code(code)
            self._demote_base(keep_id=currency.id)
            currency.base_currency = True
            currency.exchange_rate = _ONE
            self.store.currencies.update(currency)
        return currency

    def deactivate(self, code: str) -> Currency:
        with self.store.transaction():
            currency = self.get_by_code(code)
            if currency.base_currency:
                raise StateConflictError(f"Base currency {code} cannot be deactivated")
            currency.active = False
            self.store.currencies.update(currency)
        return currency

    def convert(self, amount: Decimal | int | str, from_code: str, to_code: str) -> Decimal:
        """Convert an amount between two currencies through the base currency.

        The result is ``amount * from_rate / to_rate`` rounded half-up to
        ``currency_scale`` places. Equal codes return the amount unchanged.

        Raises:
            NotFoundError: Either code is unknown
        """
        value = to_decimal(amount)
        logger.debug("Converting %s from %s to %s", value, from_code, to_code)

        source = self.get_by_code(from_code)
        target = self.get_by_code(to_code)
        if source.code == target.code:
            return value

        return quantize(target.from_base(source.to_base(value)), self.config.currency_scale)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_code(self, code: str) -> Currency | None:
        logger.debug("Finding currency by code: %s", code)
        return self.store.currencies.find_by_code(code)

    def get_by_code(self, code: str) -> Currency:
        currency = self.find_by_code(code)
        if currency is None:
            raise NotFoundError("Currency", code)
        return currency

    def get_base_currency(self) -> Currency | None:
        logger.debug("Getting base currency")
        return self.store.currencies.find_base()

    def find_all_active(self) -> list[Currency]:
        logger.debug("Finding all active currencies")
        return self.store.currencies.find_active()

    def find_all(self) -> list[Currency]:
        return self.store.currencies.find_all()
