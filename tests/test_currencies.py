"""Tests for currency conversion."""

from decimal import Decimal

import pytest

from ledger_engine import Ledger
from ledger_engine.exceptions import (
    DuplicateError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import Currency


@pytest.fixture
def currencies(empty_ledger: Ledger) -> Ledger:
    """A ledger with EUR as base and USD, GBP at fixed rates."""
    empty_ledger.currencies.save(Currency("EUR", "Euro", "€", base_currency=True))
    empty_ledger.currencies.save(Currency("USD", "US Dollar", "$", Decimal("0.92")))
    empty_ledger.currencies.save(Currency("GBP", "Pound Sterling", "£", Decimal("1.17")))
    return empty_ledger


class TestSave:
    """Tests for CurrencyConverter.save."""

    @pytest.mark.parametrize("code", ["usd", "US", "USDX", "U1D", ""])
    def test_rejects_bad_code(self, empty_ledger: Ledger, code: str) -> None:
        """Should require three upper-case letters."""
        with pytest.raises(ValidationError):
            empty_ledger.currencies.save(Currency(code, "Bad"))

    @pytest.mark.parametrize("rate", ["0", "-1.5"])
    def test_rejects_non_positive_rate(self, empty_ledger: Ledger, rate: str) -> None:
        """Should require a positive rate."""
        with pytest.raises(ValidationError):
            empty_ledger.currencies.save(Currency("USD", "US Dollar", exchange_rate=Decimal(rate)))

    def test_rejects_duplicate_code(self, currencies: Ledger) -> None:
        """Should refuse a second currency with the same code."""
        with pytest.raises(DuplicateError):
            currencies.currencies.save(Currency("USD", "Another Dollar"))

    def test_base_gets_rate_one(self, empty_ledger: Ledger) -> None:
        """Should force the base currency rate to 1."""
        eur = empty_ledger.currencies.save(
            Currency("EUR", "Euro", exchange_rate=Decimal("3"), base_currency=True)
        )

        assert eur.exchange_rate == Decimal(1)

    def test_new_base_demotes_previous(self, currencies: Ledger) -> None:
        """Should keep a single base currency."""
        currencies.currencies.save(Currency("CHF", "Swiss Franc", base_currency=True))

        bases = [c.code for c in currencies.currencies.find_all() if c.base_currency]
        assert bases == ["CHF"]

    def test_save_cannot_demote_base(self, currencies: Ledger) -> None:
        """Should refuse to clear the base flag through save."""
        eur = currencies.currencies.get_by_code("EUR")
        eur.base_currency = False

        with pytest.raises(StateConflictError):
            currencies.currencies.save(eur)

        assert currencies.currencies.get_base_currency().code == "EUR"

    def test_save_cannot_deactivate_base(self, currencies: Ledger) -> None:
        """Should refuse to store an inactive base currency."""
        eur = currencies.currencies.get_by_code("EUR")
        eur.active = False

        with pytest.raises(StateConflictError):
            currencies.currencies.save(eur)

        assert currencies.currencies.get_by_code("EUR").active

    def test_save_updates_base_details(self, currencies: Ledger) -> None:
        """Should still allow other changes to the base currency."""
        eur = currencies.currencies.get_by_code("EUR")
        eur.name = "Euro (EU)"

        currencies.currencies.save(eur)

        assert currencies.currencies.get_base_currency().name == "Euro (EU)"


class TestBase:
    """Tests for base currency handling."""

    def test_set_as_base(self, currencies: Ledger) -> None:
        """Should promote a currency and demote the old base."""
        usd = currencies.currencies.set_as_base_currency("USD")

        assert usd.base_currency
        assert usd.exchange_rate == Decimal(1)
        assert currencies.currencies.get_base_currency().code == "USD"
        assert not currencies.currencies.get_by_code("EUR").base_currency

    def test_base_rate_is_fixed(self, currencies: Ledger) -> None:
        """Should refuse to move the base rate off 1."""
        with pytest.raises(StateConflictError):
            currencies.currencies.update_exchange_rate("EUR", "1.1")

    def test_base_cannot_be_deactivated(self, currencies: Ledger) -> None:
        """Should refuse to deactivate the base currency."""
        with pytest.raises(StateConflictError):
            currencies.currencies.deactivate("EUR")

    def test_deactivate(self, currencies: Ledger) -> None:
        """Should hide deactivated currencies from the active list."""
        currencies.currencies.deactivate("GBP")

        assert [c.code for c in currencies.currencies.find_all_active()] == ["EUR", "USD"]

    def test_update_rate(self, currencies: Ledger) -> None:
        """Should store a new rate."""
        currencies.currencies.update_exchange_rate("USD", "0.95")

        assert currencies.currencies.get_by_code("USD").exchange_rate == Decimal("0.95")


class TestConvert:
    """Tests for conversion through the base currency."""

    def test_to_base(self, currencies: Ledger) -> None:
        """Should multiply by the source rate."""
        assert currencies.currencies.convert("100", "USD", "EUR") == Decimal("92.00")

    def test_from_base(self, currencies: Ledger) -> None:
        """Should divide by the target rate and round half-up."""
        assert currencies.currencies.convert("100", "EUR", "USD") == Decimal("108.70")

    def test_cross_rate(self, currencies: Ledger) -> None:
        """Should go through the base for two foreign currencies."""
        assert currencies.currencies.convert("100", "GBP", "USD") == Decimal("127.17")

    def test_same_currency_unchanged(self, currencies: Ledger) -> None:
        """Should return the amount untouched for equal codes."""
        assert currencies.currencies.convert("10.005", "USD", "USD") == Decimal("10.005")

    def test_round_trip_within_a_cent(self, currencies: Ledger) -> None:
        """Should come back within one cent after a round trip."""
        there = currencies.currencies.convert("123.45", "EUR", "GBP")
        back = currencies.currencies.convert(there, "GBP", "EUR")

        assert abs(back - Decimal("123.45")) <= Decimal("0.01")

    def test_unknown_code(self, currencies: Ledger) -> None:
        """Should raise not-found for unknown codes."""
        with pytest.raises(NotFoundError):
            currencies.currencies.convert("1", "USD", "JPY")
