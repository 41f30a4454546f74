"""Currency records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Currency:
    """A currency and its exchange rate against the base currency.

    ``exchange_rate`` is the number of base units one unit of this currency
    is worth. The base currency always has a rate of exactly 1.
    """

    code: str
    name: str
    symbol: str = ""
    exchange_rate: Decimal = Decimal(1)
    base_currency: bool = False
    active: bool = True
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_base(self, amount: Decimal) -> Decimal:
        """Convert an amount in this currency to the base currency."""
        if self.base_currency:
            return amount
        return amount * self.exchange_rate

    def from_base(self, amount: Decimal) -> Decimal:
        """Convert a base-currency amount to this currency (unrounded)."""
        if self.base_currency:
            return amount
        return amount / self.exchange_rate
