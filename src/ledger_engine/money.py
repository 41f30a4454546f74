"""Decimal helpers shared by the ledger services."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ledger_engine.exceptions import ValidationError

ZERO = Decimal(0)


def to_decimal(value: Decimal | int | str | float | None, *, field: str = "amount") -> Decimal:
    """Coerce a caller-supplied amount to Decimal.

    None becomes zero. Floats go through ``str`` so 0.1 stays 0.1.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError(f"Invalid {field}: {value!r}", field=field) from None
    if not result.is_finite():
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    return result


def quantize(value: Decimal, scale: int) -> Decimal:
    """Round to ``scale`` decimal places using ROUND_HALF_UP."""
    return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)
