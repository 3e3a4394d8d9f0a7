"""Exact base-10 arithmetic for weight quantities.

All weights are ``Decimal`` values with at most three fractional digits
(smallest unit 0.001 kg) and fit a ``Numeric(12, 3)`` column. Conversion to
``int``/``float`` happens only at the output boundary (JSON, XLSX, DOCX).
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from errors import ValidationError

WEIGHT_SCALE = 3
WEIGHT_QUANTUM = Decimal(1).scaleb(-WEIGHT_SCALE)  # 0.001
WEIGHT_MAX = Decimal("999999999.999")

ZERO = Decimal("0")

Number = Union[int, float, str, Decimal]


def to_weight(value: Number, field: str) -> Decimal:
    """Parse ``value`` into an exact weight or raise ``ValidationError`` for ``field``."""
    if isinstance(value, bool) or value is None:
        raise ValidationError({field: ["Expected a number"]})
    if isinstance(value, float):
        # str() gives the shortest repr: 12.345 -> "12.345", not the binary expansion
        value = str(value)
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        weight = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: ["Expected a number"]}) from None

    if not weight.is_finite():
        raise ValidationError({field: ["Expected a finite number"]})
    if abs(weight) > WEIGHT_MAX:
        raise ValidationError({field: [f"Must not exceed {WEIGHT_MAX}"]})
    if weight != weight.quantize(WEIGHT_QUANTUM):
        raise ValidationError({field: [f"At most {WEIGHT_SCALE} decimal places allowed"]})
    return weight.quantize(WEIGHT_QUANTUM)


def sum_weights(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def to_number(value: Decimal) -> Union[int, float]:
    """Render a weight as a plain JSON/spreadsheet number."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
