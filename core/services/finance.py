"""
Financial Calculator

Derives line totals, subtotal, tax amount and grand total for invoices.
All amounts are fixed-point decimals rounded to two places, half away from zero.
Inputs are coerced, never rejected: anything that is not a number counts as 0.
"""

from dataclasses import dataclass, field
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable

TWO_PLACES = Decimal('0.01')
ZERO = Decimal('0.00')

# Inputs at or above this magnitude count as 0, as do inputs below 1e-30
MAX_MAGNITUDE = Decimal('1e15')
MIN_EXPONENT = -30

# Wide enough that products and sums of bounded inputs stay exact
MONEY_CONTEXT = Context(prec=64, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class InvoiceCalculation:
    """Result of a totals calculation"""

    line_totals: list[Decimal] = field(default_factory=list)
    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    grand_total: Decimal = ZERO


class TotalsMismatch(ValueError):
    """Raised in strict mode when submitted totals disagree with recomputed ones"""

    def __init__(self, mismatches: dict):
        self.mismatches = mismatches
        fields = ', '.join(
            f"{name} (submitted {submitted}, expected {expected})"
            for name, (submitted, expected) in mismatches.items()
        )
        super().__init__(f"Invoice totals do not match: {fields}")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce an arbitrary value to a finite Decimal.

    Strings are stripped before parsing. None, empty strings, booleans,
    NaN/Infinity, unparsable values and magnitudes outside
    [1e-30, MAX_MAGNITUDE) all become 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        text = str(value).strip()
        if not text:
            return Decimal(0)
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            return Decimal(0)
    if not result.is_finite() or result.copy_abs() >= MAX_MAGNITUDE:
        return Decimal(0)
    if result and result.adjusted() < MIN_EXPONENT:
        return Decimal(0)
    return result


def _quantize(value: Decimal) -> Decimal:
    with localcontext(MONEY_CONTEXT):
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round2(value: Any) -> Decimal:
    """Round to two decimals, half away from zero."""
    return _quantize(to_decimal(value))


def format_amount(value: Any) -> str:
    """Format a value as a two-decimal string ('12.50')."""
    return f"{round2(value):.2f}"


def _field(line: Any, *names: str) -> Any:
    for name in names:
        if isinstance(line, dict):
            if name in line:
                return line[name]
        elif hasattr(line, name):
            return getattr(line, name)
    return None


def calculate_line_total(qty: Any, unit_price: Any) -> Decimal:
    """Line total = round2(qty * unit_price)"""
    with localcontext(MONEY_CONTEXT):
        return _quantize(to_decimal(qty) * to_decimal(unit_price))


def calculate_totals(lines: Iterable[Any], tax_percentage: Any = 0) -> InvoiceCalculation:
    """
    Calculate invoice totals from service lines.

    Args:
        lines: Iterable of mappings or objects exposing ``qty`` and
            ``unit_price`` (``unitPrice`` is accepted for raw payloads)
        tax_percentage: Tax rate in percent (10 means 10%)

    Returns:
        InvoiceCalculation with every amount rounded to two decimals
    """
    line_totals = [
        calculate_line_total(
            _field(line, 'qty'),
            _field(line, 'unit_price', 'unitPrice'),
        )
        for line in (lines or [])
    ]

    with localcontext(MONEY_CONTEXT):
        rate = to_decimal(tax_percentage) / Decimal(100)
        subtotal = _quantize(sum(line_totals, Decimal(0)))
        tax_amount = _quantize(subtotal * rate)
        grand_total = _quantize(subtotal * (1 + rate))

    return InvoiceCalculation(
        line_totals=line_totals,
        subtotal=subtotal,
        tax_amount=tax_amount,
        grand_total=grand_total,
    )


def verify_totals(invoice) -> InvoiceCalculation:
    """
    Recompute an invoice's totals and compare them with the submitted ones.

    Args:
        invoice: InvoiceRequest with caller-supplied totals

    Returns:
        The recomputed InvoiceCalculation

    Raises:
        TotalsMismatch: If any line total, the subtotal or the grand total differ
    """
    calculation = calculate_totals(invoice.services, invoice.tax_percentage)

    mismatches = {}
    for index, (service, expected) in enumerate(zip(invoice.services, calculation.line_totals)):
        if round2(service.line_total) != expected:
            mismatches[f"services[{index}].line_total"] = (round2(service.line_total), expected)
    if round2(invoice.subtotal) != calculation.subtotal:
        mismatches['subtotal'] = (round2(invoice.subtotal), calculation.subtotal)
    if round2(invoice.grand_total) != calculation.grand_total:
        mismatches['grand_total'] = (round2(invoice.grand_total), calculation.grand_total)

    if mismatches:
        raise TotalsMismatch(mismatches)
    return calculation
