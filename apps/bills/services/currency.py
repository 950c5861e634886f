"""
Rupiah display formatting.

``format_rupiah`` renders amounts the way they are shown to users
(``Rp 40.000``) and ``parse_rupiah`` reads that format back. Neither
function knows anything about bills.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal('0')
CENT = Decimal('0.01')

_CURRENCY_PREFIX_RE = re.compile(r'^(-?)\s*rp\.?\s*', re.IGNORECASE)
_AMOUNT_RE = re.compile(r'^-?\d+(\.\d{3})*(,\d+)?$|^-?\d+(,\d+)?$')


def to_money(amount) -> Decimal:
    """Round an amount half-up to 2 decimals for display and storage."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_rupiah(amount) -> str:
    """
    Format an amount as Indonesian rupiah.

    Thousands are separated with ``.`` and the amount is rounded half-up
    to whole rupiah.

    Example:
        >>> format_rupiah(Decimal('40000'))
        'Rp 40.000'
        >>> format_rupiah(Decimal('-1500.5'))
        '-Rp 1.501'
    """
    value = Decimal(amount).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    digits = f'{abs(value):,.0f}'.replace(',', '.')
    return f'{sign}Rp {digits}'


def parse_rupiah(text) -> Decimal:
    """
    Parse a user-entered rupiah amount.

    Accepts plain numbers and the output of ``format_rupiah`` (optional
    ``Rp`` prefix, ``.`` thousand separators, ``,`` decimal separator).
    Numeric values are taken as-is. Anything unparseable yields zero.
    Negative amounts are returned negative; clamping is the caller's job.
    """
    if text is None or isinstance(text, bool):
        return ZERO

    if isinstance(text, (int, Decimal)):
        value = Decimal(text)
        return value if value.is_finite() else ZERO

    if isinstance(text, float):
        value = Decimal(str(text))
        return value if value.is_finite() else ZERO

    cleaned = _CURRENCY_PREFIX_RE.sub(r'\1', str(text).strip())
    cleaned = cleaned.replace(' ', '').replace('\u00a0', '')

    if not cleaned or not _AMOUNT_RE.match(cleaned):
        return ZERO

    try:
        return Decimal(cleaned.replace('.', '').replace(',', '.'))
    except InvalidOperation:
        return ZERO
