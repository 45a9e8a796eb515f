"""
Display formatting for Rupiah amounts and ratios.
"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[Decimal, int, float]


def format_rupiah(value: Number) -> str:
    """Format as whole Rupiah with dot thousands separators, e.g. 'Rp 30.000.000'"""
    amount = Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP)
    return f"Rp {amount:,.0f}".replace(",", ".")


def format_ratio(value: Number) -> str:
    """ROAS style ratio, e.g. '30.00x'"""
    return f"{Decimal(str(value)):.2f}x"


def format_units(value: Optional[Number]) -> str:
    """Unit count rounded up, or 'unreachable' when there is none"""
    if value is None:
        return "unreachable"
    units = Decimal(str(value)).to_integral_value(rounding=ROUND_CEILING)
    return f"{units:,.0f} units".replace(",", ".")
