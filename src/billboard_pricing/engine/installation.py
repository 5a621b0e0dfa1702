"""
Installation fees for billboard setup.

Fee = base fee for the billboard size x municipality multiplier,
rounded half-up to a whole amount.
"""
import math

DEFAULT_INSTALLATION_FEE = 500
DEFAULT_MUNICIPALITY_MULTIPLIER = 1.0

INSTALLATION_FEES: dict[str, int] = {
    '13x5': 1500,
    '12x4': 1200,
    '10x4': 1000,
    '8x3': 800,
    '6x3': 600,
    '4x3': 500,
}

MUNICIPALITY_MULTIPLIERS: dict[str, float] = {
    'مصراتة': 1.0,
    'طرابلس': 1.1,
    'بنغازي': 1.2,
    'زليتن': 0.9,
    'أبو سليم': 1.1,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def installation_fee(size: str, municipality: str) -> int:
    """
    Compute the one-time installation fee.

    Unknown sizes use the default base fee and unknown municipalities
    use a multiplier of 1.0.
    """
    base = INSTALLATION_FEES.get(size, DEFAULT_INSTALLATION_FEE)
    multiplier = MUNICIPALITY_MULTIPLIERS.get(municipality, DEFAULT_MUNICIPALITY_MULTIPLIER)
    return round_half_up(base * multiplier)
