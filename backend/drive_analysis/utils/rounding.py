"""
Presentation rounding.

Figures are reported to 2 decimals with halves rounded up (0.125 -> 0.13),
not the round-half-to-even of the builtin round().
"""

import math


def round2(value: float) -> float:
    """Round to 2 decimals, halves toward positive infinity."""
    return math.floor(value * 100 + 0.5) / 100
