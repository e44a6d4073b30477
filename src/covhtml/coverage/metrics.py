"""Coverage percentages and watermarks.

``percentage`` never substitutes a value for an empty denominator: it
returns NaN and leaves the display decision to the caller.
"""

import math
from enum import Enum

DEFAULT_LOW_WATERMARK = 50.0
DEFAULT_HIGH_WATERMARK = 80.0


class Watermark(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def percentage(covered: int, total: int) -> float:
    """Return covered/total as a percentage, or NaN when total is 0."""
    if total == 0:
        return math.nan
    return covered / total * 100


def is_defined(pct: float) -> bool:
    """True unless pct came from an empty denominator."""
    return not math.isnan(pct)


def watermark(
    pct: float,
    *,
    low: float = DEFAULT_LOW_WATERMARK,
    high: float = DEFAULT_HIGH_WATERMARK,
) -> Watermark:
    """Classify a percentage as low, medium or high.

    Both thresholds belong to MEDIUM: exactly ``low`` or ``high`` is medium.
    NaN fails both comparisons and therefore also lands on MEDIUM; callers
    that care check ``is_defined`` first.
    """
    if pct < low:
        return Watermark.LOW
    if pct > high:
        return Watermark.HIGH
    return Watermark.MEDIUM
