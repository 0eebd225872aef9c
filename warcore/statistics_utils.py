"""Reusable statistics calculation utilities.

This module provides small, pure helpers used by the war statistics
aggregator. They handle the awkward edges (zero denominators, values
outside their nominal range) consistently so the aggregator does not
have to.

Design Principles:
- Division by zero yields 0.0, never an exception or NaN
- Formatted values are always two-decimal strings
- Functions are pure and side-effect free
"""

from collections.abc import Iterable

# Attack-usage buckets, in output order.
USAGE_BUCKETS: tuple[str, ...] = ("0-25%", "26-50%", "51-75%", "76-99%", "100%")


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is zero.

    Example:
        >>> safe_ratio(3, 2)
        1.5
        >>> safe_ratio(5, 0)
        0.0
    """
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator)


def format_two_places(value: float) -> str:
    """Format a number with exactly two decimal places.

    Example:
        >>> format_two_places(50)
        '50.00'
        >>> format_two_places(2.0 / 3.0)
        '0.67'
    """
    return f"{value:.2f}"


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(value, high))


def usage_bucket(usage: float) -> str:
    """Return the usage bucket label for an attack-usage percentage.

    Buckets are checked in precedence order, first match wins. Only an
    exact 100 lands in "100%"; anything from 76 up to (but excluding)
    100 is "76-99%".

    Example:
        >>> usage_bucket(100.0)
        '100%'
        >>> usage_bucket(99.5)
        '76-99%'
        >>> usage_bucket(25.99)
        '0-25%'
    """
    if usage == 100:
        return "100%"
    if usage >= 76:
        return "76-99%"
    if usage >= 51:
        return "51-75%"
    if usage >= 26:
        return "26-50%"
    return "0-25%"


def usage_distribution(usages: Iterable[float]) -> dict[str, int]:
    """Count usage percentages per bucket.

    All five buckets are always present, so the counts sum to the number
    of values passed in.

    Args:
        usages: Attack-usage percentages (0-100)

    Returns:
        Ordered mapping of bucket label to count
    """
    counts = {bucket: 0 for bucket in USAGE_BUCKETS}
    for usage in usages:
        counts[usage_bucket(usage)] += 1
    return counts
