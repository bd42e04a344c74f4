"""Breakpoint partitioning of the viewport width line.

Each breakpoint is the inclusive maximum width of a group. Breakpoints
``[480, 600, 782]`` produce the ranges ``[0, 480]``, ``[481, 600]``,
``[601, 782]`` and ``[783, MAX_VIEWPORT_WIDTH]``.
"""

import sys
from collections.abc import Iterable

# Upper bound of the widest group; stands for "no upper bound".
MAX_VIEWPORT_WIDTH = sys.maxsize

DEFAULT_BREAKPOINT_MAX_WIDTHS = (480, 600, 782)


def clamp_breakpoint(breakpoint: int) -> int:
    """Clamp a breakpoint into the open interval (0, MAX_VIEWPORT_WIDTH)."""
    if breakpoint >= MAX_VIEWPORT_WIDTH:
        return MAX_VIEWPORT_WIDTH - 1
    if breakpoint <= 0:
        return 1
    return breakpoint


def normalize_breakpoints(breakpoints: Iterable[int]) -> list[int]:
    """Clamp, de-duplicate and sort breakpoints.

    The result does not depend on the order of the input.
    """
    return sorted({clamp_breakpoint(int(breakpoint)) for breakpoint in breakpoints})


def is_normalized(breakpoints: Iterable[int]) -> bool:
    """Check whether breakpoints are strictly ascending and within bounds."""
    values = list(breakpoints)
    return values == normalize_breakpoints(values) and all(
        isinstance(value, int) for value in values
    )


def partition_breakpoints(breakpoints: Iterable[int]) -> list[tuple[int, int]]:
    """Partition ``[0, MAX_VIEWPORT_WIDTH]`` into contiguous inclusive ranges.

    Returns:
        ``len(normalize_breakpoints(breakpoints)) + 1`` (minimum, maximum) pairs
        in ascending order with no gaps or overlaps
    """
    ranges: list[tuple[int, int]] = []
    minimum = 0
    for breakpoint in normalize_breakpoints(breakpoints):
        ranges.append((minimum, breakpoint))
        minimum = breakpoint + 1
    ranges.append((minimum, MAX_VIEWPORT_WIDTH))
    return ranges
