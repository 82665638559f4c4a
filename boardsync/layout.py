"""
Board geometry: where containers sit, where cards stack inside them, and the
point-in-rectangle test used for drop-target hit-testing.
"""
from typing import List, Sequence, Tuple

# Cards overlap the one above by this much; the first card sits this far below the title
TOP_POS_ADJUSTMENT = 10


def stack_positions(
    left: float,
    top: float,
    title_height: float,
    heights: Sequence[float],
) -> List[Tuple[float, float]]:
    """
    Compute the (x, y) slot of each card in a container, in visit order.

    First slot: top + title_height + 10.
    Each following slot advances by the previous card's height - 10.
    """
    offset_y = title_height + TOP_POS_ADJUSTMENT
    slots = []
    prev_height = 0.0
    for height in heights:
        slots.append((left, top + prev_height + offset_y))
        prev_height += height - TOP_POS_ADJUSTMENT
    return slots


def column_left(index: int, margin: float, width: float, gap: float) -> float:
    """X coordinate of the index-th container, laid out left to right."""
    return margin + index * (width + gap)


def contains(left: float, top: float, width: float, height: float, x: float, y: float) -> bool:
    """Inclusive point-in-rectangle test."""
    return left <= x <= left + width and top <= y <= top + height
