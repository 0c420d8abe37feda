from __future__ import annotations

from typing import List


def _numbers(text: str) -> List[float] | None:
    try:
        return [float(part) for part in text.split()]
    except ValueError:
        return None


def pos_list_problems(text: str) -> List[str]:
    """Problems with a GML polygon `posList`: numeric pairs, at least 4 points, closed ring."""
    values = _numbers(text)
    if values is None:
        return [f"posList contains non-numeric values: '{text.strip()}'"]
    if len(values) % 2 != 0:
        return [f"posList has an odd number of values: {len(values)}"]
    if len(values) < 8:
        return [f"posList has too few values: {len(values)} (need at least 4 pairs)"]
    if values[:2] != values[-2:]:
        return [f"posList is not closed, first pair {values[:2]} differs from last pair {values[-2:]}"]
    return []


def has_at_least_two_values(text: str) -> bool:
    values = _numbers(text)
    return values is not None and len(values) >= 2
