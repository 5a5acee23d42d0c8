from __future__ import annotations


def percentage(part: int, whole: int) -> float:
    """``part`` as a percentage of ``whole`` rounded to 2 decimals; 0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)
