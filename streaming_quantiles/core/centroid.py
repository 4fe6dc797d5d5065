"""
Totally ordered bucket positions.

Python floats only form a partial order once NaN is involved, so bucket
positions are wrapped in a Centroid that refuses NaN (and infinities) at
construction. Every comparison between two Centroids is then total, which is
what the sorted bucket store relies on.
"""

import math
from typing import Union

Number = Union[int, float]


class Centroid:
    """A finite, non-NaN float usable as a key in an ordered bucket store."""

    __slots__ = ["value"]

    def __init__(self, value: Number):
        """
        Wrap a numeric value.

        Raises:
            TypeError: If value is not a real number.
            ValueError: If value is NaN, infinite or outside float range.
        """
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(
                f"Centroid value must be a real number, got {type(value).__name__}"
            )
        try:
            value = float(value)
        except OverflowError:
            raise ValueError(
                "Centroid value must be finite, integer is out of float range"
            ) from None
        if math.isnan(value):
            raise ValueError("Centroid value cannot be NaN")
        if math.isinf(value):
            raise ValueError(f"Centroid value must be finite, got {value}")
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Centroid):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: "Centroid") -> bool:
        """Order centroids by position."""
        return self.value < other.value

    def __le__(self, other: "Centroid") -> bool:
        return self.value <= other.value

    def __gt__(self, other: "Centroid") -> bool:
        return self.value > other.value

    def __ge__(self, other: "Centroid") -> bool:
        return self.value >= other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __sub__(self, other: "Centroid") -> float:
        """Return the gap between two positions."""
        gap = self.value - other.value
        if math.isnan(gap):
            raise ArithmeticError(f"Gap between {self!r} and {other!r} is NaN")
        return gap

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Centroid({self.value!r})"
