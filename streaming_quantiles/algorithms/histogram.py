"""
Mergeable streaming histogram for cumulative-count estimation.

This module provides a size-bounded histogram in the style of Ben-Haim and
Tom-Tov's streaming parallel decision tree histogram. Observations are kept
as (position, weight) buckets; whenever there are more buckets than the
configured capacity, the two closest neighbours are folded into one bucket
at their weighted mean. Histograms built from disjoint shards of a stream
can be merged, and the merged result answers "how many observations are at
or below x" by interpolating linearly between neighbouring buckets.

References:
    - Ben-Haim, Y., & Tom-Tov, E. (2010).
      A streaming parallel decision tree algorithm.
      Journal of Machine Learning Research, 11, 849-872.
"""

import bisect
import logging
import math
import sys
from typing import Any, Dict, Iterable, List, Tuple, Type, TypeVar, Union

from streaming_quantiles.core.base import CumulativeCountEstimator
from streaming_quantiles.core.centroid import Centroid

logger = logging.getLogger(__name__)

HistogramType = TypeVar("HistogramType", bound="StreamingHistogram")

# Sentinel positions enclosing the buckets during estimation.
_LEFT_SENTINEL = -sys.float_info.max
_RIGHT_SENTINEL = sys.float_info.max


def _weighted_mean(
    left: float, left_weight: float, right: float, right_weight: float, total: float
) -> float:
    """
    Weighted mean of two positions, left <= right.

    Uses the direct (left*wl + right*wr) / total form, falling back to scaling
    each position by its share of the weight when the products overflow near
    the float extremes. The result always lies within [left, right].
    """
    mean = (left * left_weight + right * right_weight) / total
    if not math.isfinite(mean):
        mean = left * (left_weight / total) + right * (right_weight / total)
    return min(max(mean, left), right)


class StreamingHistogram(CumulativeCountEstimator):
    """
    Streaming histogram with a fixed number of buckets.

    Key properties:

    1. Memory usage is bounded by the capacity, not by the stream length
    2. Identical observations share a bucket, so repeats never add buckets
    3. Total weight is preserved exactly by compression and merging
    4. Mergeable: histograms of separate shards can be combined

    Instances are not thread-safe; callers serialize access to a histogram
    that is being mutated.
    """

    DEFAULT_CAPACITY: int = 100

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize an empty histogram.

        Args:
            capacity: Maximum number of buckets retained. A capacity of 0 is
                accepted but cannot hold any observation.

        Raises:
            ValueError: If capacity is negative or not an integer.
        """
        super().__init__()
        if (
            isinstance(capacity, bool)
            or not isinstance(capacity, int)
            or capacity < 0
        ):
            raise ValueError("Capacity must be a non-negative integer")

        self._capacity: int = capacity
        self._buckets: Dict[Centroid, float] = {}
        # Bucket keys in ascending order
        self._positions: List[Centroid] = []

    @classmethod
    def from_values(
        cls: Type[HistogramType],
        values: Iterable[float],
        capacity: int = DEFAULT_CAPACITY,
    ) -> HistogramType:
        """
        Build a histogram from an iterable of observations.

        Args:
            values: Observations to add, in stream order.
            capacity: Maximum number of buckets retained.

        Returns:
            A new histogram containing every value.
        """
        histogram = cls(capacity=capacity)
        for value in values:
            histogram.add(value)
        return histogram

    @property
    def capacity(self) -> int:
        """Maximum number of buckets retained."""
        return self._capacity

    @property
    def bucket_count(self) -> int:
        """Number of buckets currently held."""
        return len(self._positions)

    @property
    def total_weight(self) -> float:
        """Sum of all bucket weights."""
        return math.fsum(self._buckets.values())

    @property
    def is_empty(self) -> bool:
        """Check if the histogram holds any bucket."""
        return not self._positions

    def add(self, value: float) -> None:
        """
        Record one observation.

        A bucket already sitting at exactly this value gains one unit of
        weight; otherwise a new unit bucket is created. The histogram is then
        compressed back down to its capacity.

        Args:
            value: A finite real number.

        Raises:
            TypeError: If value is not a real number.
            ValueError: If value is NaN, infinite or outside float range, or
                the capacity is 0.
        """
        position = self._to_centroid(value)
        self._require_capacity()

        super().update(value)
        self._add_weight(position, 1.0)
        self._compress()

    def update(self, item: float) -> None:
        """Alias of add() for the StreamSummary interface."""
        self.add(item)

    def merge_from(self, other: "StreamingHistogram") -> None:
        """
        Fold another histogram's buckets into this one.

        Weights at identical positions are summed, then the result is
        compressed against this histogram's capacity. The other histogram's
        capacity plays no part and it is left unchanged.

        Args:
            other: The histogram to absorb.

        Raises:
            TypeError: If other is not a StreamingHistogram.
            ValueError: If this histogram has capacity 0 and other is not empty.
        """
        self._check_same_type(other)
        if other is self:
            # Snapshot so every bucket is counted exactly twice.
            other = other.copy()
        if other.is_empty:
            self._items_processed = self._combine_items_processed(other)
            return
        self._require_capacity()

        logger.debug(
            "Merging %d buckets into histogram with %d buckets (capacity=%d).",
            other.bucket_count,
            self.bucket_count,
            self._capacity,
        )
        for position in other._positions:
            self._add_weight(position, other._buckets[position])
        self._items_processed = self._combine_items_processed(other)
        self._compress()

    def merge(self: HistogramType, other: HistogramType) -> HistogramType:
        """
        Merge this histogram with another into a new histogram.

        Neither input is modified. The result uses this histogram's capacity.

        Args:
            other: Another StreamingHistogram.

        Returns:
            A new histogram representing both inputs.

        Raises:
            TypeError: If 'other' is not a StreamingHistogram.
        """
        self._check_same_type(other)
        merged = self.copy()
        merged.merge_from(other)
        return merged

    def sum(self, threshold: float) -> float:
        """
        Estimate how many observations are less than or equal to threshold.

        The buckets are treated as samples of a piecewise-linear density.
        Two zero-weight sentinels at the extremes of the float range enclose
        them. Walking neighbouring pairs left to right, every bucket whose
        right neighbour is at or below the threshold contributes its whole
        weight. In the pair that straddles the threshold, the left bucket
        contributes half its weight, plus the area of the trapezoid between
        the left bucket and the interpolated height at the threshold,
        expressed as a fraction of the segment width.

        The result is an estimate: even on unit-weight, uncompressed buckets
        it models a continuous density and does not reproduce exact counts.

        Args:
            threshold: Upper bound (inclusive) of the count. Infinite values
                are allowed.

        Returns:
            Estimated count of observations at or below threshold.

        Raises:
            TypeError: If threshold is not a real number.
            ValueError: If threshold is NaN or an integer outside float range.
            ArithmeticError: If a segment has zero or NaN width.
        """
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise TypeError(
                f"Threshold must be a real number, got {type(threshold).__name__}"
            )
        try:
            threshold = float(threshold)
        except OverflowError:
            logger.error("Integer threshold is outside float range.")
            raise ValueError("Threshold must be finite or a float infinity") from None
        if math.isnan(threshold):
            logger.error("NaN threshold passed to histogram sum.")
            raise ValueError("Threshold cannot be NaN")

        if not self._positions:
            return 0.0

        logger.debug("Estimating count of observations <= %r.", threshold)

        nodes = [(_LEFT_SENTINEL, 0.0)]
        nodes.extend((p.value, self._buckets[p]) for p in self._positions)
        nodes.append((_RIGHT_SENTINEL, 0.0))

        total = 0.0
        for (left_pos, left_weight), (right_pos, right_weight) in zip(
            nodes, nodes[1:]
        ):
            if threshold >= right_pos:
                total += left_weight
                logger.debug(
                    "Added bucket %r@%e -> %r", left_weight, left_pos, total
                )
                continue

            if left_pos <= threshold < right_pos:
                total += self._segment_estimate(
                    threshold, left_pos, left_weight, right_pos, right_weight
                )
                logger.debug("Estimate for %r resolved to %r", threshold, total)
                break

        return total

    def _segment_estimate(
        self,
        threshold: float,
        left_pos: float,
        left_weight: float,
        right_pos: float,
        right_weight: float,
    ) -> float:
        """Count contributed by the segment that contains the threshold."""
        width = right_pos - left_pos
        if math.isnan(width) or width == 0.0:
            raise ArithmeticError(
                f"Invalid segment width {width} between {left_pos} and {right_pos}"
            )

        fraction = (threshold - left_pos) / width
        height = left_weight + fraction * (right_weight - left_weight)
        if math.isnan(fraction) or math.isnan(height):
            raise ArithmeticError(
                f"Interpolation between {left_pos} and {right_pos} produced NaN"
            )

        # Trapezoid from the left bucket to the interpolated height at the
        # threshold, plus the half of the left bucket assumed below its centre.
        segment = ((left_weight + height) / 2.0) * fraction
        logger.debug(
            "Segment [%e, %e): fraction=%e height=%e segment=%e left half=%e",
            left_pos,
            right_pos,
            fraction,
            height,
            segment,
            left_weight / 2.0,
        )
        return left_weight / 2.0 + segment

    def _to_centroid(self, value: float) -> Centroid:
        """Validate an observation, logging before rejecting it."""
        try:
            return Centroid(value)
        except ValueError:
            logger.error("Rejected observation %r.", value)
            raise

    def _require_capacity(self) -> None:
        if self._capacity == 0:
            logger.error("Histogram with capacity 0 cannot hold observations.")
            raise ValueError(
                "Histogram capacity is 0; at least one bucket is required"
            )

    def _add_weight(self, position: Centroid, weight: float) -> None:
        """Add weight at position, creating the bucket if needed."""
        if position in self._buckets:
            self._buckets[position] += weight
        else:
            self._buckets[position] = weight
            bisect.insort(self._positions, position)

    def _compress(self) -> None:
        """
        Merge the closest adjacent buckets until within capacity.

        Each step scans every neighbouring pair for the smallest gap, taking
        the leftmost pair on ties, and replaces it with a single bucket at
        the weighted mean holding the summed weight.

        Raises:
            RuntimeError: If over capacity with no adjacent pair to merge.
        """
        while len(self._positions) > self._capacity:
            if len(self._positions) < 2:
                raise RuntimeError(
                    "Could not find a pair of buckets to merge "
                    f"(buckets={len(self._positions)}, capacity={self._capacity})"
                )

            min_idx = 0
            min_gap = self._positions[1] - self._positions[0]
            for i in range(1, len(self._positions) - 1):
                gap = self._positions[i + 1] - self._positions[i]
                if gap < min_gap:
                    min_gap = gap
                    min_idx = i

            left = self._positions[min_idx]
            right = self._positions[min_idx + 1]
            left_weight = self._buckets[left]
            right_weight = self._buckets[right]
            merged_weight = left_weight + right_weight
            merged_position = Centroid(
                _weighted_mean(
                    left.value, left_weight, right.value, right_weight, merged_weight
                )
            )

            del self._buckets[left]
            del self._buckets[right]
            del self._positions[min_idx : min_idx + 2]
            logger.debug(
                "Compressed %r@%r and %r@%r into %r@%r (gap=%r).",
                left_weight,
                left.value,
                right_weight,
                right.value,
                merged_weight,
                merged_position.value,
                min_gap,
            )
            self._add_weight(merged_position, merged_weight)

    def get_buckets(self) -> List[Tuple[float, float]]:
        """
        Return the current buckets as (position, weight) tuples.

        Returns:
            Buckets sorted by ascending position.
        """
        return [(p.value, self._buckets[p]) for p in self._positions]

    def copy(self: HistogramType) -> HistogramType:
        """Return an independent histogram with the same capacity and buckets."""
        duplicate = self.__class__(capacity=self._capacity)
        duplicate._buckets = dict(self._buckets)
        duplicate._positions = list(self._positions)
        duplicate._items_processed = self._items_processed
        return duplicate

    def clear(self) -> None:
        """Remove every bucket while keeping the capacity."""
        super().clear()
        self._buckets = {}
        self._positions = []

    def estimate_size(self) -> int:
        """
        Estimate the memory footprint of the histogram in bytes.

        Returns:
            Estimated size in bytes.
        """
        size = super().estimate_size()
        size += sys.getsizeof(self._buckets)
        size += sys.getsizeof(self._positions)
        for position, weight in self._buckets.items():
            size += sys.getsizeof(position) + sys.getsizeof(position.value)
            size += sys.getsizeof(weight)
        return size

    def error_bounds(self) -> Dict[str, Union[str, float]]:
        """
        Describe the approximation characteristics of this histogram.

        The estimator has no worst-case guarantee; the error depends on how
        far apart the retained buckets are. The largest gap between
        neighbouring buckets bounds the width over which density is
        interpolated.

        Returns:
            A dictionary describing the estimator and its current resolution.
        """
        bounds: Dict[str, Union[str, float]] = {}
        if self.is_empty:
            bounds["state"] = "empty"
            return bounds

        bounds["accuracy_model"] = "piecewise-linear interpolation between buckets"
        bounds["capacity"] = self._capacity
        bounds["actual_buckets"] = len(self._positions)

        if len(self._positions) > 1:
            gaps = [
                self._positions[i + 1] - self._positions[i]
                for i in range(len(self._positions) - 1)
            ]
            bounds["max_bucket_gap"] = max(gaps)
            bounds["min_bucket_gap"] = min(gaps)

        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the histogram.

        Returns:
            A dictionary with capacity usage and bucket weight statistics.
        """
        stats = super().get_stats()
        stats.update(
            {
                "capacity": self._capacity,
                "num_buckets": len(self._positions),
                "utilization": len(self._positions) / max(1, self._capacity),
            }
        )

        if self._positions:
            weights = list(self._buckets.values())
            stats.update(
                {
                    "min_position": self._positions[0].value,
                    "max_position": self._positions[-1].value,
                    "min_weight": min(weights),
                    "max_weight": max(weights),
                    "avg_weight": math.fsum(weights) / len(weights),
                }
            )

        return stats

    def __len__(self) -> int:
        """Return the number of observations recorded directly or by merging."""
        return self._items_processed

    def __repr__(self) -> str:
        buckets = ", ".join(f"({p:.4g}, {w:.4g})" for p, w in self.get_buckets())
        return f"StreamingHistogram(capacity={self._capacity}, buckets=[{buckets}])"
