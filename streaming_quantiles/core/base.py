"""
Base classes and interfaces for streaming-quantiles summaries.

This module defines the abstract base classes that the streaming summaries
implement, so that every summary exposes the same update / query / merge
surface along with a few introspection hooks for monitoring and tuning.
"""

import abc
import sys
from typing import Any, Dict, Generic, TypeVar

T = TypeVar("T")  # Type for the items being processed
R = TypeVar("R")  # Type for the result of queries


class StreamSummary(Generic[T, R], abc.ABC):
    """
    Abstract base class for all streaming data structures.

    A summary is updated one item at a time, queried without being modified,
    and can be merged with another summary of the same type that was built
    from a different part of the stream.
    """

    def __init__(self) -> None:
        """Initialize the counters shared by every summary."""
        self._items_processed = 0

    @abc.abstractmethod
    def update(self, item: T) -> None:
        """
        Update the summary with a new item from the stream.

        Args:
            item: The new item to process.
        """
        self._items_processed += 1

    @abc.abstractmethod
    def query(self, *args: Any, **kwargs: Any) -> R:
        """
        Query the current state of the summary.

        The parameters and return value depend on the specific algorithm.
        """
        pass

    @abc.abstractmethod
    def merge(self, other: "StreamSummary[T, R]") -> "StreamSummary[T, R]":
        """
        Merge this summary with another of the same type.

        Args:
            other: Another stream summary of the same type.

        Returns:
            A new merged stream summary.

        Raises:
            TypeError: If other is not of the same type.
        """
        pass

    def _check_same_type(self, other: "StreamSummary[T, R]") -> None:
        """
        Check that another summary is of the same type as this one.

        Raises:
            TypeError: If other is not of the same type.
        """
        if not isinstance(other, self.__class__):
            raise TypeError(f"Cannot merge with {other.__class__.__name__}")

    def _combine_items_processed(self, other: "StreamSummary[T, R]") -> int:
        """Return the combined count of processed items for a merge."""
        return self._items_processed + other._items_processed

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this summary in bytes.

        This is a rough figure: it accounts for the object and its instance
        dictionary. Derived classes add the size of their own containers.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def clear(self) -> None:
        """
        Reset the summary to its initial empty state.

        Derived classes must override this to clear their own structures and
        call super().clear() so the base counters are reset too.
        """
        self._items_processed = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the summary.

        Derived classes extend the dictionary with algorithm specific entries
        while calling super().get_stats() to include the base ones.

        Returns:
            A dictionary containing statistics about the summary state.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    def error_bounds(self) -> Dict[str, Any]:
        """
        Get the error characteristics of this summary.

        The base implementation returns an empty dictionary.
        """
        return {}

    @property
    def items_processed(self) -> int:
        """Get the total number of items processed by this summary."""
        return self._items_processed


class CumulativeCountEstimator(StreamSummary[float, float], abc.ABC):
    """
    Abstract base class for summaries answering "how many items are <= x".

    Examples include the mergeable streaming histogram.
    """

    @abc.abstractmethod
    def sum(self, threshold: float) -> float:
        """
        Estimate the number of observations at or below a threshold.

        Args:
            threshold: The value to count up to (inclusive).

        Returns:
            The estimated count, possibly fractional.
        """
        pass

    @property
    @abc.abstractmethod
    def total_weight(self) -> float:
        """Total number of observations represented by the summary."""
        pass

    def query(self, threshold: float) -> float:
        """Alias of sum() so the estimator can be queried generically."""
        return self.sum(threshold)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the estimator.

        Returns:
            A dictionary with cumulative-count specific statistics.
        """
        stats = super().get_stats()
        stats["total_weight"] = self.total_weight
        return stats
