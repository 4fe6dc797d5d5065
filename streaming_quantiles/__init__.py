"""
streaming-quantiles - Mergeable Streaming Histograms

streaming-quantiles is a Python library for estimating cumulative counts over
unbounded data streams with bounded memory, using histograms that can be
built on separate shards and merged afterwards.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from streaming_quantiles.algorithms.histogram import StreamingHistogram
from streaming_quantiles.core.base import CumulativeCountEstimator, StreamSummary
from streaming_quantiles.core.centroid import Centroid

__all__ = [
    # Core base classes
    "StreamSummary",
    "CumulativeCountEstimator",
    "Centroid",
    # Algorithm implementations
    "StreamingHistogram",
]
