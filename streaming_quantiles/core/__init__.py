"""
Core functionality for streaming-quantiles.
"""

from streaming_quantiles.core.base import CumulativeCountEstimator, StreamSummary
from streaming_quantiles.core.centroid import Centroid

__all__ = [
    # Base classes
    "StreamSummary",
    "CumulativeCountEstimator",
    # Ordered positions
    "Centroid",
]
