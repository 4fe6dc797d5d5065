"""
Algorithm implementations for streaming-quantiles.
"""

from streaming_quantiles.algorithms.histogram import StreamingHistogram

__all__ = [
    "StreamingHistogram",
]
