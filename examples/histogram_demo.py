"""
Example of estimating cumulative counts with the streaming histogram.

This example builds histograms on separate shards of a simulated latency
stream, merges them into a single summary, and compares the estimated
"how many requests took at most x ms" against the exact answer.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import List

from streaming_quantiles.algorithms.histogram import StreamingHistogram


def generate_latencies(n: int, seed: int) -> List[float]:
    """Simulate request latencies in milliseconds: mostly fast, some slow."""
    rng = random.Random(seed)
    latencies = []
    for _ in range(n):
        if rng.random() < 0.9:
            latencies.append(rng.lognormvariate(3.0, 0.4))
        else:
            latencies.append(rng.uniform(100.0, 500.0))
    return latencies


def demonstrate_single_stream():
    """Feed one stream into a histogram and query a few thresholds."""
    print("\n=== Single Stream Demo ===")

    data = generate_latencies(10000, seed=42)
    histogram = StreamingHistogram(capacity=64)
    for value in data:
        histogram.add(value)

    print(f"Observations: {histogram.items_processed}")
    print(f"Buckets kept: {histogram.bucket_count} / {histogram.capacity}")
    print(f"Approximate memory usage: {histogram.estimate_size()} bytes")

    print(f"\n{'threshold':>10} {'estimate':>10} {'exact':>8} {'error':>8}")
    for threshold in (10.0, 20.0, 30.0, 50.0, 100.0, 250.0, 500.0):
        estimate = histogram.sum(threshold)
        exact = sum(1 for v in data if v <= threshold)
        print(
            f"{threshold:>10.1f} {estimate:>10.1f} {exact:>8d} "
            f"{(estimate - exact) / len(data):>8.2%}"
        )


def demonstrate_sharded_merge():
    """Build one histogram per shard in parallel, then merge them."""
    print("\n=== Sharded Merge Demo ===")

    shards = [generate_latencies(2500, seed=seed) for seed in range(4)]

    with ThreadPoolExecutor(max_workers=len(shards)) as pool:
        partials = list(
            pool.map(
                lambda shard: StreamingHistogram.from_values(shard, capacity=32),
                shards,
            )
        )

    # Each partial is owned by one worker until here; merging is sequential.
    combined = StreamingHistogram(capacity=32)
    for partial in partials:
        combined.merge_from(partial)

    all_values = [v for shard in shards for v in shard]
    print(f"Shards merged: {len(partials)}")
    print(f"Total weight: {combined.total_weight:.0f} (expected {len(all_values)})")

    for threshold in (20.0, 50.0, 200.0):
        exact = sum(1 for v in all_values if v <= threshold)
        print(
            f"  <= {threshold:6.1f} ms: estimate {combined.sum(threshold):8.1f}, "
            f"exact {exact}"
        )

    stats = combined.get_stats()
    print("\nHistogram stats:")
    for key in ("num_buckets", "min_position", "max_position", "max_bucket_gap"):
        print(f"  {key}: {stats[key]}")


def demonstrate_estimator_trace():
    """Show the per-segment estimator trace through the logging module."""
    print("\n=== Estimator Trace Demo ===")

    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    histogram = StreamingHistogram.from_values([1.0, 2.0, 12.0], capacity=5)
    print(f"{histogram!r}")
    print(f"sum(7.0) = {histogram.sum(7.0)}")


if __name__ == "__main__":
    demonstrate_single_stream()
    demonstrate_sharded_merge()
    demonstrate_estimator_trace()
