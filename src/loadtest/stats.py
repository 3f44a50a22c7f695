"""Analyzes and computes latency statistics."""
import logging
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from .constants import BenchmarkConstants
from .models import WindowStats


# Configure logging
logger = logging.getLogger(__name__)

LatencySamples = Union[np.ndarray, Sequence[int]]


class LatencyAnalyzer:
    """Computes windowed aggregates over nanosecond latency buffers."""

    @staticmethod
    def percentiles(ps: Iterable[float], latencies: LatencySamples, skip: int, take: int) -> List[Tuple[float, int]]:
        """
        Rank-based percentiles over latencies[skip:skip+take].

        The window is sorted ascending and each p selects the element at
        floor(len * p), clamped to the last element. No interpolation.

        Args:
            ps: Percentiles as fractions, e.g. 0.95.
            latencies: Latency buffer in nanoseconds.
            skip: First index of the window.
            take: Window length.

        Returns:
            List of (p, value) pairs in the order of ps.
        """
        ordered = np.sort(np.asarray(latencies)[skip:skip + take])
        size = len(ordered)
        if size == 0:
            return [(p, 0) for p in ps]
        return [(p, int(ordered[min(int(size * p), size - 1)])) for p in ps]

    @staticmethod
    def window_stats(
        latencies: LatencySamples,
        i: int,
        n_total: int,
        timeout_ns: int,
        skip: int,
        take: int,
        ps: Sequence[float] = BenchmarkConstants.PERCENTILES,
    ) -> WindowStats:
        """
        Compute aggregate statistics for the window [skip, skip+take).

        Args:
            latencies: Latency buffer in nanoseconds.
            i: Logical position of the report; the mean divides by i - skip.
            n_total: Expected samples of the whole run, used as the
                success-ratio denominator even for interval windows.
            timeout_ns: Samples strictly above this count as timeouts.
            skip: First index of the window.
            take: Window length.
            ps: Percentiles to compute.

        Returns:
            WindowStats for the window.
        """
        window = np.asarray(latencies)[skip:skip + take]
        count = len(window)
        span = i - skip

        total = int(window.sum(dtype=np.uint64)) if count else 0
        mean = total / span if span > 0 else 0.0
        peak = int(window.max()) if count else 0
        timeouts = int(np.count_nonzero(window > timeout_ns))
        if n_total > 0:
            success_ratio = 100.0 - 100.0 * (timeouts / n_total)
        else:
            success_ratio = 100.0

        return WindowStats(
            position=i,
            mean_ns=mean,
            max_ns=peak,
            count=count,
            timeouts=timeouts,
            success_ratio=success_ratio,
            percentiles=tuple(LatencyAnalyzer.percentiles(ps, window, 0, count)),
        )
