"""Formats window statistics into console report lines."""
import sys
import threading
from typing import Optional, TextIO

from src.const import RULE_WIDTH, USAGE
from .constants import BenchmarkConstants
from .models import Metrics, RunConfig, WindowStats
from .stats import LatencyAnalyzer


def _ms(value_ns: float) -> float:
    return value_ns / BenchmarkConstants.NANOS_PER_MILLI


class Reporter:
    """Prints interval and final reports.

    Several virtual users share one Reporter, so every block is written
    while holding a lock.
    """

    DASH_RULE = "-" * RULE_WIDTH
    EQUALS_RULE = "=" * RULE_WIDTH
    REPORT_RULE = "REPORT " + "=" * (RULE_WIDTH - len("REPORT "))

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so a redirected sys.stdout is honoured.
        return self._stream if self._stream is not None else sys.stdout

    @staticmethod
    def format_line(title: str, stats: WindowStats, secs: float) -> str:
        """Render one fixed-width statistics line."""
        throughput = stats.count / secs if secs > 0 else 0.0
        percentiles = " ".join(
            f"p{100.0 * p:2.1f}={_ms(value):1.3f}ms" for p, value in stats.percentiles
        )
        return (
            f"{title}: {stats.position} Mean={_ms(stats.mean_ns):1.3f}ms Max={_ms(stats.max_ns):1.3f}ms "
            f"Count={stats.count:>7} Req/s={throughput:04.0f} Timeouts={stats.timeouts:03d} "
            f"Succ={stats.success_ratio:05.3f}% {percentiles}"
        )

    def _write_block(self, *lines: str) -> None:
        with self._lock:
            self.stream.write("\n".join(lines) + "\n")
            self.stream.flush()

    def banner(self, config: RunConfig) -> None:
        self._write_block(
            self.EQUALS_RULE,
            USAGE,
            f"Host:{config.endpoint} Users:{config.users} BatchSize:{config.batch_size} "
            f"Iterations:{config.iterations} Timeout:{config.timeout_ms}",
            self.EQUALS_RULE,
        )

    def interval(self, title: str, model_stats: WindowStats, stats: WindowStats, secs: float) -> None:
        """Print an interval block: reported-internal line first, then round-trip."""
        self._write_block(
            self.DASH_RULE,
            self.format_line(BenchmarkConstants.MODEL_TITLE, model_stats, secs),
            self.format_line(title, stats, secs),
            self.DASH_RULE,
        )

    def final(self, title: str, users: int, config: RunConfig, metrics: Metrics) -> None:
        """Print a final report over users * iterations samples of metrics."""
        total = users * config.iterations
        model_stats = LatencyAnalyzer.window_stats(
            metrics.model_latencies, total, total, config.timeout_ns, 0, total
        )
        stats = LatencyAnalyzer.window_stats(
            metrics.latencies, total, total, config.timeout_ns, 0, total
        )
        self._write_block(
            self.REPORT_RULE,
            self.format_line(BenchmarkConstants.MODEL_TITLE, model_stats, metrics.total_secs),
            self.format_line(title, stats, metrics.total_secs),
            self.EQUALS_RULE,
        )
