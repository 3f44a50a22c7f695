"""One simulated client running a warmup and a measurement campaign."""
import logging
import threading
import time
from typing import Callable, Optional

from src.shared.config import Config
from .exceptions import BenchmarkAbortedError
from .models import Metrics, RunConfig, new_latency_buffer
from .reporter import Reporter
from .session import ConnectionSession
from .stats import LatencyAnalyzer


# Configure logging
logger = logging.getLogger(__name__)

SessionFactory = Callable[[RunConfig, Config], ConnectionSession]


def default_session_factory(config: RunConfig, settings: Config) -> ConnectionSession:
    return ConnectionSession(
        config.endpoint,
        config.batch_size,
        predict_path=settings.predict_path,
        request_timeout=settings.request_timeout,
    )


class VirtualUser:
    """Runs one measurement campaign over its own connection."""

    def __init__(
        self,
        user_id: str,
        config: RunConfig,
        settings: Config,
        reporter: Reporter,
        session_factory: SessionFactory = default_session_factory,
        abort_event: Optional[threading.Event] = None,
    ):
        self.user_id = user_id
        self.config = config
        self.settings = settings
        self.reporter = reporter
        self.session_factory = session_factory
        self.abort_event = abort_event or threading.Event()

    def _check_abort(self) -> None:
        if self.abort_event.is_set():
            raise BenchmarkAbortedError(f"{self.user_id} stopped after another user failed")

    def execute(self) -> Metrics:
        """
        Warm up, then measure iterations 1..N-1.

        Slot 0 of both buffers is never written and stays zero.

        Returns:
            Metrics with both buffers and the summed duration of completed
            report intervals.

        Raises:
            TransportError: On any failed call, warmup included.
            BenchmarkAbortedError: If the abort event is set mid-run.
        """
        n = self.config.iterations
        interval = self.settings.report_interval
        timeout_ns = self.config.timeout_ns

        with self.session_factory(self.config, self.settings) as session:
            for _ in range(self.settings.warmup_calls):
                self._check_abort()
                session.send()
            logger.debug(f"{self.user_id} finished {self.settings.warmup_calls} warmup calls")

            latencies = new_latency_buffer(n)
            model_latencies = new_latency_buffer(n)
            total_secs = 0.0
            report_start = time.perf_counter()

            for i in range(1, n):
                self._check_abort()
                start = time.perf_counter_ns()
                result = session.send()
                latencies[i] = time.perf_counter_ns() - start
                model_latencies[i] = result.model_latency_ns

                if i % interval == 0:
                    secs = time.perf_counter() - report_start
                    skip = i - interval
                    self.reporter.interval(
                        self.user_id,
                        LatencyAnalyzer.window_stats(model_latencies, i, n, timeout_ns, skip, interval),
                        LatencyAnalyzer.window_stats(latencies, i, n, timeout_ns, skip, interval),
                        secs,
                    )
                    total_secs += secs
                    report_start = time.perf_counter()

        return Metrics(latencies=latencies, model_latencies=model_latencies, total_secs=total_secs)
