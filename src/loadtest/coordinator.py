"""Runs virtual users concurrently and merges their metrics."""
import logging
import threading
import time
import concurrent.futures
from typing import Dict, Optional

from src.shared.config import Config
from .constants import BenchmarkConstants
from .exceptions import BenchmarkAbortedError
from .models import Metrics, RunConfig, RunResult
from .reporter import Reporter
from .virtual_user import SessionFactory, VirtualUser, default_session_factory


# Configure logging
logger = logging.getLogger(__name__)


class Coordinator:
    """Spawns one thread per virtual user and collects their Metrics."""

    def __init__(
        self,
        config: RunConfig,
        settings: Optional[Config] = None,
        reporter: Optional[Reporter] = None,
        session_factory: SessionFactory = default_session_factory,
    ):
        self.config = config
        self.settings = settings or Config()
        self.reporter = reporter or Reporter()
        self.session_factory = session_factory
        self.abort_event: Optional[threading.Event] = None

    def _run_user(self, user_id: str) -> Metrics:
        """Task body: run one user, print its own report, hand back its Metrics."""
        logger.info(f"Starting {user_id}")
        user = VirtualUser(
            user_id,
            self.config,
            self.settings,
            self.reporter,
            session_factory=self.session_factory,
            abort_event=self.abort_event,
        )
        metrics = user.execute()
        self.reporter.final(user_id, 1, self.config, metrics)
        return metrics

    def run(self) -> RunResult:
        """
        Run all users and print the aggregate report.

        The futures are the fan-in channel: exactly one Metrics value or one
        error arrives per user. The first error stops the remaining users
        and is re-raised without printing the aggregate report.

        Returns:
            RunResult with per-user and merged Metrics.

        Raises:
            TransportError: The first transport failure of any user.
        """
        users = self.config.users
        labels = [BenchmarkConstants.USER_LABEL_FORMAT.format(u) for u in range(users)]
        per_user: Dict[str, Metrics] = {}
        failure: Optional[BaseException] = None
        self.abort_event = threading.Event()

        start = time.perf_counter()
        with concurrent.futures.ThreadPoolExecutor(max_workers=users, thread_name_prefix="vuser") as executor:
            futures = {executor.submit(self._run_user, label): label for label in labels}
            for future in concurrent.futures.as_completed(futures):
                label = futures[future]
                try:
                    per_user[label] = future.result()
                except BenchmarkAbortedError:
                    logger.info(f"{label} aborted")
                except Exception as e:
                    if failure is None:
                        logger.error(f"{label} failed, aborting run: {e}")
                        failure = e
                        self.abort_event.set()
                    else:
                        logger.error(f"{label} also failed: {e}")

        if failure is not None:
            raise failure

        merged = Metrics.merge(list(per_user.values()), time.perf_counter() - start)
        logger.info(f"Collected metrics from {len(per_user)} users, {len(merged)} samples")

        time.sleep(self.settings.settle_delay_seconds)
        self.reporter.final(BenchmarkConstants.TOTAL_TITLE, users, self.config, merged)
        return RunResult(per_user=per_user, merged=merged)
