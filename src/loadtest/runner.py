"""Benchmark runner: command line parsing and run orchestration."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from src.const import APP_NAME, EXIT_OK, EXIT_RUN_FAILED, EXIT_USAGE, USAGE
from src.shared.config import Config
from src.shared.logging import LoggingManager
from .coordinator import Coordinator
from .exceptions import BenchmarkError, ConfigError
from .models import RunConfig, RunResult
from .reporter import Reporter
from .result_exporter import ResultExporter
from .virtual_user import SessionFactory, default_session_factory


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Load test a batched prediction endpoint with concurrent virtual users",
    )
    parser.add_argument("endpoint", help="Service address, e.g. http://host:port")
    parser.add_argument("users", type=int, help="Number of concurrent virtual users")
    parser.add_argument("batch_size", type=int, help="Feature records per request")
    parser.add_argument("iterations", type=int, help="Measured iterations per user")
    parser.add_argument("timeout_ms", type=int, help="Latency above which a sample counts as a timeout")
    parser.add_argument("--output", type=Path, default=None, help="Directory for samples.csv and summary.csv")
    parser.add_argument("--log-level", default=None, help="Logging level (overrides CB_BENCH_LOG_LEVEL)")
    return parser


def parse_config(args: argparse.Namespace) -> RunConfig:
    return RunConfig.build(
        endpoint=args.endpoint,
        users=args.users,
        batch_size=args.batch_size,
        iterations=args.iterations,
        timeout_ms=args.timeout_ms,
    )


def load_settings() -> Config:
    """Load settings, raising ConfigError when a value is out of range."""
    try:
        return Config()
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


class BenchmarkRunner:
    """Orchestrates one benchmark run and its optional export."""

    def __init__(
        self,
        config: RunConfig,
        settings: Optional[Config] = None,
        reporter: Optional[Reporter] = None,
        output_dir: Optional[Path] = None,
        session_factory: SessionFactory = default_session_factory,
    ):
        self.config = config
        self.settings = settings or Config()
        self.reporter = reporter or Reporter()
        self.output_dir = output_dir
        self.coordinator = Coordinator(config, self.settings, self.reporter, session_factory)

    def run(self) -> RunResult:
        """Run the benchmark, then export results when an output directory is set."""
        self.reporter.banner(self.config)
        result = self.coordinator.run()
        if self.output_dir is not None:
            ResultExporter.save(result, self.config, self.output_dir)
        logger.info("Benchmark completed successfully!")
        return result


def main(
    argv: Optional[List[str]] = None,
    settings: Optional[Config] = None,
    reporter: Optional[Reporter] = None,
    session_factory: SessionFactory = default_session_factory,
) -> int:
    """Entry point for the cb-client command; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings or load_settings()
        config = parse_config(args)
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        print(f"{USAGE}\n{e}", file=sys.stderr)
        return EXIT_USAGE

    LoggingManager.setup_logging(args.log_level or settings.log_level, settings)

    runner = BenchmarkRunner(
        config,
        settings=settings,
        reporter=reporter,
        output_dir=args.output,
        session_factory=session_factory,
    )
    try:
        runner.run()
    except BenchmarkError as e:
        logger.error(f"Benchmark failed: {e}")
        return EXIT_RUN_FAILED
    return EXIT_OK
