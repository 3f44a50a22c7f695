"""Handles exporting benchmark results to CSV."""
import logging
from pathlib import Path
from typing import Union

import pandas as pd

from .constants import BenchmarkConstants
from .models import RunConfig, RunResult
from .stats import LatencyAnalyzer


# Configure logging
logger = logging.getLogger(__name__)

SAMPLES_FILE = "samples.csv"
SUMMARY_FILE = "summary.csv"


class ResultExporter:
    """Writes raw samples and per-user summaries of a completed run."""

    @staticmethod
    def samples_frame(result: RunResult) -> pd.DataFrame:
        """One row per buffer slot, the zero sentinel at iteration 0 included."""
        frames = [
            pd.DataFrame({
                'user': user_id,
                'iteration': range(len(metrics.latencies)),
                'latency_ns': metrics.latencies,
                'model_latency_ns': metrics.model_latencies,
            })
            for user_id, metrics in result.per_user.items()
        ]
        if not frames:
            return pd.DataFrame(columns=['user', 'iteration', 'latency_ns', 'model_latency_ns'])
        return pd.concat(frames, ignore_index=True)

    @staticmethod
    def summary_frame(result: RunResult, config: RunConfig) -> pd.DataFrame:
        """
        Summarise each user and the merged run.

        Args:
            result: Completed run.
            config: Parameters the run used.

        Returns:
            DataFrame with one row per (user, source) pair.
        """
        rows = []
        entries = [(user_id, 1, metrics) for user_id, metrics in result.per_user.items()]
        entries.append((BenchmarkConstants.TOTAL_TITLE.strip(), config.users, result.merged))

        for user_id, users, metrics in entries:
            total = users * config.iterations
            for source, buffer in (('model', metrics.model_latencies), ('round_trip', metrics.latencies)):
                stats = LatencyAnalyzer.window_stats(buffer, total, total, config.timeout_ns, 0, total)
                row = {
                    'user': user_id,
                    'source': source,
                    'count': stats.count,
                    'mean_ms': stats.mean_ns / BenchmarkConstants.NANOS_PER_MILLI,
                    'max_ms': stats.max_ns / BenchmarkConstants.NANOS_PER_MILLI,
                    'timeouts': stats.timeouts,
                    'success_ratio': stats.success_ratio,
                    'total_secs': metrics.total_secs,
                }
                for p, value in stats.percentiles:
                    row[f'p{100.0 * p:.1f}_ms'] = value / BenchmarkConstants.NANOS_PER_MILLI
                rows.append(row)

        return pd.DataFrame(rows)

    @staticmethod
    def save(result: RunResult, config: RunConfig, output_dir: Union[Path, str]) -> None:
        """Save samples.csv and summary.csv into output_dir."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        samples_path = output_dir / SAMPLES_FILE
        ResultExporter.samples_frame(result).to_csv(samples_path, index=False)
        logger.info(f"Samples saved to CSV: {samples_path}")

        summary_path = output_dir / SUMMARY_FILE
        ResultExporter.summary_frame(result, config).to_csv(summary_path, index=False)
        logger.info(f"Summary saved to CSV: {summary_path}")
