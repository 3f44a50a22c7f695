"""Load test package initialization."""
from .models import RunConfig, PredictResult, Metrics, WindowStats, RunResult
from .constants import BenchmarkConstants
from .exceptions import BenchmarkError, ConfigError, TransportError, BenchmarkAbortedError
from .session import ConnectionSession
from .stats import LatencyAnalyzer
from .reporter import Reporter
from .virtual_user import VirtualUser
from .coordinator import Coordinator
from .result_exporter import ResultExporter
from .runner import BenchmarkRunner, main

__all__ = [
    'RunConfig',
    'PredictResult',
    'Metrics',
    'WindowStats',
    'RunResult',
    'BenchmarkConstants',
    'BenchmarkError',
    'ConfigError',
    'TransportError',
    'BenchmarkAbortedError',
    'ConnectionSession',
    'LatencyAnalyzer',
    'Reporter',
    'VirtualUser',
    'Coordinator',
    'ResultExporter',
    'BenchmarkRunner',
    'main'
]
