"""Data models for the benchmarking system."""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import BenchmarkConstants
from .exceptions import ConfigError


class RunConfig(BaseModel):
    """Immutable parameters of one benchmark run."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(min_length=1)
    users: int = Field(default=1, ge=1)
    batch_size: int = Field(ge=1)
    iterations: int = Field(ge=1)
    timeout_ms: int = Field(gt=0)

    @classmethod
    def build(cls, **values) -> "RunConfig":
        """Validate values into a RunConfig, raising ConfigError on failure."""
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigError(f"Invalid benchmark arguments: {problems}") from e

    @property
    def timeout_ns(self) -> int:
        return self.timeout_ms * BenchmarkConstants.NANOS_PER_MILLI


@dataclass(frozen=True)
class PredictResult:
    """Decoded response of one prediction call."""
    predictions: List[float]
    model_latency_ns: int


def new_latency_buffer(length: int) -> np.ndarray:
    """Allocate a zeroed buffer of nanosecond samples."""
    return np.zeros(length, dtype=np.uint64)


@dataclass(frozen=True)
class Metrics:
    """Latency buffers and elapsed seconds produced by one run."""
    latencies: np.ndarray
    model_latencies: np.ndarray
    total_secs: float = 0.0

    @classmethod
    def merge(cls, parts: Sequence["Metrics"], total_secs: float) -> "Metrics":
        """Concatenate the buffers of several runs in the given order."""
        if not parts:
            return cls(new_latency_buffer(0), new_latency_buffer(0), total_secs)
        return cls(
            latencies=np.concatenate([m.latencies for m in parts]),
            model_latencies=np.concatenate([m.model_latencies for m in parts]),
            total_secs=total_secs,
        )

    def __len__(self) -> int:
        return len(self.latencies)


@dataclass(frozen=True)
class WindowStats:
    """Aggregate statistics over one window of a latency buffer."""
    position: int
    mean_ns: float
    max_ns: int
    count: int
    timeouts: int
    success_ratio: float
    percentiles: Tuple[Tuple[float, int], ...]

    def percentile(self, p: float) -> int:
        for q, value in self.percentiles:
            if q == p:
                return value
        raise KeyError(p)


@dataclass
class RunResult:
    """Per-user metrics and their merged aggregate."""
    per_user: Dict[str, Metrics] = field(default_factory=dict)
    merged: Metrics = field(default_factory=lambda: Metrics.merge([], 0.0))
