"""Constants for the benchmarking system."""
from typing import Dict, Tuple, Union


class BenchmarkConstants:
    """Centralized constants for benchmark configuration."""
    PERCENTILES: Tuple[float, ...] = (0.95, 0.99, 0.999)
    USER_LABEL_FORMAT = "User{:02d}"
    MODEL_TITLE = ">Model"
    TOTAL_TITLE = "TEST  "
    NANOS_PER_MILLI = 1_000_000

    # Fixed feature record sent B times in every request
    FEATURE_RECORD: Dict[str, Union[float, str]] = {
        "float_feature1": 0.55,
        "float_feature2": 0.33,
        "cat_feature1": "A",
        "cat_feature2": "B",
        "cat_feature3": "C",
    }
