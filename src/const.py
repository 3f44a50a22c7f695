"""Constants for the inference benchmark harness."""

# Application
APP_NAME = "cb-client"
CONFIG_FILE_NAME = "cb_bench.json"

# Logging configuration
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_HANDLER_NAME = "cb_bench_console"

# Library log levels
LIBRARY_LOG_LEVELS = {
    "urllib3": "WARNING",
    "requests": "WARNING",
}

# HTTP headers
CONTENT_TYPE_HEADER = "content-type"
CONTENT_TYPE_JSON = "application/json"

# Request/Response field names
FEATURES_FIELD = "features"
PREDICTIONS_FIELD = "predictions"
MODEL_LATENCY_FIELD = "model_latency"

# Process exit codes
EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_USAGE = 2

# Console output
USAGE = "Usage: cb-client http://host:port users batch_size iterations timeout_ms"
RULE_WIDTH = 152
