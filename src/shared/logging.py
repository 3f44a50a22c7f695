import logging
import sys
from typing import Optional

from src.const import LOG_FORMAT, LOG_DATE_FORMAT, LOG_HANDLER_NAME
from .config import Config


class LoggingManager:
    """Manager for logging setup and logger retrieval."""

    @classmethod
    def setup_logging(cls, level: str = "INFO", config: Optional[Config] = None) -> None:
        """Setup logging for the benchmark harness.

        Log records go to stderr so they never interleave with the reports
        printed on stdout. Calling this again replaces the previous handler.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            config: Settings carrying library log levels; loaded when omitted
        """
        # Convert string level to logging level
        numeric_level = getattr(logging, level.upper(), logging.INFO)

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.set_name(LOG_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(numeric_level)

        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            if handler.get_name() == LOG_HANDLER_NAME:
                root_logger.removeHandler(handler)
        root_logger.setLevel(numeric_level)
        root_logger.addHandler(console_handler)

        # Set levels for noisy libraries
        config = config or Config()
        for logger_name, lib_level in config.library_log_levels.items():
            logging.getLogger(logger_name).setLevel(getattr(logging, lib_level.upper(), logging.WARNING))

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger instance.

        Args:
            name: Logger name, typically __name__

        Returns:
            Configured logger instance
        """
        return logging.getLogger(name)
