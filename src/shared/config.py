import json
from pathlib import Path
from typing import Dict, Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.const import CONFIG_FILE_NAME, DEFAULT_LOG_LEVEL, LIBRARY_LOG_LEVELS


class Config(BaseSettings):
    """Global settings for the inference benchmark harness."""

    predict_path: str = "/predict"
    warmup_calls: int = Field(default=10, ge=0)
    report_interval: int = Field(default=100000, gt=0)
    settle_delay_seconds: float = Field(default=1.0, ge=0)
    request_timeout: Optional[float] = Field(default=None, gt=0)
    log_level: str = DEFAULT_LOG_LEVEL
    library_log_levels: Dict[str, str] = dict(LIBRARY_LOG_LEVELS)

    model_config = SettingsConfigDict(
        env_prefix='CB_BENCH_',
    )

    @classmethod
    def load_config_from_json(cls) -> Dict[str, Any]:
        """Load configuration from the cb_bench.json file."""
        config_path = Path(CONFIG_FILE_NAME)
        if config_path.exists():
            with open(config_path, 'r') as f:
                return json.load(f)
        return {}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        Customise the sources for settings.

        Order of precedence (highest to lowest):
        1. Environment variables
        2. Init settings (kwargs passed to constructor)
        3. JSON config file
        4. Default values
        """
        def json_source():
            return cls.load_config_from_json()

        return (
            env_settings,
            init_settings,
            json_source,
        )
