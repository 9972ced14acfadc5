"""Configuration module for the PurpleAir ingest pipeline.

Loads environment variables (optionally from a `.env` file), defines retry and
sink tuning, and builds the validated `PipelineConfig` consumed by each run.
Nothing here touches the network; credentials are only checked when a config
is built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from purpleair.errors import ConfigError
from purpleair.models import ApiGeneration

load_dotenv()

# Sensor identity and credentials
SENSOR_ID = os.getenv("PURPLEAIR_SENSOR_ID")
API_GENERATION = os.getenv("PURPLEAIR_API_GENERATION", "legacy_show")
READ_KEY = os.getenv("PURPLEAIR_READ_KEY")  # API v1 only
DATA_KEY = os.getenv("PURPLEAIR_DATA_KEY")  # legacy data.json only

# Endpoints
LEGACY_URL = os.getenv("PURPLEAIR_LEGACY_URL", "https://www.purpleair.com")
API_URL = os.getenv("PURPLEAIR_API_URL", "https://api.purpleair.com")

# HTTP and retry tuning
PURPLEAIR_TIMEOUT = int(os.getenv("PURPLEAIR_TIMEOUT", "30"))
PURPLEAIR_RETRIES = int(os.getenv("PURPLEAIR_RETRIES", "5"))
PRIMARY_BACKOFF = float(os.getenv("PURPLEAIR_PRIMARY_BACKOFF", "0"))
# data.json is rate limited upstream, so its retries wait longer
SECONDARY_BACKOFF = float(os.getenv("PURPLEAIR_SECONDARY_BACKOFF", "5"))
RETRY_MAX_WAIT = int(os.getenv("PURPLEAIR_RETRY_MAX_WAIT", "60"))
FETCH_DEADLINE = float(os.getenv("PURPLEAIR_FETCH_DEADLINE", "300"))

# Time-series sink
SINK = os.getenv("PURPLEAIR_SINK", "influx")
INFLUX_HOST = os.getenv("INFLUX_HOST", "localhost")
INFLUX_PORT = int(os.getenv("INFLUX_PORT", "8086"))
INFLUX_DATABASE = os.getenv("INFLUX_DATABASE", "purpleair")
CSV_PATH = Path(os.getenv("PURPLEAIR_CSV_PATH", "data/purpleair_points.csv")).expanduser()

# Exit policy: by default handled failures still exit 0
STRICT_EXIT = str(os.getenv("PURPLEAIR_STRICT_EXIT", "")).lower() in ("1", "true", "yes")

LOG_FILE = os.getenv("LOG_FILE", str(Path.home() / ".log" / "purpleair.log"))

_SINKS = ("influx", "csv")


@dataclass(frozen=True)
class PipelineConfig:
    sensor_id: str
    api_generation: ApiGeneration = ApiGeneration.LEGACY_SHOW
    read_key: Optional[str] = None
    data_key: Optional[str] = None

    legacy_url: str = LEGACY_URL
    api_url: str = API_URL

    timeout: int = PURPLEAIR_TIMEOUT
    max_retries: int = PURPLEAIR_RETRIES
    primary_backoff: float = PRIMARY_BACKOFF
    secondary_backoff: float = SECONDARY_BACKOFF
    retry_max_wait: int = RETRY_MAX_WAIT
    fetch_deadline: Optional[float] = FETCH_DEADLINE

    sink: str = SINK
    influx_host: str = INFLUX_HOST
    influx_port: int = INFLUX_PORT
    influx_database: str = INFLUX_DATABASE
    csv_path: Path = CSV_PATH

    dry_run: bool = False
    strict_exit: bool = STRICT_EXIT

    def __post_init__(self) -> None:
        if not self.sensor_id:
            raise ConfigError("Missing PURPLEAIR_SENSOR_ID in environment")
        if self.api_generation is ApiGeneration.LEGACY_DATA_JSON:
            raise ConfigError(
                "legacy_data_json only supplies the AQI sample; "
                "configure legacy_show with PURPLEAIR_DATA_KEY instead"
            )
        if self.api_generation is ApiGeneration.API_V1 and not self.read_key:
            raise ConfigError("Missing PURPLEAIR_READ_KEY for the v1 API")
        if self.sink not in _SINKS:
            raise ConfigError(f"Unknown sink {self.sink!r}; expected one of {_SINKS}")
        if self.max_retries < 0:
            raise ConfigError("PURPLEAIR_RETRIES must be >= 0")

    @property
    def primary_generation(self) -> ApiGeneration:
        return self.api_generation

    @property
    def secondary_generation(self) -> Optional[ApiGeneration]:
        """Generation of the AQI-sample endpoint, if this setup polls one."""
        if self.api_generation is ApiGeneration.LEGACY_SHOW and self.data_key:
            return ApiGeneration.LEGACY_DATA_JSON
        return None

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """Build a config from module-level settings, applying keyword overrides.

        Raises:
            ConfigError: If a required credential is missing or a value is invalid
        """
        try:
            generation = ApiGeneration.parse(API_GENERATION)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        base = dict(
            sensor_id=SENSOR_ID,
            api_generation=generation,
            read_key=READ_KEY,
            data_key=DATA_KEY,
        )
        base.update(overrides)
        return cls(**base)
