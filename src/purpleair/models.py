"""Canonical data types shared across the ingest pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

SensorId = Union[str, int]

SERIES_PM10_0 = "pm10_0_atm"
SERIES_PM2_5 = "pm2_5_atm"
SERIES_PM1_0 = "pm1_0_atm"
SERIES_AQI = "aqi"


class ApiGeneration(Enum):
    """Upstream API generation; selects the normalizer for a document."""

    LEGACY_SHOW = "legacy_show"
    LEGACY_DATA_JSON = "legacy_data_json"
    API_V1 = "api_v1"

    @classmethod
    def parse(cls, value: str) -> "ApiGeneration":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(g.value for g in cls)
            raise ValueError(f"Unknown API generation {value!r}; expected one of: {choices}")


@dataclass(frozen=True)
class Reading:
    """One normalized sensor reading, built fresh per poll cycle."""

    sensor_id: SensorId
    timestamp: int
    pm1_0: Optional[float] = None
    pm2_5: Optional[float] = None
    pm10_0: Optional[float] = None
    pm2_5_for_aqi: Optional[float] = None


@dataclass(frozen=True)
class Point:
    series: str
    value: float
    tags: Dict[str, SensorId]
    timestamp: int


@dataclass(frozen=True)
class Outcome:
    """Result of one sensor reading cycle."""

    success: bool
    reason: Optional[str] = None
    points: Tuple[Point, ...] = field(default_factory=tuple)
    written: bool = False

    @classmethod
    def ok(cls, points, written: bool) -> "Outcome":
        return cls(success=True, points=tuple(points), written=written)

    @classmethod
    def failure(cls, reason: str) -> "Outcome":
        return cls(success=False, reason=reason)
