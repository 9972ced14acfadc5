"""InfluxDB sink for PurpleAir time-series points."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import config
from purpleair.models import Point

logger = logging.getLogger(__name__)


def to_influx_points(points: Sequence[Point]) -> List[Dict[str, Any]]:
    """Convert points to the dict shape accepted by ``InfluxDBClient.write_points``."""
    return [
        {
            "measurement": p.series,
            "tags": dict(p.tags),
            "time": p.timestamp,
            "fields": {"value": float(p.value)},
        }
        for p in points
    ]


def make_influx_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    database: Optional[str] = None,
):
    """Create an InfluxDB client for the configured database.

    The `influxdb` package is imported lazily so that dry runs, tests and the
    CSV sink do not need it installed.

    Raises:
        ImportError: If the influxdb package is not installed
    """
    try:
        from influxdb import InfluxDBClient
    except ImportError as exc:  # pragma: no cover - helpful runtime message
        raise ImportError(
            "The 'influxdb' package is required for the influx sink. "
            "Install it with `pip install purpleair-ingest[influx]` or set PURPLEAIR_SINK=csv."
        ) from exc

    return InfluxDBClient(
        host=host or config.INFLUX_HOST,
        port=port or config.INFLUX_PORT,
        database=database or config.INFLUX_DATABASE,
    )


class InfluxSink:
    """Time-series sink writing points to InfluxDB with second precision."""

    def __init__(self, client=None, **client_kwargs):
        self._client = client
        self._client_kwargs = client_kwargs

    @property
    def client(self):
        if self._client is None:
            self._client = make_influx_client(**self._client_kwargs)
        return self._client

    def write_points(self, points: Sequence[Point]) -> None:
        body = to_influx_points(points)
        self.client.write_points(body, time_precision="s")
        logger.info("Wrote %d points to InfluxDB", len(body))
