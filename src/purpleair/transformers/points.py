"""Assemble time-series Points from a normalized Reading."""

from __future__ import annotations

import logging
from typing import List, Sequence

import pandas as pd

from purpleair.models import (
    SERIES_AQI,
    SERIES_PM1_0,
    SERIES_PM2_5,
    SERIES_PM10_0,
    Point,
    Reading,
)
from purpleair.transformers.calculate_aqi import NOT_COMPUTABLE, aqi_from_pm

logger = logging.getLogger(__name__)

POINT_COLUMNS = ["series", "value", "id", "timestamp"]


def build_points(reading: Reading, log: logging.Logger | logging.LoggerAdapter | None = None) -> List[Point]:
    """Build the point set for one reading.

    Concentration points are emitted for each channel present. The AQI point
    is only emitted when an AQI sample exists and converts to a real value.
    All points share the reading's tags and timestamp.
    """
    log = log or logger
    tags = {"id": reading.sensor_id}
    points = [
        Point(series=series, value=value, tags=dict(tags), timestamp=reading.timestamp)
        for series, value in (
            (SERIES_PM10_0, reading.pm10_0),
            (SERIES_PM2_5, reading.pm2_5),
            (SERIES_PM1_0, reading.pm1_0),
        )
        if value is not None
    ]

    if reading.pm2_5_for_aqi is None:
        log.info("No AQI sample for sensor %s; skipping aqi point", reading.sensor_id)
        return points

    aqi = aqi_from_pm(reading.pm2_5_for_aqi)
    # negative samples pass through unconverted, even -1
    if aqi == NOT_COMPUTABLE and not reading.pm2_5_for_aqi < 0:
        log.warning("AQI not computable from pm2.5 sample %r", reading.pm2_5_for_aqi)
        return points

    points.append(Point(series=SERIES_AQI, value=float(aqi), tags=dict(tags), timestamp=reading.timestamp))
    return points


def points_to_frame(points: Sequence[Point]) -> pd.DataFrame:
    """Flatten points into one row per point with an ``id`` tag column."""
    if not points:
        return pd.DataFrame(columns=POINT_COLUMNS)
    return pd.DataFrame(
        [
            {
                "series": p.series,
                "value": float(p.value),
                "id": str(p.tags.get("id")),
                "timestamp": int(p.timestamp),
            }
            for p in points
        ],
        columns=POINT_COLUMNS,
    )
