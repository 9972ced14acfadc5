"""Pandera schema for time-series points written by the file sink."""

from __future__ import annotations

import pandera as pa
from pandera import Check, Column, DataFrameSchema

SERIES_NAMES = ["pm10_0_atm", "pm2_5_atm", "pm1_0_atm", "aqi"]

schema_points = DataFrameSchema(
    {
        "series": Column(pa.String, Check.isin(SERIES_NAMES)),
        "value": Column(pa.Float, nullable=False),
        "id": Column(pa.String, Check.str_length(min_value=1)),
        "timestamp": Column(pa.Int, Check.ge(0)),
    },
    strict=True,
    ordered=True,
)
