"""Map PurpleAir JSON documents onto the canonical Reading.

Each API generation has its own normalizer, selected by the configured
ApiGeneration rather than by inspecting the document. Concentrations that are
missing or non-numeric become None; a missing sensor id or timestamp raises
NormalizationError.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Callable, Dict, Mapping, Optional

import pandas as pd

from purpleair.errors import NormalizationError
from purpleair.models import ApiGeneration, Reading

logger = logging.getLogger(__name__)

AQI_SAMPLE_FIELD = "pm_1"


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number):
        return None
    return float(number)


def _require_id(value: Any, field: str):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise NormalizationError(f"Missing sensor identifier field {field!r}")
    return value


def _require_timestamp(value: Any, field: str) -> int:
    number = _to_float(value)
    if number is None or not math.isfinite(number):
        raise NormalizationError(f"Missing or invalid timestamp field {field!r}: {value!r}")
    return int(number)


def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise NormalizationError(f"Expected {what} to be an object, got {type(value).__name__}")
    return value


def _normalize_legacy_show(document: Mapping[str, Any], base: Optional[Reading]) -> Reading:
    results = document.get("results")
    if not isinstance(results, list) or not results:
        raise NormalizationError("Legacy response has no 'results' entries")
    row = _as_mapping(results[0], "results[0]")
    return Reading(
        sensor_id=_require_id(row.get("ID"), "ID"),
        timestamp=_require_timestamp(row.get("LastSeen"), "LastSeen"),
        pm1_0=_to_float(row.get("pm1_0_atm")),
        pm2_5=_to_float(row.get("pm2_5_atm")),
        pm10_0=_to_float(row.get("pm10_0_atm")),
    )


def _normalize_legacy_data_json(document: Mapping[str, Any], base: Optional[Reading]) -> Reading:
    """Attach the ``pm_1`` AQI sample from a data.json document to `base`.

    data.json carries no identity of its own, so the primary Reading supplies
    sensor id, timestamp and concentrations.
    """
    if base is None:
        raise NormalizationError("legacy data.json normalization needs the primary reading")

    fields = document.get("fields") or []
    data = document.get("data")
    if not isinstance(fields, list) or AQI_SAMPLE_FIELD not in fields:
        logger.warning("data.json response has no %r field; AQI sample unavailable", AQI_SAMPLE_FIELD)
        return replace(base, pm2_5_for_aqi=None)
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        logger.info("data.json response has no data rows; AQI sample unavailable")
        return replace(base, pm2_5_for_aqi=None)

    offset = fields.index(AQI_SAMPLE_FIELD)
    row = data[0]
    sample = _to_float(row[offset]) if offset < len(row) else None
    return replace(base, pm2_5_for_aqi=sample)


def _normalize_api_v1(document: Mapping[str, Any], base: Optional[Reading]) -> Reading:
    sensor = _as_mapping(document.get("sensor"), "'sensor'")
    stats = sensor.get("stats_a")
    sample = _to_float(stats.get("pm2.5_10minute")) if isinstance(stats, Mapping) else None
    return Reading(
        sensor_id=_require_id(sensor.get("sensor_index"), "sensor_index"),
        timestamp=_require_timestamp(sensor.get("last_seen"), "last_seen"),
        pm1_0=_to_float(sensor.get("pm1.0_atm")),
        pm2_5=_to_float(sensor.get("pm2.5_atm")),
        pm10_0=_to_float(sensor.get("pm10.0_atm")),
        pm2_5_for_aqi=sample,
    )


_NORMALIZERS: Dict[ApiGeneration, Callable[[Mapping[str, Any], Optional[Reading]], Reading]] = {
    ApiGeneration.LEGACY_SHOW: _normalize_legacy_show,
    ApiGeneration.LEGACY_DATA_JSON: _normalize_legacy_data_json,
    ApiGeneration.API_V1: _normalize_api_v1,
}


def normalize(generation: ApiGeneration, document: Any, base: Optional[Reading] = None) -> Reading:
    """Normalize one API response document into a Reading.

    Args:
        generation: API generation the document was fetched from
        document: Parsed JSON document
        base: Reading from the primary fetch (required for LEGACY_DATA_JSON)

    Returns:
        A new, immutable Reading

    Raises:
        NormalizationError: If the document lacks the sensor id or timestamp
    """
    document = _as_mapping(document, f"{generation.value} response")
    return _NORMALIZERS[generation](document, base)
