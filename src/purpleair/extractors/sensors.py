"""PurpleAir sensor endpoint extraction.

One fetch function per API generation. Each performs a retried GET and
parses the body with the single-repair JSON parser; normalization happens
downstream.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from config import PipelineConfig
from purpleair._client import fetch_with_retry, get_text, transient_faults
from purpleair.extractors.payload import parse_with_repair
from purpleair.models import ApiGeneration

logger = logging.getLogger(__name__)


def fetch_document(
    session: requests.Session,
    url: str,
    cfg: PipelineConfig,
    backoff_seconds: float,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> Any:
    """GET `url` with retry on transient faults and parse the JSON body."""
    log = log or logger
    text = fetch_with_retry(
        lambda: get_text(session, url, params=params, headers=headers),
        transient_faults(),
        max_retries=cfg.max_retries,
        backoff_seconds=backoff_seconds,
        max_elapsed=cfg.fetch_deadline,
        max_wait=cfg.retry_max_wait,
        logger=log,
    )
    log.debug("Response from %s: %.500s", url, text)
    return parse_with_repair(text, logger=log)


def fetch_legacy_show(session, cfg: PipelineConfig, log=None) -> Any:
    return fetch_document(
        session,
        f"{cfg.legacy_url}/json",
        cfg,
        cfg.primary_backoff,
        params={"show": str(cfg.sensor_id)},
        log=log,
    )


def fetch_legacy_data_json(session, cfg: PipelineConfig, log=None) -> Any:
    """Fetch the ``pm_1`` AQI sample; this endpoint is rate limited upstream."""
    return fetch_document(
        session,
        f"{cfg.legacy_url}/data.json",
        cfg,
        cfg.secondary_backoff,
        params={
            "key": str(cfg.data_key),
            "fetch": "true",
            "show": str(cfg.sensor_id),
            "fields": "pm_1",
        },
        log=log,
    )


def fetch_api_v1(session, cfg: PipelineConfig, log=None) -> Any:
    return fetch_document(
        session,
        f"{cfg.api_url}/v1/sensors/{cfg.sensor_id}",
        cfg,
        cfg.primary_backoff,
        headers={"x-api-key": str(cfg.read_key)},
        log=log,
    )


FETCHERS: Dict[ApiGeneration, Callable[..., Any]] = {
    ApiGeneration.LEGACY_SHOW: fetch_legacy_show,
    ApiGeneration.LEGACY_DATA_JSON: fetch_legacy_data_json,
    ApiGeneration.API_V1: fetch_api_v1,
}
