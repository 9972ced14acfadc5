"""PurpleAir reading cycle: fetch, normalize, compute AQI, write points.

`IngestPipeline.run` performs one cycle and never raises; any failure is
logged once and returned as a failed Outcome. Points reach the sink in a
single write with the full set, or not at all.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import requests

from config import PipelineConfig
from logging_config import (
    log_error_with_context,
    log_pipeline_end,
    log_pipeline_start,
    run_logger,
)
from purpleair._client import make_session
from purpleair.extractors.sensors import FETCHERS
from purpleair.models import Outcome, Point, Reading
from purpleair.transformers.normalize import normalize
from purpleair.transformers.points import build_points

PIPELINE_NAME = "record-status"


def build_sink(cfg: PipelineConfig):
    """Create the time-series sink named by the configuration."""
    if cfg.sink == "csv":
        from loaders.filesystem import CsvSink

        return CsvSink(cfg.csv_path)

    from loaders.influx import InfluxSink

    return InfluxSink(host=cfg.influx_host, port=cfg.influx_port, database=cfg.influx_database)


class IngestPipeline:
    """One sensor reading cycle against a configured PurpleAir endpoint."""

    def __init__(
        self,
        cfg: PipelineConfig,
        sink=None,
        session: Optional[requests.Session] = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        run_id: Optional[str] = None,
    ):
        self.cfg = cfg
        self._sink = sink
        self._session = session
        self.run_id = run_id or datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.log = logger or run_logger(self.run_id, cfg.sensor_id)

    @property
    def sink(self):
        if self._sink is None:
            self._sink = build_sink(self.cfg)
        return self._sink

    def run(self) -> Outcome:
        context = {
            "run_id": self.run_id,
            "sensor_id": self.cfg.sensor_id,
            "generation": self.cfg.api_generation.value,
            "dry_run": self.cfg.dry_run,
        }
        log_pipeline_start(PIPELINE_NAME, **context)
        try:
            points, written = self._cycle()
        except Exception as exc:
            log_error_with_context(exc, PIPELINE_NAME, **context)
            log_pipeline_end(PIPELINE_NAME, success=False, **context)
            return Outcome.failure(f"{type(exc).__name__}: {exc}")

        log_pipeline_end(PIPELINE_NAME, success=True, **context)
        return Outcome.ok(points, written)

    def fetch_reading(self, session: requests.Session) -> Reading:
        """Fetch and normalize the primary document, then the AQI sample if configured."""
        primary = self.cfg.primary_generation
        document = FETCHERS[primary](session, self.cfg, self.log)
        reading = normalize(primary, document)

        secondary = self.cfg.secondary_generation
        if secondary is not None:
            document = FETCHERS[secondary](session, self.cfg, self.log)
            reading = normalize(secondary, document, base=reading)
        return reading

    def _cycle(self) -> Tuple[List[Point], bool]:
        if self._session is not None:
            reading = self.fetch_reading(self._session)
        else:
            with make_session(self.cfg.timeout) as session:
                reading = self.fetch_reading(session)
        self.log.info("Reading: %s", reading)

        points = build_points(reading, self.log)
        if not points:
            self.log.warning("Reading for sensor %s produced no points", reading.sensor_id)
            return points, False
        if self.cfg.dry_run:
            self.log.info("Dry run: skipping write of %d points", len(points))
            return points, False

        self.sink.write_points(points)
        return points, True