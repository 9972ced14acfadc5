"""Filesystem loaders for PurpleAir time-series points."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from purpleair.models import Point
from purpleair.transformers.points import points_to_frame
from schemas.points import schema_points

logger = logging.getLogger(__name__)


def append_csv(frame: pd.DataFrame, path: Path) -> None:
    """Append a DataFrame to a CSV file, creating parent folders and header as needed.

    Each reading cycle adds a handful of rows, so the header is only written
    when the file is first created.
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    write_header = not destination.exists()
    frame.to_csv(destination, mode="a", header=write_header, index=False)


class CsvSink:
    """Time-series sink appending validated points to a CSV file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def write_points(self, points: Sequence[Point]) -> None:
        frame = schema_points.validate(points_to_frame(points))
        append_csv(frame, self.path)
        logger.info("Appended %d points to %s", len(frame), self.path)
