"""PurpleAir sensor ingest.

Polls a PurpleAir sensor (legacy JSON endpoints or the keyed v1 API),
normalizes the reading, derives an AQI from PM2.5 and writes time-series
points to a sink.
"""

from .models import ApiGeneration, Outcome, Point, Reading

__all__ = [
    "ApiGeneration",
    "Outcome",
    "Point",
    "Reading",
]
