"""Exception types raised by the PurpleAir ingest pipeline."""

from __future__ import annotations


class PurpleAirError(Exception):
    """Base class for pipeline errors that are not transport errors."""


class NormalizationError(PurpleAirError):
    """Raised when a payload lacks a mandatory field (sensor id or timestamp)."""


class ConfigError(PurpleAirError):
    """Raised when required settings are missing or invalid."""
