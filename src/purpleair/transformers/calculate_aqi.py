"""
This module provides functions to calculate AQI values for PurpleAir PM2.5 readings.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Optional, Union

import pandas as pd

NOT_COMPUTABLE = -1
MAX_PM25 = 1000


class Breakpoint(NamedTuple):
    above: float
    aqi_high: int
    aqi_low: int
    bp_high: float
    bp_low: float
    inclusive: bool = False


# Highest bracket first; a value on an edge falls to the bracket below it.
AQI_BREAKPOINTS = (
    Breakpoint(350.5, 500, 401, 500.0, 350.5),
    Breakpoint(250.5, 400, 301, 350.4, 250.5),
    Breakpoint(150.5, 300, 201, 250.4, 150.5),
    Breakpoint(55.5, 200, 151, 150.4, 55.5),
    Breakpoint(35.5, 150, 101, 55.4, 35.5),
    Breakpoint(12.1, 100, 51, 35.4, 12.1),
    Breakpoint(0, 50, 0, 12, 0, inclusive=True),
)


def calc_aqi(cp: float, ih: int, il: int, bph: float, bpl: float) -> int:
    """Linearly interpolate a concentration within one breakpoint bracket.

    Rounds half up, matching the published PurpleAir conversion.
    """
    a = ih - il
    b = bph - bpl
    c = cp - bpl
    return int(math.floor((a / b) * c + il + 0.5))


def aqi_from_pm(pm25: Optional[float]) -> Union[int, float]:
    """Convert a PM2.5 concentration (ug/m3) to a US EPA AQI value.

    Returns NOT_COMPUTABLE (-1) for missing, NaN or out-of-range (> 1000)
    input. Negative concentrations are passed through unconverted.
    """
    if pm25 is None or pd.isna(pm25) or pm25 > MAX_PM25:
        return NOT_COMPUTABLE
    if pm25 < 0:
        return pm25
    for bp in AQI_BREAKPOINTS:
        if pm25 > bp.above or (bp.inclusive and pm25 >= bp.above):
            return calc_aqi(pm25, bp.aqi_high, bp.aqi_low, bp.bp_high, bp.bp_low)
    return NOT_COMPUTABLE
