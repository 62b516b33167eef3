# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
"""Closed-form yield estimate; no irradiance simulation."""
import math

from solar_layout.constants import PEAK_SUN_HOURS, PERFORMANCE_RATIO, MIN_TILT_FACTOR
from solar_layout.datatypes import PanelSpec
from solar_layout.site import optimal_tilt


def tilt_factor(tilt_degrees: float, latitude: float) -> float:
    """Fraction of the optimally-tilted yield collected at `tilt_degrees`"""
    off_optimal = math.radians(tilt_degrees - optimal_tilt(latitude))
    return max(math.cos(off_optimal), MIN_TILT_FACTOR)


def daily_energy_kwh(panel_count: int,
                     panel: PanelSpec,
                     tilt_degrees: float,
                     latitude: float) -> float:
    """
    Daily AC energy: module area x efficiency x peak-sun-hours x performance ratio,
    reduced for panels mounted away from the optimal tilt.
    """
    if panel_count <= 0:
        return 0.0
    array_kw = panel_count * panel.area_m2 * (panel.efficiency_pct / 100)
    return array_kw * PEAK_SUN_HOURS * PERFORMANCE_RATIO * tilt_factor(tilt_degrees, latitude)


def annual_energy_kwh(daily_kwh: float) -> float:
    return daily_kwh * 365
