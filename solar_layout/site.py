# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import math
from typing import Optional


def optimal_tilt(latitude: float) -> int:
    """Fixed-tilt panels collect most over a year when tilted at about the latitude"""
    # halves round up
    return math.floor(abs(latitude) + 0.5)


def wind_zone(latitude: float, longitude: float) -> str:
    """Simplified Indian basic wind speed zones (IS 875 part 3)"""
    if latitude > 22 and longitude > 85:
        return "Zone IV (47 m/s)"
    if latitude > 20 and longitude < 75:
        return "Zone III (44 m/s)"
    if latitude > 15:
        return "Zone II (39 m/s)"
    return "Zone I (33 m/s)"


def wind_load_warning(panel_length_m: float, zone: str) -> Optional[str]:
    # Only long panels catch enough wind to matter:
    if panel_length_m <= 2.3:
        return None
    zone = zone.lower()
    if "iv" in zone:
        return "High wind risk - recommend additional anchoring"
    if "iii" in zone:
        return "Moderate wind risk - verify anchor design"
    return None
