# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
"""Earthing and lightning protection sizing (IS 3043 / IS/IEC 62305 rules of thumb)"""
from dataclasses import dataclass
from typing import Sequence, Tuple

import math

# Step tables: (capacity kW strictly above which the entry applies, value).
# Looked up from the top, so values past the end fall into the highest bracket.
EARTH_CONDUCTORS: Sequence[Tuple[float, str]] = (
    (100, "50 × 6 mm GI Strip"),
    (50, "40 × 5 mm GI Strip"),
    (25, "32 × 6 mm GI Strip"),
    (-math.inf, "25 × 3 mm GI Strip"),
)

EARTH_RESISTANCE_TARGETS: Sequence[Tuple[float, float]] = (
    (50, 1.0),
    (10, 2.0),
    (-math.inf, 5.0),
)

DOWN_CONDUCTORS: Sequence[Tuple[float, str]] = (
    (50, "8 mm dia GI Wire"),
    (-math.inf, "6 mm dia GI Wire"),
)

EQUIPMENT_EARTH_CONDUCTORS: Sequence[Tuple[float, str]] = (
    (50, "10 SWG GI Wire"),
    (-math.inf, "8 SWG GI Wire"),
)

STRUCTURE_EARTH_CONDUCTOR = "25 × 3 mm GI Strip"

# Buildings taller than this need lightning protection:
LA_HEIGHT_THRESHOLD_M = 10
# ...as do roofs bigger than this:
LA_AREA_THRESHOLD_M2 = 200
# Above this roof area an early streamer emission arrestor is used:
ESE_AREA_THRESHOLD_M2 = 1000
# Buildings taller than this get 2 LA earth pits:
TALL_BUILDING_HEIGHT_M = 15
# Max spacing of down conductors around the perimeter:
DOWN_CONDUCTOR_SPACING_M = 20


@dataclass(frozen=True)
class EarthingDetails:
    earth_pit_count: int
    earth_resistance_target_ohm: float
    conductor_size: str
    la_required: bool
    la_type: str
    down_conductor_count: int
    down_conductor_size: str
    equipment_earth_conductor: str
    structure_earth_conductor: str


def _step(table: Sequence[Tuple[float, object]], value: float):
    for threshold, result in table:
        if value > threshold:
            return result
    return table[-1][1]


def earthing_and_lightning(capacity_kw: float,
                           roof_area_m2: float,
                           building_height_m: float = 10.0) -> EarthingDetails:
    # 1 pit per 10 kW (at least 2) for the array, 1 or 2 for the LA, 1 for the body:
    array_pits = max(2, math.ceil(capacity_kw / 10))
    la_pits = 2 if building_height_m > TALL_BUILDING_HEIGHT_M else 1
    earth_pit_count = array_pits + la_pits + 1

    # perimeter of a square roof of the same area:
    perimeter = 4 * math.sqrt(max(roof_area_m2, 0.0))

    return EarthingDetails(
        earth_pit_count=earth_pit_count,
        earth_resistance_target_ohm=_step(EARTH_RESISTANCE_TARGETS, capacity_kw),
        conductor_size=_step(EARTH_CONDUCTORS, capacity_kw),
        la_required=building_height_m > LA_HEIGHT_THRESHOLD_M or roof_area_m2 > LA_AREA_THRESHOLD_M2,
        la_type="ESE Lightning Arrestor" if roof_area_m2 > ESE_AREA_THRESHOLD_M2 else "Conventional LA (Franklin Rod)",
        down_conductor_count=max(2, math.ceil(perimeter / DOWN_CONDUCTOR_SPACING_M)),
        down_conductor_size=_step(DOWN_CONDUCTORS, capacity_kw),
        equipment_earth_conductor=_step(EQUIPMENT_EARTH_CONDUCTORS, capacity_kw),
        structure_earth_conductor=STRUCTURE_EARTH_CONDUCTOR)
