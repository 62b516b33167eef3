# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from dataclasses import dataclass

import math

from solar_layout.constants import ANCHOR_LOAD_FACTOR, BALLAST_LOAD_FACTOR, \
    STANDARD_RAIL_LENGTH_M, RAILS_PER_ROW
from solar_layout.datatypes import StructureType, ClampType

STRUCTURAL_FACTORS = {
    StructureType.ANCHOR: ANCHOR_LOAD_FACTOR,
    StructureType.BALLAST: BALLAST_LOAD_FACTOR,
}

FASTENERS_PER_CLAMP = {
    ClampType.MID_CLAMP: 2,
    ClampType.END_CLAMP: 2,
    ClampType.L_FOOT: 4,
}

# (max purlin spacing mm, fastener multiplier): closer purlins mean more crossings
# per rail and so more fixings. Spacings past the last entry use its multiplier.
PURLIN_MULTIPLIERS = (
    (900, 1.25),
    (1500, 1.0),
    (math.inf, 0.75),
)


@dataclass(frozen=True)
class RCCDetails:
    structure_type: StructureType
    dead_load_limit_kg_m2: float
    total_load_kg: float
    load_per_m2: float
    is_safe: bool


@dataclass(frozen=True)
class MetalRoofDetails:
    purlin_spacing_mm: float
    clamp_type: ClampType
    total_row_length_m: float
    rail_count: int
    clamp_count: int
    fastener_count: int


def rcc_dead_load(panel_count: int,
                  panel_weight_kg: float,
                  structure_type: StructureType,
                  roof_area_m2: float,
                  dead_load_limit_kg_m2: float = 50.0) -> RCCDetails:
    """Dead load of the array on a reinforced concrete roof"""
    total_load = panel_count * panel_weight_kg * STRUCTURAL_FACTORS[structure_type]
    load_per_m2 = total_load / roof_area_m2 if roof_area_m2 > 0 else 0.0
    return RCCDetails(
        structure_type=structure_type,
        dead_load_limit_kg_m2=dead_load_limit_kg_m2,
        total_load_kg=total_load,
        load_per_m2=load_per_m2,
        is_safe=load_per_m2 <= dead_load_limit_kg_m2)


def purlin_multiplier(purlin_spacing_mm: float) -> float:
    for max_spacing, multiplier in PURLIN_MULTIPLIERS:
        if purlin_spacing_mm <= max_spacing:
            return multiplier
    return PURLIN_MULTIPLIERS[-1][1]


def metal_roof_hardware(panel_count: int,
                        row_count: int,
                        panel_along_row_m: float,
                        panel_gap_m: float,
                        purlin_spacing_mm: float = 1200,
                        clamp_type: ClampType = ClampType.MID_CLAMP) -> MetalRoofDetails:
    """
    Bill of quantities for mounting on a metal sheet roof. Rails run along each
    row; mid-clamps hold two panel edges each side, end-clamp topologies need one
    per panel plus one to close off each row.
    """
    total_row_length = panel_count * panel_along_row_m + max(panel_count - row_count, 0) * panel_gap_m
    rail_count = RAILS_PER_ROW * math.ceil(round(total_row_length / STANDARD_RAIL_LENGTH_M, 9))

    if clamp_type == ClampType.MID_CLAMP:
        clamp_count = 2 * panel_count
    else:
        clamp_count = panel_count + row_count

    fastener_count = math.ceil(round(
        clamp_count * FASTENERS_PER_CLAMP[clamp_type] * purlin_multiplier(purlin_spacing_mm), 9))

    return MetalRoofDetails(
        purlin_spacing_mm=purlin_spacing_mm,
        clamp_type=clamp_type,
        total_row_length_m=total_row_length,
        rail_count=rail_count,
        clamp_count=clamp_count,
        fastener_count=fastener_count)
