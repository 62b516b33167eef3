# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from dataclasses import dataclass
from typing import Optional, Union

import math

from solar_layout.constants import MIN_PERIMETER_WALKWAY_M, MIN_CENTRAL_WALKWAY_M
from solar_layout.datatypes import ProjectCategory

# Fire code walkways are mandatory for these:
MANDATORY_CATEGORIES = (ProjectCategory.COMMERCIAL, ProjectCategory.INDUSTRIAL)


@dataclass(frozen=True)
class ComplianceStatus:
    mandatory: bool
    perimeter_walkway: bool
    central_access: bool
    stair_clearance: bool
    fire_safe: bool
    overall_compliant: bool


def check_compliance(project_category: Optional[Union[ProjectCategory, str]],
                     has_perimeter_walkway: bool,
                     perimeter_width_m: float,
                     has_central_access: bool,
                     central_width_m: float,
                     has_stair_clearance: bool = True,
                     fire_compliance_required: bool = False,
                     min_perimeter_width_m: float = MIN_PERIMETER_WALKWAY_M,
                     min_central_width_m: float = MIN_CENTRAL_WALKWAY_M) -> ComplianceStatus:
    """
    Walkway and fire access checks. These only apply to commercial and industrial
    projects, or when fire compliance has been asked for explicitly; anything else
    passes.
    """
    category = ProjectCategory.from_string(project_category)
    mandatory = category in MANDATORY_CATEGORIES or fire_compliance_required
    if not mandatory:
        return ComplianceStatus(
            mandatory=False,
            perimeter_walkway=True,
            central_access=True,
            stair_clearance=True,
            fire_safe=True,
            overall_compliant=True)

    perimeter_ok = has_perimeter_walkway and perimeter_width_m >= min_perimeter_width_m
    central_ok = has_central_access and central_width_m >= min_central_width_m
    fire_safe = perimeter_ok and central_ok
    return ComplianceStatus(
        mandatory=True,
        perimeter_walkway=perimeter_ok,
        central_access=central_ok,
        stair_clearance=has_stair_clearance,
        fire_safe=fire_safe,
        overall_compliant=fire_safe and has_stair_clearance)


def walkway_area_m2(usable_area_m2: float,
                    roof_perimeter_m: float,
                    has_perimeter_walkway: bool,
                    perimeter_width_m: float,
                    has_central_walkway: bool,
                    central_width_m: float) -> float:
    """
    Roof area given over to walkways: a strip of `perimeter_width_m` round the roof
    edge, and a central aisle across a square of the remaining area.
    """
    area = 0.0
    if has_perimeter_walkway:
        area += roof_perimeter_m * perimeter_width_m
    if has_central_walkway:
        remaining = max(usable_area_m2 - area, 0.0)
        area += math.sqrt(remaining) * central_width_m
    return area
