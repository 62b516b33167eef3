# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import math
from dataclasses import dataclass, fields, replace, asdict
from enum import Enum
from typing import Optional

from solar_layout.constants import DEFAULT_PANEL_GAP_M, DEFAULT_OBSTACLE_CLEARANCE_M, \
    MIN_PERIMETER_WALKWAY_M, MIN_CENTRAL_WALKWAY_M, EPC_RATE_PER_KW, MATERIAL_RATE_PER_KW, \
    DEFAULT_PANELS_PER_STRING
from solar_layout.datatypes import Orientation, RoofType, StructureType, ClampType, ProjectCategory
from solar_layout.site import optimal_tilt


@dataclass(frozen=True)
class DesignParams:
    """
    Every configuration scalar of a design. All flat: no nested config objects.
    """
    orientation: Orientation = Orientation.LANDSCAPE
    # None means use the optimal tilt for the latitude:
    tilt_degrees: Optional[float] = 15.0
    panel_gap_m: float = DEFAULT_PANEL_GAP_M
    clearance_margin_m: float = DEFAULT_OBSTACLE_CLEARANCE_M
    setback_m: float = 0.6
    target_capacity_kw: float = 0.0

    latitude: float = 13.0827
    longitude: float = 80.2707

    roof_type: RoofType = RoofType.RCC
    structure_type: StructureType = StructureType.ANCHOR
    dead_load_limit_kg_m2: float = 50.0
    purlin_spacing_mm: float = 1200.0
    clamp_type: ClampType = ClampType.MID_CLAMP
    building_height_m: float = 10.0

    project_category: Optional[ProjectCategory] = None
    fire_compliance_required: bool = False
    has_perimeter_walkway: bool = False
    perimeter_walkway_width_m: float = 0.6
    has_central_walkway: bool = False
    central_walkway_width_m: float = 1.0
    has_stair_clearance: bool = True
    min_perimeter_walkway_m: float = MIN_PERIMETER_WALKWAY_M
    min_central_walkway_m: float = MIN_CENTRAL_WALKWAY_M

    # None means derive from the auto-selected inverter:
    panels_per_string: Optional[int] = DEFAULT_PANELS_PER_STRING
    epc_rate_per_kw: float = EPC_RATE_PER_KW
    material_rate_per_kw: float = MATERIAL_RATE_PER_KW

    def effective_tilt(self) -> float:
        if self.tilt_degrees is None:
            return float(optimal_tilt(self.latitude))
        return self.tilt_degrees

    def validated(self) -> 'DesignParams':
        """A copy with every field coerced to its type and range-checked"""
        return replace(
            self,
            orientation=_validate_enum(self.orientation, Orientation, "orientation"),
            tilt_degrees=None if self.tilt_degrees is None else validate_float(self.tilt_degrees, "tilt_degrees", 0, 90),
            panel_gap_m=validate_float(self.panel_gap_m, "panel_gap_m", 0),
            clearance_margin_m=validate_float(self.clearance_margin_m, "clearance_margin_m", 0),
            setback_m=validate_float(self.setback_m, "setback_m", 0),
            target_capacity_kw=validate_float(self.target_capacity_kw, "target_capacity_kw", 0),
            latitude=validate_float(self.latitude, "latitude", -90, 90),
            longitude=validate_float(self.longitude, "longitude", -180, 180),
            roof_type=_validate_enum(self.roof_type, RoofType, "roof_type"),
            structure_type=_validate_enum(self.structure_type, StructureType, "structure_type"),
            dead_load_limit_kg_m2=validate_float(self.dead_load_limit_kg_m2, "dead_load_limit_kg_m2", 0),
            purlin_spacing_mm=validate_float(self.purlin_spacing_mm, "purlin_spacing_mm", 1),
            clamp_type=_validate_enum(self.clamp_type, ClampType, "clamp_type"),
            building_height_m=validate_float(self.building_height_m, "building_height_m", 0),
            project_category=None if self.project_category is None else _validate_enum(self.project_category, ProjectCategory, "project_category"),
            perimeter_walkway_width_m=validate_float(self.perimeter_walkway_width_m, "perimeter_walkway_width_m", 0),
            central_walkway_width_m=validate_float(self.central_walkway_width_m, "central_walkway_width_m", 0),
            min_perimeter_walkway_m=validate_float(self.min_perimeter_walkway_m, "min_perimeter_walkway_m", 0),
            min_central_walkway_m=validate_float(self.min_central_walkway_m, "min_central_walkway_m", 0),
            panels_per_string=None if self.panels_per_string is None else validate_int(self.panels_per_string, "panels_per_string", 1),
            epc_rate_per_kw=validate_float(self.epc_rate_per_kw, "epc_rate_per_kw", 0),
            material_rate_per_kw=validate_float(self.material_rate_per_kw, "material_rate_per_kw", 0),
        )

    def to_dict(self) -> dict:
        return {k: v.value if isinstance(v, Enum) else v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, d: dict) -> 'DesignParams':
        known = {f.name for f in fields(cls)}
        unknown = set(d.keys()) - known
        if unknown:
            raise ValueError(f"unknown design parameters: {sorted(unknown)}")
        return cls(**d).validated()


def validate_int(val: int, name: str, minval: int = None, maxval: int = None) -> int:
    if val is None:
        raise ValueError(f"parameter {name} was None")
    val = int(val)
    if minval is not None and val < minval:
        raise ValueError(f"parameter {name} must be greater or equal to {minval}, was {val}")
    if maxval is not None and val > maxval:
        raise ValueError(f"parameter {name} must be less than or equal to {maxval}, was {val}")
    return val


def validate_float(val: float, name: str, minval: float = None, maxval: float = None) -> float:
    if val is None:
        raise ValueError(f"parameter {name} was None")
    val = float(val)
    if not math.isfinite(val):
        raise ValueError(f"parameter {name} must be a finite number, was {val}")
    if minval is not None and val < minval:
        raise ValueError(f"parameter {name} must be greater or equal to {minval}, was {val}")
    if maxval is not None and val > maxval:
        raise ValueError(f"parameter {name} must be less than or equal to {maxval}, was {val}")
    return val


def _validate_enum(val, enum_cls, name: str):
    member = enum_cls.from_string(val)
    if member is None:
        raise ValueError(f"parameter {name} not in {[m.value for m in enum_cls]}, was {val}")
    return member
