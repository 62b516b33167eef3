# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from solar_layout.constants import MOUNTING_WEIGHT_PER_PANEL_KG
from solar_layout.datatypes import PanelSpec, Obstacle, Point2D, PanelLayout, StringZone, \
    DesignStats, RoofType
from solar_layout.electrical.inverters import SystemStringConfig, auto_select_inverter, \
    calculate_system_config, estimate_panel_electricals, inverter_suggestion
from solar_layout.electrical.strings import partition_into_strings
from solar_layout.energy import daily_energy_kwh, annual_energy_kwh
from solar_layout.geos import PointLike, to_points, shrink_polygon, polygon_area_m2, perimeter_m
from solar_layout.obstacles import obstacle_area_m2
from solar_layout.panels.panels import place_panels, usable_polygon, target_panel_count, shadow_length_m
from solar_layout.params import DesignParams
from solar_layout.rules.compliance import ComplianceStatus, check_compliance, walkway_area_m2
from solar_layout.rules.earthing import EarthingDetails, earthing_and_lightning
from solar_layout.rules.structural import RCCDetails, MetalRoofDetails, rcc_dead_load, metal_roof_hardware
from solar_layout.site import wind_zone, wind_load_warning


@dataclass(frozen=True)
class Design:
    safety_boundary: Tuple[Point2D, ...]
    layout: PanelLayout
    strings: Tuple[StringZone, ...]
    stats: DesignStats
    rcc: Optional[RCCDetails]
    metal_roof: Optional[MetalRoofDetails]
    earthing: EarthingDetails
    compliance: ComplianceStatus
    string_config: Optional[SystemStringConfig]
    target_panel_count: Optional[int]
    capacity_exceeds_roof: bool
    wind_zone: str
    wind_warning: Optional[str]

    @property
    def panel_count(self) -> int:
        return len(self.layout)


def design(roof_polygon: Sequence[PointLike],
           panel: PanelSpec,
           params: Optional[DesignParams] = None,
           obstacles: Sequence[Obstacle] = ()) -> Design:
    """
    Lay out panels on a roof and evaluate the result: strings, structural and
    earthing requirements, fire access compliance and summary stats.

    Everything is recomputed from the inputs; nothing is carried over from a
    previous design.
    """
    params = (params or DesignParams()).validated()
    obstacles = tuple(obstacles)
    roof = to_points(roof_polygon)
    tilt = params.effective_tilt()

    safety_boundary = shrink_polygon(roof, params.setback_m)
    usable = usable_polygon(roof, safety_boundary, params.setback_m)
    target = target_panel_count(params.target_capacity_kw, panel)

    layout = place_panels(usable,
                          panel,
                          orientation=params.orientation,
                          tilt_degrees=tilt,
                          panel_gap_m=params.panel_gap_m,
                          obstacles=obstacles,
                          target_count=target,
                          clearance_margin=params.clearance_margin_m)
    panel_count = len(layout)
    capacity_kw = panel_count * panel.watt_peak / 1000

    string_config = None
    strings: List[StringZone] = []
    if panel_count > 0:
        string_config = calculate_system_config(panel_count,
                                                panel.watt_peak,
                                                auto_select_inverter(capacity_kw),
                                                estimate_panel_electricals(panel.watt_peak))
        panels_per_string = params.panels_per_string
        if panels_per_string is None:
            panels_per_string = string_config.string_config.recommended_panels_per_string
        strings = partition_into_strings(panel_count, panels_per_string)

    roof_area = polygon_area_m2(roof)

    rcc = None
    if params.roof_type == RoofType.RCC:
        rcc = rcc_dead_load(panel_count,
                            panel.weight_kg,
                            params.structure_type,
                            roof_area,
                            params.dead_load_limit_kg_m2)

    metal_roof = None
    if params.roof_type == RoofType.METAL_SHEET:
        along_row, _ = panel.footprint(params.orientation)
        metal_roof = metal_roof_hardware(panel_count,
                                         layout.row_count,
                                         along_row,
                                         params.panel_gap_m,
                                         params.purlin_spacing_mm,
                                         params.clamp_type)

    compliance = check_compliance(params.project_category,
                                  params.has_perimeter_walkway,
                                  params.perimeter_walkway_width_m,
                                  params.has_central_walkway,
                                  params.central_walkway_width_m,
                                  params.has_stair_clearance,
                                  params.fire_compliance_required,
                                  params.min_perimeter_walkway_m,
                                  params.min_central_walkway_m)

    usable_area = usable_area_m2(roof, safety_boundary, obstacles,
                                 setback_m=params.setback_m,
                                 has_perimeter_walkway=params.has_perimeter_walkway,
                                 perimeter_width_m=params.perimeter_walkway_width_m,
                                 has_central_walkway=params.has_central_walkway,
                                 central_width_m=params.central_walkway_width_m)

    stats = design_stats(layout, panel, roof, usable_area,
                         tilt_degrees=tilt,
                         latitude=params.latitude,
                         epc_rate_per_kw=params.epc_rate_per_kw,
                         material_rate_per_kw=params.material_rate_per_kw)

    zone = wind_zone(params.latitude, params.longitude)
    capacity_exceeds_roof = target is not None and target > panel_count

    logging.info(f"Placed {panel_count} panels ({capacity_kw:.2f} kWp) in {layout.row_count} rows "
                 f"on {roof_area:.1f}m2 roof, {len(strings)} strings")
    if capacity_exceeds_roof:
        logging.warning(f"Target of {params.target_capacity_kw} kWp needs {target} panels "
                        f"but the roof only holds {panel_count}")

    return Design(
        safety_boundary=tuple(safety_boundary),
        layout=layout,
        strings=tuple(strings),
        stats=stats,
        rcc=rcc,
        metal_roof=metal_roof,
        earthing=earthing_and_lightning(capacity_kw, roof_area, params.building_height_m),
        compliance=compliance,
        string_config=string_config,
        target_panel_count=target,
        capacity_exceeds_roof=capacity_exceeds_roof,
        wind_zone=zone,
        wind_warning=wind_load_warning(panel.length_m, zone))


def usable_area_m2(roof_polygon: Sequence[PointLike],
                   safety_boundary: Sequence[PointLike],
                   obstacles: Sequence[Obstacle] = (),
                   setback_m: Optional[float] = None,
                   has_perimeter_walkway: bool = False,
                   perimeter_width_m: float = 0.6,
                   has_central_walkway: bool = False,
                   central_width_m: float = 1.0) -> float:
    """
    Area left for panels once the setback, walkways and obstacle footprints are
    taken out. Never negative.
    """
    area = polygon_area_m2(usable_polygon(roof_polygon, safety_boundary, setback_m))
    area -= walkway_area_m2(area,
                            perimeter_m(roof_polygon),
                            has_perimeter_walkway,
                            perimeter_width_m,
                            has_central_walkway,
                            central_width_m)
    area -= obstacle_area_m2(obstacles)
    return max(area, 0.0)


def design_stats(layout: PanelLayout,
                 panel: PanelSpec,
                 roof_polygon: Sequence[PointLike],
                 usable_area: float,
                 tilt_degrees: float,
                 latitude: float,
                 epc_rate_per_kw: float,
                 material_rate_per_kw: float) -> DesignStats:
    total_panels = len(layout)
    roof_area = polygon_area_m2(roof_polygon)
    if total_panels == 0:
        return DesignStats(total_roof_area_m2=roof_area, usable_area_m2=usable_area)

    capacity_kw = total_panels * panel.watt_peak / 1000
    occupied = total_panels * panel.area_m2
    daily = daily_energy_kwh(total_panels, panel, tilt_degrees, latitude)
    depth = layout[0].footprint_height
    mounted_weight = total_panels * (panel.weight_kg + MOUNTING_WEIGHT_PER_PANEL_KG)
    epc_revenue = capacity_kw * epc_rate_per_kw
    material_cost = capacity_kw * material_rate_per_kw

    return DesignStats(
        total_panels=total_panels,
        total_capacity_kw=capacity_kw,
        total_roof_area_m2=roof_area,
        usable_area_m2=usable_area,
        occupied_area_m2=occupied,
        roof_utilization_pct=occupied / roof_area * 100 if roof_area > 0 else 0.0,
        daily_energy_kwh=daily,
        annual_energy_kwh=annual_energy_kwh(daily),
        row_spacing_m=shadow_length_m(depth, tilt_degrees),
        panels_per_row=layout.panels_per_row,
        total_rows=layout.row_count,
        structural_load_kg_m2=mounted_weight / usable_area if usable_area > 0 else 0.0,
        inverter_suggestion=inverter_suggestion(capacity_kw),
        epc_revenue=epc_revenue,
        material_cost=material_cost,
        gross_profit=epc_revenue - material_cost)
