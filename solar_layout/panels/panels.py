# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import math
import numpy as np

from solar_layout.constants import MIN_ROW_GAP_M, SCAN_MARGIN_M, EPSILON, \
    DEFAULT_PANEL_GAP_M, DEFAULT_OBSTACLE_CLEARANCE_M
from solar_layout.datatypes import PanelSpec, Orientation, Obstacle, Point2D, \
    PanelSlot, PanelLayout, StringZone
from solar_layout.geos import PointLike, to_points, bounding_box, polygon_area_m2, \
    point_in_polygon, centred_rect, to_geojson_dict
from solar_layout.obstacles import blocked_by_obstacles

# (column index, centre) pairs making up one row of panels
_Row = List[Tuple[int, Point2D]]


@dataclass(frozen=True)
class _Tiling:
    polygon: Tuple[Point2D, ...]
    obstacles: Tuple[Obstacle, ...]
    along_row: float
    depth: float
    row_pitch: float
    column_pitch: float
    clearance_margin: float

    def fits(self, p: Point2D) -> bool:
        return point_in_polygon(p, self.polygon) and not blocked_by_obstacles(
            p, self.along_row, self.depth, self.obstacles, self.clearance_margin)


def shadow_length_m(depth_m: float, tilt_degrees: float) -> float:
    """Length of the shadow behind a row of panels `depth_m` deep tilted at `tilt_degrees`"""
    return depth_m * math.tan(math.radians(tilt_degrees))


def row_spacing_m(depth_m: float, tilt_degrees: float) -> float:
    """
    Clear gap needed behind a row of panels so that it does not shade the next
    row. Never less than the minimum maintenance gap.
    """
    return max(shadow_length_m(depth_m, tilt_degrees), MIN_ROW_GAP_M)


def row_pitch_m(depth_m: float, tilt_degrees: float) -> float:
    return depth_m + row_spacing_m(depth_m, tilt_degrees)


def target_panel_count(target_capacity_kw: Optional[float], panel: PanelSpec) -> Optional[int]:
    """Panels needed to reach a desired capacity, or None if no target is set"""
    if target_capacity_kw is None or target_capacity_kw <= 0:
        return None
    return math.ceil(round(target_capacity_kw * 1000 / panel.watt_peak, 6))


def usable_polygon(roof_polygon: Sequence[PointLike],
                   safety_boundary: Sequence[PointLike],
                   setback_m: Optional[float] = None) -> List[Point2D]:
    """
    The area panels can go in: the safety boundary if it has at least 3 vertices,
    otherwise the roof itself.

    If `setback_m` is given and positive, a collapsed safety boundary means the
    setback has eaten the whole roof, so the usable area is empty.
    """
    boundary = to_points(safety_boundary)
    if len(boundary) >= 3:
        return boundary
    if setback_m is not None and setback_m > 0:
        logging.debug(f"Setback of {setback_m}m leaves no usable roof area")
        return []
    logging.debug("No safety boundary, using the whole roof")
    return to_points(roof_polygon)


def place_panels(polygon: Sequence[PointLike],
                 panel: PanelSpec,
                 orientation: Orientation = Orientation.LANDSCAPE,
                 tilt_degrees: float = 0.0,
                 panel_gap_m: float = DEFAULT_PANEL_GAP_M,
                 obstacles: Sequence[Obstacle] = (),
                 target_count: Optional[int] = None,
                 clearance_margin: float = DEFAULT_OBSTACLE_CLEARANCE_M) -> PanelLayout:
    """
    Core panel placement algorithm.

    1. Scan the (inset) bounding box of `polygon` in rows spaced to avoid
    self-shading at `tilt_degrees`, keeping every panel whose centre is inside the
    polygon and whose footprint keeps clear of the obstacles.

    2. Normalise to a uniform rectangular block: the median panels-per-row of the
    scanned rows becomes the block width, rows narrower than that are dropped, and
    the block is centred horizontally on the widest row and vertically on the
    polygon. Every block position is re-checked against the polygon and obstacles.

    3. If that leaves nothing, fall back to a plain grid over the bounding box.

    The result is in row-major order and is truncated to `target_count` if given.
    """
    if target_count is not None and target_count < 0:
        raise ValueError(f"target panel count cannot be negative, was {target_count}")
    if panel_gap_m < 0:
        raise ValueError(f"panel gap cannot be negative, was {panel_gap_m}")

    along_row, depth = panel.footprint(orientation)
    row_pitch = row_pitch_m(depth, tilt_degrees)
    column_pitch = along_row + panel_gap_m
    empty = PanelLayout(row_pitch_m=row_pitch, column_pitch_m=column_pitch)

    points = to_points(polygon)
    bounds = bounding_box(points)
    if len(points) < 3 or not all(math.isfinite(b) for b in bounds) or polygon_area_m2(points) <= 0:
        logging.debug(f"No panels placed: degenerate polygon with {len(points)} vertices")
        return empty

    tiling = _Tiling(
        polygon=tuple(points),
        obstacles=tuple(obstacles),
        along_row=along_row,
        depth=depth,
        row_pitch=row_pitch,
        column_pitch=column_pitch,
        clearance_margin=clearance_margin)

    scanned = _scan_rows(tiling, bounds)
    rows = _uniform_block(tiling, bounds, scanned) if scanned else []
    uniform = True
    if not any(rows):
        logging.debug(f"No uniform block from {len(scanned)} scanned rows, falling back to simple grid")
        rows = _simple_grid(tiling, bounds)
        uniform = False

    slots = []
    row_index = 0
    for row in rows:
        if not row:
            continue
        for column, p in row:
            slots.append(PanelSlot(position=p,
                                   footprint_width=along_row,
                                   footprint_height=depth,
                                   row=row_index,
                                   column=column))
        row_index += 1

    if target_count is not None:
        slots = slots[:target_count]

    logging.debug(f"Placed {len(slots)} panels in {row_index} rows (uniform: {uniform})")
    return PanelLayout(slots=tuple(slots),
                       row_pitch_m=row_pitch,
                       column_pitch_m=column_pitch,
                       uniform=uniform)


def _axis_positions(start: float, end: float, pitch: float) -> List[float]:
    """Positions from `start` to `end` inclusive, `pitch` apart"""
    if end < start - EPSILON:
        return []
    count = int(math.floor((end - start) / pitch + EPSILON)) + 1
    return [start + i * pitch for i in range(count)]


def _scan_rows(tiling: _Tiling, bounds: Tuple[float, float, float, float]) -> List[List[Point2D]]:
    min_x, min_z, max_x, max_z = bounds
    half_w = tiling.along_row / 2
    half_d = tiling.depth / 2
    xs = _axis_positions(min_x + half_w + SCAN_MARGIN_M, max_x - half_w - SCAN_MARGIN_M, tiling.column_pitch)
    zs = _axis_positions(min_z + half_d + SCAN_MARGIN_M, max_z - half_d - SCAN_MARGIN_M, tiling.row_pitch)

    rows = []
    for z in zs:
        row = [p for p in (Point2D(x, z) for x in xs) if tiling.fits(p)]
        if row:
            rows.append(row)
    return rows


def _uniform_block(tiling: _Tiling,
                   bounds: Tuple[float, float, float, float],
                   scanned: List[List[Point2D]]) -> List[_Row]:
    counts = np.array([len(row) for row in scanned])
    # upper median, so the target is always a count some row actually has:
    per_row = int(np.sort(counts)[len(counts) // 2])
    survivors = [row for row in scanned if len(row) >= per_row]
    if per_row == 0 or not survivors:
        return []

    # max() keeps the first of equally wide rows, i.e. the lowest in scan order:
    reference = max(survivors, key=len)
    center_x = (reference[0].x + reference[-1].x) / 2
    center_z = (bounds[1] + bounds[3]) / 2
    row_count = len(survivors)

    block = []
    for r in range(row_count):
        z = center_z + (r - (row_count - 1) / 2) * tiling.row_pitch
        row = []
        for c in range(per_row):
            p = Point2D(center_x + (c - (per_row - 1) / 2) * tiling.column_pitch, z)
            if tiling.fits(p):
                row.append((c, p))
        block.append(row)
    return block


def _simple_grid(tiling: _Tiling, bounds: Tuple[float, float, float, float]) -> List[_Row]:
    min_x, min_z, max_x, max_z = bounds
    half_w = tiling.along_row / 2
    half_d = tiling.depth / 2
    xs = _axis_positions(min_x + half_w, max_x - half_w, tiling.column_pitch)
    zs = _axis_positions(min_z + half_d, max_z - half_d, tiling.row_pitch)

    rows = []
    for z in zs:
        row = []
        for c, x in enumerate(xs):
            p = Point2D(x, z)
            if tiling.fits(p):
                row.append((c, p))
        rows.append(row)
    return rows


def layout_geojson(layout: PanelLayout, strings: Sequence[StringZone] = ()) -> dict:
    """
    GeoJSON FeatureCollection of panel footprints, in local metre coordinates,
    for handing to whatever draws the layout.
    """
    string_of = {}
    for zone in strings:
        for idx in zone.panel_indices:
            string_of[idx] = zone.id

    features = []
    for i, slot in enumerate(layout):
        footprint = centred_rect(slot.position, slot.footprint_width, slot.footprint_height)
        features.append({
            "type": "Feature",
            "geometry": to_geojson_dict(footprint),
            "properties": {
                "index": i,
                "row": slot.row,
                "column": slot.column,
                "string": string_of.get(i),
            }
        })
    return {"type": "FeatureCollection", "features": features}
