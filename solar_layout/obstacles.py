# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from typing import Iterable, Sequence

from shapely.geometry import Polygon

from solar_layout.constants import DEFAULT_OBSTACLE_CLEARANCE_M
from solar_layout.datatypes import Obstacle
from solar_layout.geos import PointLike, to_point, centred_rect


def footprint_overlaps(candidate_center: PointLike,
                       candidate_w: float,
                       candidate_h: float,
                       obstacle: Obstacle,
                       clearance_margin: float = DEFAULT_OBSTACLE_CLEARANCE_M) -> bool:
    """
    Does a panel footprint of `candidate_w` (x) by `candidate_h` (z) centred on
    `candidate_center` overlap the obstacle footprint, inflated by
    `clearance_margin` on each side? Touching edges do not count as overlapping.
    """
    c = to_point(candidate_center)
    half_w = obstacle.length / 2 + clearance_margin
    half_h = obstacle.width / 2 + clearance_margin
    ox, oz = obstacle.position.x, obstacle.position.z
    return (c.x + candidate_w / 2 > ox - half_w and
            c.x - candidate_w / 2 < ox + half_w and
            c.z + candidate_h / 2 > oz - half_h and
            c.z - candidate_h / 2 < oz + half_h)


def blocked_by_obstacles(candidate_center: PointLike,
                         candidate_w: float,
                         candidate_h: float,
                         obstacles: Sequence[Obstacle],
                         clearance_margin: float = DEFAULT_OBSTACLE_CLEARANCE_M) -> bool:
    for obstacle in obstacles:
        if footprint_overlaps(candidate_center, candidate_w, candidate_h, obstacle, clearance_margin):
            return True
    return False


def obstacle_footprint(obstacle: Obstacle, clearance_margin: float = 0.0) -> Polygon:
    return centred_rect(obstacle.position,
                        obstacle.length + 2 * clearance_margin,
                        obstacle.width + 2 * clearance_margin)


def obstacle_area_m2(obstacles: Iterable[Obstacle]) -> float:
    return sum(o.area_m2 for o in obstacles)
