# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
"""
Planar geometry on the local metre grid of a design.

Polygons are plain sequences of `Point2D` (or `(x, z)` pairs) with an implicit
closing edge. None of these functions validate their input: degenerate polygons
(fewer than 3 vertices, zero area) give empty or zero results rather than errors.
"""
import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from shapely.geometry import Polygon, mapping
from shapely.geometry.base import BaseGeometry

from solar_layout.constants import EPSILON, MAX_MITER_RATIO
from solar_layout.datatypes import Point2D

PointLike = Union[Point2D, Tuple[float, float]]


def to_point(p: PointLike) -> Point2D:
    if isinstance(p, Point2D):
        return p
    return Point2D(float(p[0]), float(p[1]))


def to_points(coords: Sequence[PointLike]) -> List[Point2D]:
    return [to_point(p) for p in coords]


def edge_length(a: PointLike, b: PointLike) -> float:
    a, b = to_point(a), to_point(b)
    return math.dist(a.as_tuple(), b.as_tuple())


def perimeter_m(polygon: Sequence[PointLike]) -> float:
    points = to_points(polygon)
    if len(points) < 2:
        return 0.0
    return sum(edge_length(points[i], points[(i + 1) % len(points)]) for i in range(len(points)))


def _signed_area(points: List[Point2D]) -> float:
    """Positive if the vertices run anticlockwise (x right, z up)"""
    xz = np.array([p.as_tuple() for p in points], dtype=float)
    x, z = xz[:, 0], xz[:, 1]
    return float(np.dot(x, np.roll(z, -1)) - np.dot(z, np.roll(x, -1))) / 2


def polygon_area_m2(polygon: Sequence[PointLike]) -> float:
    """Shoelace area. 0 for fewer than 3 vertices."""
    points = to_points(polygon)
    if len(points) < 3:
        return 0.0
    return abs(_signed_area(points))


def bounding_box(polygon: Sequence[PointLike]) -> Optional[Tuple[float, float, float, float]]:
    """(min_x, min_z, max_x, max_z), or None for an empty polygon"""
    points = to_points(polygon)
    if len(points) == 0:
        return None
    xs = [p.x for p in points]
    zs = [p.z for p in points]
    return min(xs), min(zs), max(xs), max(zs)


def centroid(polygon: Sequence[PointLike]) -> Optional[Point2D]:
    """Mean of the vertices"""
    points = to_points(polygon)
    if len(points) == 0:
        return None
    return Point2D(sum(p.x for p in points) / len(points),
                   sum(p.z for p in points) / len(points))


def point_in_polygon(point: PointLike, polygon: Sequence[PointLike]) -> bool:
    """
    Even-odd ray cast against every edge. Points exactly on the boundary follow
    the usual half-open rule of the ray cast (consistent, not inclusive).
    """
    points = to_points(polygon)
    if len(points) < 3:
        return False
    p = to_point(point)
    inside = False
    j = len(points) - 1
    for i in range(len(points)):
        xi, zi = points[i].x, points[i].z
        xj, zj = points[j].x, points[j].z
        if (zi > p.z) != (zj > p.z) and p.x < (xj - xi) * (p.z - zi) / (zj - zi) + xi:
            inside = not inside
        j = i
    return inside


def _inward_normals(points: List[Point2D]) -> List[Optional[Tuple[float, float]]]:
    """Unit inward normal of each edge i -> i+1, None for zero-length edges"""
    sign = 1.0 if _signed_area(points) >= 0 else -1.0
    normals = []
    n = len(points)
    for i in range(n):
        a, b = points[i], points[(i + 1) % n]
        length = edge_length(a, b)
        if length < EPSILON:
            normals.append(None)
        else:
            normals.append((-sign * (b.z - a.z) / length, sign * (b.x - a.x) / length))
    return normals


def _nearest_normal(normals: List[Optional[Tuple[float, float]]], start: int, step: int) -> Optional[Tuple[float, float]]:
    """First non-degenerate edge normal from `start`, walking `step` at a time"""
    n = len(normals)
    for k in range(n):
        normal = normals[(start + k * step) % n]
        if normal is not None:
            return normal
    return None


def _edge_reversed(a: Point2D, b: Point2D, a2: Point2D, b2: Point2D) -> bool:
    """True if the offset edge a2->b2 has collapsed or points the opposite way to a->b"""
    dx, dz = b.x - a.x, b.z - a.z
    if math.hypot(dx, dz) < EPSILON:
        return False
    return (b2.x - a2.x) * dx + (b2.z - a2.z) * dz <= EPSILON


def shrink_polygon(polygon: Sequence[PointLike], distance: float) -> List[Point2D]:
    """
    Erode a polygon by moving each vertex inward along the bisector of its two
    edges, far enough that both edges move in by `distance`.

    This is a per-vertex approximation, not a straight skeleton: on non-convex
    input the result can self-intersect locally. Vertices on edges that the offset
    has collapsed or turned inside-out are dropped, so a setback wider than half
    the polygon gives fewer than 3 vertices (returned as an empty list).

    `distance <= 0` returns the input vertices unchanged.
    """
    points = to_points(polygon)
    if distance <= 0 or len(points) < 3:
        return points

    n = len(points)
    normals = _inward_normals(points)
    moved = []
    for i in range(n):
        n_in = _nearest_normal(normals, i - 1, -1)
        n_out = _nearest_normal(normals, i, 1)
        if n_in is None:
            # every edge of the polygon has zero length:
            moved.append(points[i])
            continue
        bx, bz = n_in[0] + n_out[0], n_in[1] + n_out[1]
        b_len = math.hypot(bx, bz)
        if b_len < EPSILON:
            # a 180 degree spike; the bisector is undefined
            dx, dz = n_in[0] * distance, n_in[1] * distance
        else:
            bx, bz = bx / b_len, bz / b_len
            cos_half = bx * n_in[0] + bz * n_in[1]
            scale = distance / max(cos_half, 1.0 / MAX_MITER_RATIO)
            dx, dz = bx * scale, bz * scale
        moved.append(Point2D(points[i].x + dx, points[i].z + dz))

    reversed_edges = [_edge_reversed(points[i], points[(i + 1) % n], moved[i], moved[(i + 1) % n])
                      for i in range(n)]
    shrunk = [moved[i] for i in range(n) if not reversed_edges[i - 1] and not reversed_edges[i]]
    return shrunk if len(shrunk) >= 3 else []


def rect(x: float, z: float, w: float, h: float) -> Polygon:
    return Polygon([(x, z),
                    (x, z + h),
                    (x + w, z + h),
                    (x + w, z),
                    (x, z)])


def centred_rect(center: PointLike, w: float, h: float) -> Polygon:
    c = to_point(center)
    return rect(c.x - w / 2, c.z - h / 2, w, h)


def to_shapely(polygon: Sequence[PointLike]) -> Optional[Polygon]:
    points = to_points(polygon)
    if len(points) < 3:
        return None
    return Polygon([p.as_tuple() for p in points])


def to_geojson_dict(geom):
    if isinstance(geom, BaseGeometry):
        geom_dict = mapping(geom)
        return geom_dict
    return None
