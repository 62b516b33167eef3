# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import json
import logging
from dataclasses import asdict
from typing import List, Optional, Sequence

from solar_layout.datatypes import PanelSpec, Obstacle, ObstacleType, Point2D, default_obstacle, \
    panel_option
from solar_layout.design import Design, design
from solar_layout.geos import PointLike, to_points
from solar_layout.params import DesignParams


class DesignSession:
    """
    The editable inputs of one rooftop design. Results are never stored: every
    call to `compute` lays the roof out again from scratch.
    """

    def __init__(self,
                 roof_polygon: Sequence[PointLike],
                 panel: PanelSpec,
                 params: Optional[DesignParams] = None,
                 obstacles: Sequence[Obstacle] = ()):
        self.roof_polygon: List[Point2D] = to_points(roof_polygon)
        self.panel = panel
        self.params = (params or DesignParams()).validated()
        self.obstacles: List[Obstacle] = list(obstacles)
        self._next_id = len(self.obstacles) + 1

    def add_obstacle(self,
                     obstacle_type: ObstacleType = ObstacleType.CUSTOM,
                     x: float = 0.0,
                     z: float = 0.0,
                     length: float = None,
                     width: float = None,
                     height: float = None,
                     label: str = None) -> Obstacle:
        """Add an obstacle of the given type, using the type's default size unless overridden"""
        obstacle_type = ObstacleType.from_string(obstacle_type)
        if obstacle_type is None:
            raise ValueError("unknown obstacle type")

        obstacle_id = self._new_id()
        obstacle = default_obstacle(obstacle_id, obstacle_type, x, z, label, length, width, height)
        self.obstacles.append(obstacle)
        logging.debug(f"Added {obstacle_type.value} obstacle {obstacle_id} at ({x}, {z})")
        return obstacle

    def obstacle(self, obstacle_id: str) -> Obstacle:
        for obstacle in self.obstacles:
            if obstacle.id == obstacle_id:
                return obstacle
        raise KeyError(f"no obstacle with id {obstacle_id}")

    def move_obstacle(self, obstacle_id: str, x: float, z: float) -> Obstacle:
        obstacle = self.obstacle(obstacle_id)
        obstacle.move_to(x, z)
        return obstacle

    def remove_obstacle(self, obstacle_id: str):
        obstacle = self.obstacle(obstacle_id)
        self.obstacles.remove(obstacle)

    def compute(self) -> Design:
        return design(self.roof_polygon, self.panel, self.params, tuple(self.obstacles))

    def _new_id(self) -> str:
        taken = {o.id for o in self.obstacles}
        while f"obstacle-{self._next_id}" in taken:
            self._next_id += 1
        obstacle_id = f"obstacle-{self._next_id}"
        self._next_id += 1
        return obstacle_id

    def to_dict(self) -> dict:
        return {
            "roof_polygon": [list(p.as_tuple()) for p in self.roof_polygon],
            "panel": asdict(self.panel),
            "params": self.params.to_dict(),
            "obstacles": [_obstacle_to_dict(o) for o in self.obstacles],
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'DesignSession':
        panel = d["panel"]
        if isinstance(panel, str):
            label = panel
            panel = panel_option(label)
            if panel is None:
                raise ValueError(f"unknown panel option {label}")
        else:
            panel = PanelSpec(**panel)

        return cls(
            roof_polygon=d["roof_polygon"],
            panel=panel,
            params=DesignParams.from_dict(d.get("params", {})),
            obstacles=[_obstacle_from_dict(o) for o in d.get("obstacles", [])])

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, s: str) -> 'DesignSession':
        return cls.from_dict(json.loads(s))


def _obstacle_to_dict(obstacle: Obstacle) -> dict:
    return {
        "id": obstacle.id,
        "position": list(obstacle.position.as_tuple()),
        "length": obstacle.length,
        "width": obstacle.width,
        "height": obstacle.height,
        "elevation": obstacle.elevation,
        "label": obstacle.label,
        "obstacle_type": obstacle.obstacle_type.value,
    }


def _obstacle_from_dict(d: dict) -> Obstacle:
    obstacle_type = ObstacleType.from_string(d.get("obstacle_type", ObstacleType.CUSTOM))
    if obstacle_type is None:
        raise ValueError(f"unknown obstacle type {d.get('obstacle_type')}")
    x, z = d["position"]
    return Obstacle(
        id=str(d["id"]),
        position=Point2D(float(x), float(z)),
        length=float(d["length"]),
        width=float(d["width"]),
        height=float(d.get("height", 0.0)),
        elevation=float(d.get("elevation", 0.0)),
        label=d.get("label"),
        obstacle_type=obstacle_type)
