# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from solar_layout.datatypes import Obstacle, Point2D, ObstacleType, default_obstacle
from solar_layout.obstacles import footprint_overlaps, blocked_by_obstacles, obstacle_footprint, \
    obstacle_area_m2
from solar_layout.test_utils.test_funcs import ParameterisedTestCase

TANK = Obstacle(id="tank", position=Point2D(5, 5), length=2, width=2)


class ObstaclesTest(ParameterisedTestCase):

    def test_footprint_overlaps(self):
        # inflated obstacle spans 3.5 to 6.5 on both axes
        self.parameterised_test([
            ((5, 5), 1, 1, True),
            ((2.5, 5), 1, 1, False),
            ((3.0, 5), 1, 1, False),
            ((3.01, 5), 1, 1, True),
            ((5, 7.0), 1, 1, False),
            ((5, 6.99), 1, 1, True),
            ((8, 8), 1, 1, False),
        ], lambda c, w, h: footprint_overlaps(c, w, h, TANK, 0.5))

    def test_clearance_margin(self):
        assert not footprint_overlaps((3.0, 5), 1, 1, TANK, 0.0)
        assert footprint_overlaps((3.0, 5), 1, 1, TANK, 0.6)

    def test_length_runs_along_x(self):
        wall = Obstacle(id="wall", position=Point2D(5, 5), length=8, width=0.2)
        assert footprint_overlaps((1.5, 5), 1, 1, wall, 0.0)
        assert not footprint_overlaps((5, 6), 1, 1, wall, 0.0)

    def test_blocked_by_obstacles(self):
        other = Obstacle(id="other", position=Point2D(1, 1), length=1, width=1)
        assert blocked_by_obstacles((1, 1), 1, 1, [TANK, other], 0.5)
        assert blocked_by_obstacles((5, 5), 1, 1, [other, TANK], 0.5)
        assert not blocked_by_obstacles((9, 9), 1, 1, [TANK, other], 0.5)
        assert not blocked_by_obstacles((5, 5), 1, 1, [], 0.5)

    def test_footprint_polygon(self):
        self.assertAlmostEqual(obstacle_footprint(TANK).area, 4.0)
        self.assertAlmostEqual(obstacle_footprint(TANK, 0.5).area, 9.0)
        assert obstacle_footprint(TANK).bounds == (4.0, 4.0, 6.0, 6.0)

    def test_obstacle_area(self):
        tank = default_obstacle("1", ObstacleType.WATER_TANK, 0, 0)
        lift = default_obstacle("2", ObstacleType.LIFT_ROOM, 5, 5)
        self.assertAlmostEqual(obstacle_area_m2([tank, lift]), 2.25 + 9.0)
        assert obstacle_area_m2([]) == 0

    def test_move_obstacle(self):
        obstacle = default_obstacle("1", ObstacleType.AC_UNIT, 0, 0, label="AC 1")
        obstacle.move_to(3, 4)
        assert obstacle.position == Point2D(3, 4)
        assert obstacle.length == 1.0
        assert obstacle.width == 0.8
        assert obstacle.label == "AC 1"

    def test_invalid_size(self):
        for length, width in [(-20, 2), (2, -0.5), (float("nan"), 1), (1, float("inf"))]:
            with self.subTest(f"{length} x {width}"):
                with self.assertRaises(ValueError):
                    Obstacle(id="bad", position=Point2D(5, 5), length=length, width=width)
        assert Obstacle(id="flat", position=Point2D(5, 5), length=0, width=0).area_m2 == 0
