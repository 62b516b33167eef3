# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from solar_layout.datatypes import PanelSpec, Orientation, Obstacle, Point2D
from solar_layout.electrical.strings import partition_into_strings
from solar_layout.geos import point_in_polygon, shrink_polygon
from solar_layout.obstacles import footprint_overlaps
from solar_layout.panels.panels import place_panels, row_spacing_m, row_pitch_m, shadow_length_m, \
    target_panel_count, usable_polygon, layout_geojson
from solar_layout.test_utils.test_funcs import ParameterisedTestCase, load_test_json

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]
PANEL = PanelSpec(width_m=1.0, length_m=1.7, watt_peak=400, weight_kg=20, efficiency_pct=20)
TANK = Obstacle(id="tank", position=Point2D(5, 5), length=2, width=2)


def _l_shape():
    return load_test_json("roofs", "l_shape.json")["roof_polygon"]


def _xs(layout):
    return sorted({round(slot.position.x, 6) for slot in layout})


def _zs(layout):
    return sorted({round(slot.position.z, 6) for slot in layout})


class PanelPlacementTest(ParameterisedTestCase):

    def test_square_roof_no_obstacles(self):
        layout = place_panels(SQUARE, PANEL, Orientation.LANDSCAPE, tilt_degrees=0)
        assert len(layout) == 35
        assert layout.row_count == 7
        assert layout.panels_per_row == 5
        assert layout.uniform
        self.assertAlmostEqual(layout.row_pitch_m, 1.3)
        self.assertAlmostEqual(layout.column_pitch_m, 1.85)
        for actual, expected in zip(_xs(layout), [1.15, 3.0, 4.85, 6.7, 8.55]):
            self.assertAlmostEqual(actual, expected)
        for actual, expected in zip(_zs(layout), [1.1, 2.4, 3.7, 5.0, 6.3, 7.6, 8.9]):
            self.assertAlmostEqual(actual, expected)

    def test_square_roof_with_obstacle(self):
        unobstructed = place_panels(SQUARE, PANEL, Orientation.LANDSCAPE, tilt_degrees=0)
        layout = place_panels(SQUARE, PANEL, Orientation.LANDSCAPE, tilt_degrees=0, obstacles=[TANK])
        assert len(layout) == 8
        assert len(layout) < len(unobstructed)
        assert layout.row_count == 4
        for actual, expected in zip(_xs(layout), [1.15, 8.55]):
            self.assertAlmostEqual(actual, expected)
        for actual, expected in zip(_zs(layout), [3.05, 4.35, 5.65, 6.95]):
            self.assertAlmostEqual(actual, expected)

    def test_portrait(self):
        layout = place_panels(SQUARE, PANEL, Orientation.PORTRAIT, tilt_degrees=0)
        assert len(layout) == 32
        assert layout.row_count == 4
        assert layout.panels_per_row == 8
        assert layout[0].footprint_width == 1.0
        assert layout[0].footprint_height == 1.7

    def test_tilt_spreads_rows(self):
        flat = place_panels(SQUARE, PANEL, tilt_degrees=0)
        tilted = place_panels(SQUARE, PANEL, tilt_degrees=30)
        assert tilted.row_pitch_m > flat.row_pitch_m
        assert tilted.row_count < flat.row_count

    def test_panels_inside_polygon(self):
        for polygon in (SQUARE, _l_shape(), shrink_polygon(_l_shape(), 0.6)):
            for orientation in Orientation:
                layout = place_panels(polygon, PANEL, orientation, tilt_degrees=15, obstacles=[TANK])
                assert len(layout) > 0
                for slot in layout:
                    assert point_in_polygon(slot.position, polygon), f"{slot} outside {polygon}"

    def test_panels_clear_of_obstacles(self):
        obstacles = [TANK, Obstacle(id="lift", position=Point2D(4, 12), length=3, width=3)]
        for margin in (0.0, 0.5, 1.0):
            layout = place_panels(_l_shape(), PANEL, tilt_degrees=10, obstacles=obstacles, clearance_margin=margin)
            for slot in layout:
                for obstacle in obstacles:
                    assert not footprint_overlaps(slot.position, slot.footprint_width, slot.footprint_height,
                                                  obstacle, margin)

    def test_row_major_order(self):
        layout = place_panels(_l_shape(), PANEL, tilt_degrees=15)
        keys = [(slot.row, slot.column) for slot in layout]
        assert keys == sorted(keys)
        assert len(set(keys)) == len(keys)
        assert {slot.row for slot in layout} == set(range(layout.row_count))

    def test_deterministic(self):
        first = place_panels(_l_shape(), PANEL, tilt_degrees=15, obstacles=[TANK])
        second = place_panels(_l_shape(), PANEL, tilt_degrees=15, obstacles=[TANK])
        assert first == second

    def test_target_truncation(self):
        full = place_panels(SQUARE, PANEL, tilt_degrees=0)
        previous = 0
        for target in (0, 1, 10, 34, 35, 100):
            layout = place_panels(SQUARE, PANEL, tilt_degrees=0, target_count=target)
            assert len(layout) == min(target, len(full))
            assert layout.slots == full.slots[:len(layout)]
            assert len(layout) >= previous
            previous = len(layout)

    def test_truncated_layout_strings_cover_every_panel(self):
        layout = place_panels(SQUARE, PANEL, tilt_degrees=0, target_count=26)
        zones = partition_into_strings(len(layout), 12)
        assert [len(z) for z in zones] == [12, 12, 2]

    def test_negative_target(self):
        with self.assertRaises(ValueError):
            place_panels(SQUARE, PANEL, target_count=-1)

    def test_degenerate_polygons(self):
        self.parameterised_test([
            ([], 0),
            ([(0, 0), (10, 10)], 0),
            ([(0, 0), (5, 0), (10, 0)], 0),
            ([(0, 0), (0.5, 0), (0.5, 0.5), (0, 0.5)], 0),
        ], lambda polygon: len(place_panels(polygon, PANEL)))

    def test_simple_grid_fallback(self):
        # too tight for the inset scan, but a panel fits
        layout = place_panels([(0, 0), (2.0, 0), (2.0, 1.2), (0, 1.2)], PANEL, tilt_degrees=0)
        assert len(layout) == 1
        assert not layout.uniform
        self.assertAlmostEqual(layout[0].position.x, 0.85)
        self.assertAlmostEqual(layout[0].position.z, 0.5)


class PanelHelpersTest(ParameterisedTestCase):

    def test_row_spacing(self):
        self.parameterised_test([
            (1.0, 0, 0.3),
            (1.0, 15, 0.3),
            (1.0, 45, 1.0),
            (2.0, 30, 1.1547005),
        ], row_spacing_m, delta=1e-6)
        self.parameterised_test([
            (1.0, 0, 1.3),
            (1.0, 45, 2.0),
        ], row_pitch_m, delta=1e-6)
        self.parameterised_test([
            (1.0, 0, 0.0),
            (1.0, 15, 0.2679492),
            (2.0, 30, 1.1547005),
        ], shadow_length_m, delta=1e-6)

    def test_target_panel_count(self):
        self.parameterised_test([
            (5, PANEL, 13),
            (4, PANEL, 10),
            (0.4, PANEL, 1),
            (0, PANEL, None),
            (-3, PANEL, None),
            (None, PANEL, None),
        ], target_panel_count)

    def test_usable_polygon(self):
        boundary = shrink_polygon(SQUARE, 1)
        assert usable_polygon(SQUARE, boundary) == boundary
        assert usable_polygon(SQUARE, [], None) == [Point2D(*p) for p in SQUARE]
        assert usable_polygon(SQUARE, [], 0) == [Point2D(*p) for p in SQUARE]
        assert usable_polygon(SQUARE, [], 6) == []

    def test_layout_geojson(self):
        layout = place_panels(SQUARE, PANEL, tilt_degrees=0)
        zones = partition_into_strings(len(layout), 12)
        geojson = layout_geojson(layout, zones)
        assert geojson["type"] == "FeatureCollection"
        features = geojson["features"]
        assert len(features) == 35
        assert features[0]["geometry"]["type"] == "Polygon"
        assert features[0]["properties"] == {"index": 0, "row": 0, "column": 0, "string": "string-1"}
        assert features[12]["properties"]["string"] == "string-2"
        assert features[34]["properties"]["string"] == "string-3"
        assert layout_geojson(layout)["features"][0]["properties"]["string"] is None
