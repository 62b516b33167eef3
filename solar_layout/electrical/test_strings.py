# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from solar_layout.electrical.strings import partition_into_strings
from solar_layout.test_utils.test_funcs import ParameterisedTestCase


class StringPartitionTest(ParameterisedTestCase):

    def test_zone_sizes(self):
        self.parameterised_test([
            (26, 12, [12, 12, 2]),
            (24, 12, [12, 12]),
            (5, 12, [5]),
            (1, 1, [1]),
            (7, 3, [3, 3, 1]),
            (0, 12, []),
        ], lambda n, pps: [len(z) for z in partition_into_strings(n, pps)])

    def test_every_panel_in_exactly_one_zone(self):
        for n in (0, 1, 11, 12, 13, 100):
            for pps in (1, 5, 12, 50):
                zones = partition_into_strings(n, pps)
                indices = [i for z in zones for i in z.panel_indices]
                assert indices == list(range(n)), f"{n} panels, {pps} per string"

    def test_zone_ids_and_labels(self):
        zones = partition_into_strings(26, 12)
        assert [z.id for z in zones] == ["string-1", "string-2", "string-3"]
        assert [z.label for z in zones] == ["String 1", "String 2", "String 3"]
        assert zones[2].panel_indices == (24, 25)

    def test_invalid(self):
        for n, pps in [(10, 0), (10, -2), (-1, 12)]:
            with self.assertRaises(ValueError):
                partition_into_strings(n, pps)
