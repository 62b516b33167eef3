# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from solar_layout.electrical.inverters import auto_select_inverter, inverter_suggestion, \
    estimate_panel_electricals, apply_temp_correction, calculate_string_config, calculate_system_config, \
    inverter_by_id, INVERTER_DATABASE
from solar_layout.test_utils.test_funcs import ParameterisedTestCase


class InverterTest(ParameterisedTestCase):

    def test_inverter_suggestion(self):
        self.parameterised_test([
            (0, ""),
            (-1, ""),
            (2.5, "3kW Inverter"),
            (3, "3kW Inverter"),
            (12, "15kW Inverter"),
            (30, "30kW Inverter"),
            (45, "2× 25kW Inverters"),
            (120, "3× 50kW Inverters"),
        ], inverter_suggestion)

    def test_auto_select_inverter(self):
        self.parameterised_test([
            (3, "growatt-3kw"),
            (10, "growatt-8kw"),
            (14, "growatt-15kw"),
        ], lambda kw: auto_select_inverter(kw).id)
        assert auto_select_inverter(500).rated_power_kw == 50

    def test_inverter_by_id(self):
        assert inverter_by_id("huawei-10kw").brand == "Huawei"
        assert inverter_by_id("nonesuch") is None
        assert len({inv.id for inv in INVERTER_DATABASE}) == len(INVERTER_DATABASE)

    def test_temp_correction(self):
        electricals = estimate_panel_electricals(400)
        cold, hot = apply_temp_correction(electricals, 0, 45)
        self.assertAlmostEqual(cold.voc, 44.5 * 1.0725)
        self.assertAlmostEqual(hot.vmp, 37.2 * 0.8695)
        assert cold.voc > electricals.voc > hot.voc

    def test_panel_electricals_bands(self):
        self.parameterised_test([
            (630, 51.5),
            (550, 49.8),
            (500, 49.0),
            (400, 44.5),
            (335, 40.2),
        ], lambda w: estimate_panel_electricals(w).voc)

    def test_string_config(self):
        config = calculate_string_config(20, inverter_by_id("growatt-10kw"), estimate_panel_electricals(400))
        assert config.max_panels_per_string == 20
        assert config.min_panels_per_string == 7
        assert config.recommended_panels_per_string == 20
        assert config.total_strings == 1
        assert config.unused_panels == 0
        assert config.is_valid
        self.assertAlmostEqual(config.string_voc_max, 20 * 44.5 * 1.0725)
        assert any("Low voltage safety margin" in w for w in config.warnings)

    def test_string_config_too_many_panels(self):
        config = calculate_string_config(200, inverter_by_id("growatt-10kw"), estimate_panel_electricals(400))
        assert config.total_strings == 4
        assert config.unused_panels == 120
        assert any("unassigned" in w for w in config.warnings)
        assert any("adding another inverter" in w for w in config.warnings)

    def test_system_config(self):
        system = calculate_system_config(40, 400, inverter_by_id("growatt-10kw"), estimate_panel_electricals(400))
        assert system.inverter_count == 2
        assert system.total_inverter_capacity_kw == 20
        self.assertAlmostEqual(system.dc_ac_ratio, 0.8)
        assert system.string_config.total_strings == 1
