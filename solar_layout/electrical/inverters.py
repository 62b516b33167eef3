# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
"""String inverter catalogue and series-string sizing"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import math

# Cells at standard test conditions:
STC_TEMP_C = 25.0

# Inverters may be undersized relative to the DC array by this much:
INVERTER_UNDERSIZE_RATIO = 0.8

# DC/AC ratio used to decide how many inverters an array needs:
DC_AC_RATIO = 1.3

# Below this % margin to the inverter's max input voltage, warn:
LOW_VOLTAGE_MARGIN_PCT = 5.0


@dataclass(frozen=True)
class InverterModel:
    id: str
    brand: str
    model: str
    rated_power_kw: float
    mppt_count: int
    strings_per_mppt: int
    mppt_voltage_min: float
    mppt_voltage_max: float
    max_input_voltage: float
    max_input_current: float
    max_short_circuit_current: float
    output_voltage: float
    efficiency_pct: float
    inverter_type: str = "string"


INVERTER_DATABASE: Tuple[InverterModel, ...] = (
    InverterModel("growatt-3kw", "Growatt", "MIN 3000TL-X", 3, 1, 1, 80, 500, 550, 13, 16.3, 230, 97.5),
    InverterModel("growatt-5kw", "Growatt", "MIN 5000TL-X", 5, 2, 1, 80, 550, 550, 13, 16.3, 230, 97.6),
    InverterModel("growatt-8kw", "Growatt", "MOD 8000TL3-X", 8, 2, 2, 200, 850, 1000, 14, 18, 400, 98.1),
    InverterModel("growatt-10kw", "Growatt", "MOD 10KTL3-X", 10, 2, 2, 200, 850, 1000, 14, 18, 400, 98.2),
    InverterModel("growatt-15kw", "Growatt", "MOD 15KTL3-X", 15, 2, 2, 200, 850, 1000, 22, 28, 400, 98.4),
    InverterModel("growatt-25kw", "Growatt", "MID 25KTL3-X", 25, 3, 2, 200, 1000, 1100, 18, 23, 400, 98.5),
    InverterModel("growatt-50kw", "Growatt", "MAX 50KTL3 LV", 50, 5, 2, 200, 1000, 1100, 18, 23, 400, 98.7),
    InverterModel("sungrow-5kw", "Sungrow", "SG5.0RS", 5, 2, 1, 80, 560, 600, 12.5, 15, 230, 97.7),
    InverterModel("sungrow-10kw", "Sungrow", "SG10RT", 10, 2, 2, 180, 850, 1000, 15, 20, 400, 98.3),
    InverterModel("sungrow-20kw", "Sungrow", "SG20RT", 20, 2, 3, 180, 850, 1000, 22, 30, 400, 98.5),
    InverterModel("sungrow-50kw", "Sungrow", "SG50CX-P2", 50, 5, 2, 200, 1000, 1100, 15, 20, 400, 98.7),
    InverterModel("huawei-5kw", "Huawei", "SUN2000-5KTL-L1", 5, 2, 2, 90, 560, 600, 11, 15, 230, 98.0),
    InverterModel("huawei-10kw", "Huawei", "SUN2000-10KTL-M1", 10, 2, 2, 200, 850, 1080, 13.5, 18, 400, 98.4),
    InverterModel("huawei-20kw", "Huawei", "SUN2000-20KTL-M2", 20, 2, 3, 200, 850, 1080, 22, 30, 400, 98.6),
    InverterModel("abb-5kw", "ABB/FIMER", "UNO-DM-5.0-TL", 5, 2, 1, 90, 530, 580, 12, 15, 230, 97.3),
    InverterModel("abb-10kw", "ABB/FIMER", "PVS-10-TL", 10, 2, 2, 200, 800, 950, 14, 18, 400, 98.0),
)


def inverter_by_id(inverter_id: str) -> Optional[InverterModel]:
    for inverter in INVERTER_DATABASE:
        if inverter.id == inverter_id:
            return inverter
    return None


@dataclass(frozen=True)
class PanelElectricals:
    voc: float
    vmp: float
    isc: float
    imp: float
    temp_coeff_voc: float
    """%/°C, negative"""
    temp_coeff_isc: float
    """%/°C, positive"""
    temp_coeff_pmax: float


def estimate_panel_electricals(watt_peak: float) -> PanelElectricals:
    """Typical datasheet values for a panel of the given wattage"""
    if watt_peak >= 600:
        return PanelElectricals(51.5, 43.5, 15.6, 14.8, -0.25, 0.048, -0.30)
    elif watt_peak >= 540:
        return PanelElectricals(49.8, 41.2, 14.0, 13.3, -0.27, 0.050, -0.34)
    elif watt_peak >= 450:
        return PanelElectricals(49.0, 40.8, 11.7, 11.1, -0.28, 0.050, -0.35)
    elif watt_peak >= 400:
        return PanelElectricals(44.5, 37.2, 11.5, 10.8, -0.29, 0.050, -0.37)
    else:
        return PanelElectricals(40.2, 33.5, 10.7, 10.0, -0.30, 0.048, -0.38)


@dataclass(frozen=True)
class TempCorrection:
    voc: float
    vmp: float
    isc: float
    imp: float


def _corrected(panel: PanelElectricals, delta_t: float) -> TempCorrection:
    v_factor = 1 + (panel.temp_coeff_voc / 100) * delta_t
    i_factor = 1 + (panel.temp_coeff_isc / 100) * delta_t
    return TempCorrection(voc=panel.voc * v_factor,
                          vmp=panel.vmp * v_factor,
                          isc=panel.isc * i_factor,
                          imp=panel.imp * i_factor)


def apply_temp_correction(panel: PanelElectricals,
                          ambient_temp_min: float,
                          ambient_temp_max: float,
                          cell_temp_rise: float = 25.0) -> Tuple[TempCorrection, TempCorrection]:
    """
    (cold, hot) corrected values. Cold is the coldest ambient with no irradiance
    (max Voc); hot is the hottest ambient plus the cell temperature rise (min Vmp).
    """
    cold = _corrected(panel, ambient_temp_min - STC_TEMP_C)
    hot = _corrected(panel, ambient_temp_max + cell_temp_rise - STC_TEMP_C)
    return cold, hot


@dataclass(frozen=True)
class StringConfig:
    max_panels_per_string: int
    min_panels_per_string: int
    recommended_panels_per_string: int
    total_strings: int
    strings_per_mppt: int
    unused_panels: int

    string_voc_max: float
    string_vmp_min: float
    string_vmp_nominal: float
    string_isc: float

    voltage_margin_high_pct: float
    voltage_margin_mppt_pct: float
    current_margin_pct: float

    warnings: List[str] = field(default_factory=list)
    is_valid: bool = True


def calculate_string_config(total_panels: int,
                            inverter: InverterModel,
                            electricals: PanelElectricals,
                            ambient_temp_min: float = 0.0,
                            ambient_temp_max: float = 45.0) -> StringConfig:
    """
    Size series strings so that:
    * string Voc on the coldest morning stays under the inverter's max input voltage,
    * string Vmp on the hottest afternoon stays over the MPPT minimum,
    * nominal string Vmp fits the MPPT window, using as many panels as possible.
    """
    cold, hot = apply_temp_correction(electricals, ambient_temp_min, ambient_temp_max)
    warnings = []

    max_per_string = math.floor(inverter.max_input_voltage / cold.voc)
    min_per_string = math.ceil(inverter.mppt_voltage_min / hot.vmp)
    mppt_max_per_string = math.floor(inverter.mppt_voltage_max / electricals.vmp)
    recommended = max(1, min(max_per_string, max(min_per_string, mppt_max_per_string)))

    strings_available = inverter.mppt_count * inverter.strings_per_mppt
    total_strings = min(strings_available, math.ceil(total_panels / recommended))
    strings_per_mppt = math.ceil(total_strings / inverter.mppt_count)

    panels_used = total_strings * recommended
    unused = total_panels - panels_used

    string_voc_max = cold.voc * recommended
    string_vmp_min = hot.vmp * recommended
    string_vmp_nominal = electricals.vmp * recommended
    string_isc = cold.isc

    voltage_margin_high = (inverter.max_input_voltage - string_voc_max) / inverter.max_input_voltage * 100
    voltage_margin_mppt = (string_vmp_min - inverter.mppt_voltage_min) / inverter.mppt_voltage_min * 100
    current_margin = (inverter.max_short_circuit_current - string_isc) / inverter.max_short_circuit_current * 100

    is_valid = True
    if string_voc_max > inverter.max_input_voltage:
        warnings.append(f"String Voc ({string_voc_max:.1f}V) exceeds max input voltage ({inverter.max_input_voltage}V)")
        is_valid = False
    if string_vmp_min < inverter.mppt_voltage_min:
        warnings.append(f"String Vmp at high temperature ({string_vmp_min:.1f}V) below MPPT min ({inverter.mppt_voltage_min}V)")
        is_valid = False
    if string_vmp_nominal > inverter.mppt_voltage_max:
        warnings.append(f"String Vmp ({string_vmp_nominal:.1f}V) exceeds MPPT max ({inverter.mppt_voltage_max}V)")
        is_valid = False
    if string_isc > inverter.max_short_circuit_current:
        warnings.append(f"String Isc ({string_isc:.1f}A) exceeds max short circuit current ({inverter.max_short_circuit_current}A)")
        is_valid = False
    if unused > 0:
        warnings.append(f"{unused} panel(s) unassigned. Consider adjusting string size or adding inverter capacity.")
    if total_panels > panels_used + recommended:
        warnings.append(f"Consider adding another inverter: {total_panels - panels_used} excess panels.")
    if voltage_margin_high < LOW_VOLTAGE_MARGIN_PCT:
        warnings.append(f"Low voltage safety margin ({voltage_margin_high:.1f}%). Consider reducing panels per string.")

    return StringConfig(
        max_panels_per_string=max_per_string,
        min_panels_per_string=min_per_string,
        recommended_panels_per_string=recommended,
        total_strings=total_strings,
        strings_per_mppt=strings_per_mppt,
        unused_panels=unused,
        string_voc_max=string_voc_max,
        string_vmp_min=string_vmp_min,
        string_vmp_nominal=string_vmp_nominal,
        string_isc=string_isc,
        voltage_margin_high_pct=voltage_margin_high,
        voltage_margin_mppt_pct=voltage_margin_mppt,
        current_margin_pct=current_margin,
        warnings=warnings,
        is_valid=is_valid)


def auto_select_inverter(capacity_kw: float) -> InverterModel:
    """Smallest inverter that can take the array (allowing it to be 20% undersized)"""
    by_size = sorted(INVERTER_DATABASE, key=lambda inv: inv.rated_power_kw)
    for inverter in by_size:
        if inverter.rated_power_kw >= capacity_kw * INVERTER_UNDERSIZE_RATIO:
            return inverter
    return by_size[-1]


@dataclass(frozen=True)
class SystemStringConfig:
    inverter: InverterModel
    inverter_count: int
    string_config: StringConfig
    total_inverter_capacity_kw: float
    dc_ac_ratio: float


def calculate_system_config(total_panels: int,
                            watt_peak: float,
                            inverter: InverterModel,
                            electricals: PanelElectricals,
                            ambient_temp_min: float = 0.0,
                            ambient_temp_max: float = 45.0) -> SystemStringConfig:
    total_dc_kw = total_panels * watt_peak / 1000
    inverter_count = max(1, math.ceil(total_dc_kw / (inverter.rated_power_kw * DC_AC_RATIO)))
    panels_per_inverter = math.ceil(total_panels / inverter_count)

    string_config = calculate_string_config(
        panels_per_inverter,
        inverter,
        electricals,
        ambient_temp_min,
        ambient_temp_max)

    total_inverter_kw = inverter_count * inverter.rated_power_kw
    return SystemStringConfig(
        inverter=inverter,
        inverter_count=inverter_count,
        string_config=string_config,
        total_inverter_capacity_kw=total_inverter_kw,
        dc_ac_ratio=total_dc_kw / total_inverter_kw)


def inverter_suggestion(capacity_kw: float) -> str:
    if capacity_kw <= 0:
        return ""
    for limit in (3, 5, 8, 10, 15, 20, 30):
        if capacity_kw <= limit:
            return f"{limit}kW Inverter"
    if capacity_kw <= 50:
        return "2× 25kW Inverters"
    return f"{math.ceil(capacity_kw / 50)}× 50kW Inverters"
