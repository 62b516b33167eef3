# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from typing import List

from solar_layout.datatypes import StringZone


def partition_into_strings(panel_count: int, panels_per_string: int) -> List[StringZone]:
    """
    Wire panels into series strings in layout order: every `panels_per_string`
    panels starts a new string, the last one takes whatever is left over.

    Zones are numbered from 1 for display; `panel_indices` are 0-based indices
    into the panel layout.
    """
    if panels_per_string <= 0:
        raise ValueError(f"panels per string must be positive, was {panels_per_string}")
    if panel_count < 0:
        raise ValueError(f"panel count cannot be negative, was {panel_count}")

    zones = []
    for start in range(0, panel_count, panels_per_string):
        number = len(zones) + 1
        zones.append(StringZone(
            id=f"string-{number}",
            panel_indices=tuple(range(start, min(start + panels_per_string, panel_count))),
            label=f"String {number}"))
    return zones
