# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import argparse
import json
import logging
from dataclasses import asdict, replace

from solar_layout.datatypes import Orientation
from solar_layout.panels.panels import layout_geojson
from solar_layout.session import DesignSession


def _summary(session: DesignSession):
    design = session.compute()
    summary = {
        "stats": asdict(design.stats),
        "strings": [{"id": z.id, "label": z.label, "panels": len(z)} for z in design.strings],
        "target_panel_count": design.target_panel_count,
        "capacity_exceeds_roof": design.capacity_exceeds_roof,
        "wind_zone": design.wind_zone,
        "wind_warning": design.wind_warning,
        "earthing": asdict(design.earthing),
        "compliance": asdict(design.compliance),
    }
    if design.rcc is not None:
        summary["rcc"] = {**asdict(design.rcc), "structure_type": design.rcc.structure_type.value}
    if design.metal_roof is not None:
        summary["metal_roof"] = {**asdict(design.metal_roof), "clamp_type": design.metal_roof.clamp_type.value}
    if design.string_config is not None:
        summary["inverter"] = {
            "id": design.string_config.inverter.id,
            "count": design.string_config.inverter_count,
            "dc_ac_ratio": design.string_config.dc_ac_ratio,
            "warnings": design.string_config.string_config.warnings,
        }
    return summary, design


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Lay out solar panels on a flat roof and check the design")

    parser.add_argument("--session", metavar="FILE", required=True, help="Design session JSON file")
    parser.add_argument("--tilt", type=float, metavar="DEGREES", help="Panel tilt in degrees (overrides session)")
    parser.add_argument("--setback", type=float, metavar="METRES", help="Setback from the roof edge in metres (overrides session)")
    parser.add_argument("--target_kw", type=float, metavar="KW", help="Target capacity in kWp (overrides session)")
    parser.add_argument("--orientation", choices=[o.value for o in Orientation], help="Panel orientation (overrides session)")
    parser.add_argument("--panels_per_string", type=int, metavar="INT", help="Panels per series string (overrides session)")
    parser.add_argument("--geojson", metavar="FILE", help="Write the panel layout as GeoJSON to this file")
    parser.add_argument("--debug", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format='[%(asctime)s] %(levelname)s: %(message)s')

    with open(args.session) as f:
        session = DesignSession.from_json(f.read())

    overrides = {}
    if args.tilt is not None:
        overrides["tilt_degrees"] = args.tilt
    if args.setback is not None:
        overrides["setback_m"] = args.setback
    if args.target_kw is not None:
        overrides["target_capacity_kw"] = args.target_kw
    if args.orientation is not None:
        overrides["orientation"] = args.orientation
    if args.panels_per_string is not None:
        overrides["panels_per_string"] = args.panels_per_string
    session.params = replace(session.params, **overrides).validated()

    summary, design = _summary(session)
    if args.geojson:
        with open(args.geojson, 'w') as f:
            json.dump(layout_geojson(design.layout, design.strings), f)
        logging.info(f"Wrote layout of {design.panel_count} panels to {args.geojson}")

    print(json.dumps(summary, indent=2))
