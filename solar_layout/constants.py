# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.

# Rows of tilted panels are never closer than this, even at 0 degrees tilt, so that
# there is room to walk between them for cleaning and maintenance.
MIN_ROW_GAP_M = 0.3

# The bounding box of the usable roof area is inset by this much before the
# candidate scan, so that panels are not placed flush with the raw extremes:
SCAN_MARGIN_M = 0.3

# Default gap between panels in the same row:
DEFAULT_PANEL_GAP_M = 0.15

# Obstacle footprints are inflated by this much on each side before testing whether
# a panel overlaps them (access and shading clearance):
DEFAULT_OBSTACLE_CLEARANCE_M = 0.5

# Miter limit for polygon erosion: a vertex is never moved further than this multiple
# of the setback distance, however sharp the corner.
MAX_MITER_RATIO = 10.0

# Numerical tolerance for inclusive scan ranges and degenerate vector checks:
EPSILON = 1e-9

# Yield model. Average peak-sun-hours per day and the performance ratio covering
# losses due to cabling, inverter, soiling and temperature:
PEAK_SUN_HOURS = 5.5
PERFORMANCE_RATIO = 0.75
# A panel mounted far from the optimal tilt never loses more than this fraction:
MIN_TILT_FACTOR = 0.7

# Weight of mounting structure per panel, used for the distributed structural load
# reported in the design stats:
MOUNTING_WEIGHT_PER_PANEL_KG = 5.0

# Dead load multipliers: ballasted systems add concrete blocks to hold the
# structure down, anchored systems transmit only the weight of the panels.
ANCHOR_LOAD_FACTOR = 1.0
BALLAST_LOAD_FACTOR = 1.5

# Metal roof hardware:
STANDARD_RAIL_LENGTH_M = 4.2
RAILS_PER_ROW = 2

# Default commercial rates (INR per kW) for the EPC quotation figures:
EPC_RATE_PER_KW = 60000
MATERIAL_RATE_PER_KW = 42000

# Default number of panels wired in series, when not derived from the inverter:
DEFAULT_PANELS_PER_STRING = 12

# Fire code walkway minimums (metres):
MIN_PERIMETER_WALKWAY_M = 0.6
MIN_CENTRAL_WALKWAY_M = 1.0
