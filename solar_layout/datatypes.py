import math
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Iterator, Union


@dataclass(frozen=True)
class Point2D:
    """A point on the flat local plane of a design, in metres"""
    x: float
    z: float

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.z


class _NamedEnum(Enum):

    @classmethod
    def from_string(cls, string: Optional[str]):
        """Look up a member by its value, case-insensitively. None if not found."""
        if string is None:
            return None
        if isinstance(string, cls):
            return string
        string = str(string).strip().lower()
        for member in cls:
            if member.value == string:
                return member
        return None


class Orientation(_NamedEnum):
    """
    LANDSCAPE mounts panels on their sides: the long edge runs along the row.
    PORTRAIT puts the long edge across the row, as the row depth.
    """
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


class RoofType(_NamedEnum):
    RCC = "rcc"
    METAL_SHEET = "metal_sheet"
    TILE = "tile"
    GROUND_MOUNT = "ground_mount"


class StructureType(_NamedEnum):
    BALLAST = "ballast"
    ANCHOR = "anchor"


class ClampType(_NamedEnum):
    MID_CLAMP = "mid_clamp"
    END_CLAMP = "end_clamp"
    L_FOOT = "l_foot"


class ProjectCategory(_NamedEnum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"


class ObstacleType(_NamedEnum):
    WATER_TANK = "water_tank"
    LIFT_ROOM = "lift_room"
    STAIRCASE = "staircase"
    AC_UNIT = "ac_unit"
    PARAPET_WALL = "parapet_wall"
    CUSTOM = "custom"


# length (x), width (z), height in metres
OBSTACLE_DEFAULT_SIZES = {
    ObstacleType.WATER_TANK: (1.5, 1.5, 1.2),
    ObstacleType.LIFT_ROOM: (3.0, 3.0, 3.0),
    ObstacleType.STAIRCASE: (3.0, 2.0, 3.0),
    ObstacleType.AC_UNIT: (1.0, 0.8, 0.6),
    ObstacleType.PARAPET_WALL: (10.0, 0.3, 1.0),
    ObstacleType.CUSTOM: (2.0, 2.0, 1.5),
}


@dataclass
class Obstacle:
    """
    Something on the roof that panels must keep clear of. The footprint is an
    axis-aligned rectangle centred on `position`: `length` along x, `width` along z.

    Only the position changes after creation (when the obstacle is dragged around).
    """
    id: str
    position: Point2D
    length: float
    width: float
    height: float = 0.0
    elevation: float = 0.0
    label: Optional[str] = None
    obstacle_type: ObstacleType = ObstacleType.CUSTOM

    def __post_init__(self):
        for name, size in (("length", self.length), ("width", self.width)):
            if not math.isfinite(size) or size < 0:
                raise ValueError(f"obstacle {self.id} {name} must be a non-negative number, was {size}")

    def move_to(self, x: float, z: float):
        self.position = Point2D(x, z)

    @property
    def area_m2(self) -> float:
        return self.length * self.width


def default_obstacle(obstacle_id: str,
                     obstacle_type: ObstacleType,
                     x: float,
                     z: float,
                     label: str = None,
                     length: float = None,
                     width: float = None,
                     height: float = None) -> Obstacle:
    default_length, default_width, default_height = OBSTACLE_DEFAULT_SIZES[obstacle_type]
    return Obstacle(
        id=obstacle_id,
        position=Point2D(x, z),
        length=default_length if length is None else length,
        width=default_width if width is None else width,
        height=default_height if height is None else height,
        label=label,
        obstacle_type=obstacle_type)


@dataclass(frozen=True)
class PanelSpec:
    width_m: float
    length_m: float
    watt_peak: float
    weight_kg: float
    efficiency_pct: float
    cell_type: str = ""
    label: str = ""

    def __post_init__(self):
        if not self.width_m > 0 or not self.length_m > 0:
            raise ValueError(f"panel dimensions must be positive, were {self.width_m} x {self.length_m}")
        if not self.watt_peak > 0:
            raise ValueError(f"panel wattage must be positive, was {self.watt_peak}")
        if self.weight_kg < 0:
            raise ValueError(f"panel weight cannot be negative, was {self.weight_kg}")
        if not 0 < self.efficiency_pct <= 100:
            raise ValueError(f"panel efficiency must be in (0, 100], was {self.efficiency_pct}")

    def footprint(self, orientation: Orientation) -> Tuple[float, float]:
        """(size along the row, row depth) in metres for the given orientation"""
        if orientation == Orientation.LANDSCAPE:
            return self.length_m, self.width_m
        return self.width_m, self.length_m

    @property
    def area_m2(self) -> float:
        return self.width_m * self.length_m


PANEL_OPTIONS: Tuple[PanelSpec, ...] = (
    PanelSpec(label="630Wp Bifacial G12", watt_peak=630, length_m=2.465, width_m=1.303, weight_kg=35, cell_type="G12 210mm", efficiency_pct=23.3),
    PanelSpec(label="620Wp Bifacial", watt_peak=620, length_m=2.384, width_m=1.303, weight_kg=34, cell_type="N-Type Bifacial", efficiency_pct=23.0),
    PanelSpec(label="615Wp TOPCon", watt_peak=615, length_m=2.278, width_m=1.134, weight_kg=31, cell_type="N-Type TOPCon", efficiency_pct=22.8),
    PanelSpec(label="550W Panel", watt_peak=550, length_m=2.278, width_m=1.134, weight_kg=28.6, cell_type="Mono PERC", efficiency_pct=21.3),
    PanelSpec(label="540W Panel", watt_peak=540, length_m=2.278, width_m=1.134, weight_kg=28.2, cell_type="Mono PERC", efficiency_pct=21.0),
    PanelSpec(label="500W Panel", watt_peak=500, length_m=2.187, width_m=1.102, weight_kg=26.5, cell_type="Mono PERC", efficiency_pct=20.5),
    PanelSpec(label="450W Panel", watt_peak=450, length_m=2.094, width_m=1.038, weight_kg=24.0, cell_type="Mono PERC", efficiency_pct=19.8),
    PanelSpec(label="400W Panel", watt_peak=400, length_m=1.956, width_m=1.002, weight_kg=22.0, cell_type="Mono PERC", efficiency_pct=19.2),
    PanelSpec(label="335W Panel", watt_peak=335, length_m=1.690, width_m=0.996, weight_kg=18.5, cell_type="Poly", efficiency_pct=17.1),
)


def panel_option(label: str) -> Optional[PanelSpec]:
    for panel in PANEL_OPTIONS:
        if panel.label == label:
            return panel
    return None


@dataclass(frozen=True)
class PanelSlot:
    """One placed panel. `footprint_width` runs along x, `footprint_height` along z."""
    position: Point2D
    footprint_width: float
    footprint_height: float
    row: int
    column: int


@dataclass(frozen=True)
class PanelLayout:
    """
    Placed panels in row-major order (row ascending, then column ascending).

    String partitioning relies on this order, so it must never be re-sorted.
    """
    slots: Tuple[PanelSlot, ...] = ()
    row_pitch_m: float = 0.0
    column_pitch_m: float = 0.0
    uniform: bool = False

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[PanelSlot]:
        return iter(self.slots)

    def __getitem__(self, i: Union[int, slice]):
        return self.slots[i]

    @property
    def row_count(self) -> int:
        return len({slot.row for slot in self.slots})

    @property
    def panels_per_row(self) -> int:
        if not self.slots:
            return 0
        return max(Counter(slot.row for slot in self.slots).values())


@dataclass(frozen=True)
class StringZone:
    id: str
    panel_indices: Tuple[int, ...]
    label: str

    def __len__(self) -> int:
        return len(self.panel_indices)


@dataclass(frozen=True)
class DesignStats:
    """Read-only summary of a design, recomputed from scratch on every change"""
    total_panels: int = 0
    total_capacity_kw: float = 0.0
    total_roof_area_m2: float = 0.0
    usable_area_m2: float = 0.0
    occupied_area_m2: float = 0.0
    roof_utilization_pct: float = 0.0
    daily_energy_kwh: float = 0.0
    annual_energy_kwh: float = 0.0
    row_spacing_m: float = 0.0
    panels_per_row: int = 0
    total_rows: int = 0
    structural_load_kg_m2: float = 0.0
    inverter_suggestion: str = ""
    epc_revenue: float = 0.0
    material_cost: float = 0.0
    gross_profit: float = 0.0
