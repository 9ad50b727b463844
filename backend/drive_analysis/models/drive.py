"""
Merged drive and analysis data model.

A merged drive is one logical journey built from consecutive raw drives:
- constituents in start-time order
- the gaps between them classified as stops
- totals rounded to 2 decimals for presentation

Optional fields are true optionals (None), never zero or empty-string
sentinels.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class StopType(str, Enum):
    """Cause of a gap between two constituents of a merged drive."""

    SHORT = "short"
    CHARGING = "charging"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class DriveStop:
    """Gap between two consecutive raw drives inside one merged drive."""

    location: str  # ending location of the earlier drive
    duration_minutes: float
    stop_type: StopType
    started_at: float  # earlier drive's end
    ended_at: float    # later drive's start


@dataclass(frozen=True)
class MergedDrive:
    """
    Aggregate of one or more raw drives forming one logical journey.

    Invariants:
    - driving_duration_minutes <= total_duration_minutes
    - len(stops) == len(original_drive_ids) - 1
    """

    id: str
    original_drive_ids: tuple[int, ...]

    started_at: float
    ended_at: float

    starting_location: str
    ending_location: str
    starting_battery: float
    ending_battery: float

    total_distance: float
    total_duration_minutes: float
    driving_duration_minutes: float

    stops: tuple[DriveStop, ...] = field(default_factory=tuple)

    autopilot_distance: float = 0.0
    autopilot_percentage: float = 0.0

    # start battery % minus end battery %; negative means net charging
    energy_consumed: float = 0.0

    average_speed: float = 0.0
    max_speed: float = 0.0

    # True when at least one constituent carried an autopilot value
    autopilot_reported: bool = False

    @property
    def drive_count(self) -> int:
        return len(self.original_drive_ids)

    @property
    def stop_duration_minutes(self) -> float:
        return self.total_duration_minutes - self.driving_duration_minutes

    def count_stops(self, stop_type: StopType) -> int:
        return sum(1 for stop in self.stops if stop.stop_type == stop_type)


@dataclass(frozen=True)
class BatteryConsumption:
    """Battery usage estimate for a merged drive."""

    percentage_used: float
    estimated_kwh_used: float
    efficiency_miles_per_kwh: Optional[float] = None
    net_charging: bool = False


@dataclass(frozen=True)
class FSDAnalysis:
    """Autonomous-driving (FSD/Autopilot) share of a merged drive."""

    total_autopilot_miles: float
    fsd_percentage: float
    autopilot_available: bool
    note: Optional[str] = None
    telemetry_reported: bool = False


@dataclass(frozen=True)
class DriveAnalysis:
    """Full analysis bundle for one merged drive."""

    merged_drive: MergedDrive
    battery_consumption: BatteryConsumption
    fsd_analysis: FSDAnalysis
    summary: str
