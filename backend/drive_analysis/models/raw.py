"""
Raw drive model (provider-format, unmerged).

Loaders and the API convert provider payloads into this structure before
any merging or analysis happens. The engine never mutates a RawDrive.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RawDrive:
    """One continuous period of motion as reported by the telemetry source."""

    id: int
    started_at: float  # epoch seconds
    ended_at: float    # epoch seconds, >= started_at

    starting_location: str
    ending_location: str

    starting_battery: float  # percent, 0-100
    ending_battery: float    # percent, 0-100

    odometer_distance: float  # miles driven during this record

    average_speed: Optional[float] = None  # mph
    max_speed: Optional[float] = None      # mph
    autopilot_distance: Optional[float] = None  # miles, <= odometer_distance

    starting_odometer: Optional[float] = None
    ending_odometer: Optional[float] = None

    @property
    def duration_minutes(self) -> float:
        return (self.ended_at - self.started_at) / 60
