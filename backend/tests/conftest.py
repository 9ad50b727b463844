"""
Shared fixtures for drive analysis tests.
"""

import pytest

from drive_analysis.models.raw import RawDrive


def build_drive(
    drive_id: int,
    started_at: float,
    ended_at: float,
    distance: float = 10.0,
    starting_battery: float = 80.0,
    ending_battery: float = 75.0,
    autopilot_distance=0.0,
    max_speed=65.0,
    **kwargs,
) -> RawDrive:
    """Raw drive with `Location <id>A` -> `Location <id>B` labels."""
    return RawDrive(
        id=drive_id,
        started_at=started_at,
        ended_at=ended_at,
        starting_location=kwargs.pop("starting_location", f"Location {drive_id}A"),
        ending_location=kwargs.pop("ending_location", f"Location {drive_id}B"),
        starting_battery=starting_battery,
        ending_battery=ending_battery,
        odometer_distance=distance,
        autopilot_distance=autopilot_distance,
        max_speed=max_speed,
        **kwargs,
    )


@pytest.fixture
def make_drive():
    """Factory fixture for RawDrive records."""
    return build_drive
