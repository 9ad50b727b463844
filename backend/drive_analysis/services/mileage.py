"""
Driving history statistics: period mileage and location search.

Works on raw drives (not merged journeys), the way odometer-style questions
("how far did I drive this week", "what was the odometer at the office")
are answered.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from drive_analysis.models.raw import RawDrive
from drive_analysis.utils.rounding import round2


@dataclass(frozen=True)
class DailyMileage:
    """Miles and drive count for one UTC calendar day."""

    date: str  # YYYY-MM-DD
    miles: float
    drives: int


@dataclass(frozen=True)
class PeriodMileage:
    """Mileage totals for a period."""

    start: Optional[float]
    end: Optional[float]
    total_miles_driven: float
    total_drives: int
    total_drive_time_hours: float
    average_miles_per_drive: float
    daily_breakdown: tuple[DailyMileage, ...]


@dataclass(frozen=True)
class LocationMatch:
    """A drive that started or ended at a searched location."""

    drive_id: int
    started_at: float
    matched_end: str  # "start" or "end"
    location: str
    odometer: Optional[float]


def _drives_frame(drives: list[RawDrive]) -> pd.DataFrame:
    return pd.DataFrame({
        "started_at": [d.started_at for d in drives],
        "miles": [d.odometer_distance for d in drives],
        "minutes": [d.duration_minutes for d in drives],
    })


def summarize_period(
    drives: Iterable[RawDrive],
    start: Optional[float] = None,
    end: Optional[float] = None,
) -> PeriodMileage:
    """
    Total the mileage of drives starting within [start, end].

    Args:
        drives: Raw drives, any order
        start: Epoch seconds, inclusive (None = unbounded)
        end: Epoch seconds, inclusive (None = unbounded)
    """
    selected = [
        d for d in drives
        if (start is None or d.started_at >= start)
        and (end is None or d.started_at <= end)
    ]
    if not selected:
        return PeriodMileage(
            start=start,
            end=end,
            total_miles_driven=0.0,
            total_drives=0,
            total_drive_time_hours=0.0,
            average_miles_per_drive=0.0,
            daily_breakdown=(),
        )

    df = _drives_frame(selected)
    df["date"] = pd.to_datetime(df["started_at"], unit="s", utc=True).dt.strftime("%Y-%m-%d")

    daily = df.groupby("date", sort=True).agg(miles=("miles", "sum"), drives=("miles", "size"))
    breakdown = tuple(
        DailyMileage(date=str(date), miles=round2(float(row["miles"])), drives=int(row["drives"]))
        for date, row in daily.iterrows()
    )

    total_miles = float(np.sum(df["miles"].to_numpy()))
    return PeriodMileage(
        start=start,
        end=end,
        total_miles_driven=round2(total_miles),
        total_drives=len(selected),
        total_drive_time_hours=round2(float(df["minutes"].sum()) / 60),
        average_miles_per_drive=round2(float(np.mean(df["miles"].to_numpy()))),
        daily_breakdown=breakdown,
    )


def find_drives_at_location(drives: Iterable[RawDrive], query: str) -> list[LocationMatch]:
    """
    Find drives whose start or end location contains `query` (case-insensitive).

    When both ends match, the start wins and its odometer is reported.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    matches = []
    for drive in sorted(drives, key=lambda d: d.started_at):
        if needle in drive.starting_location.lower():
            matches.append(LocationMatch(
                drive_id=drive.id,
                started_at=drive.started_at,
                matched_end="start",
                location=drive.starting_location,
                odometer=drive.starting_odometer,
            ))
        elif needle in drive.ending_location.lower():
            matches.append(LocationMatch(
                drive_id=drive.id,
                started_at=drive.started_at,
                matched_end="end",
                location=drive.ending_location,
                odometer=drive.ending_odometer,
            ))
    return matches
