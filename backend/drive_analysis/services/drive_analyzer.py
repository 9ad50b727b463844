"""
Drive analysis entry points.

Merges raw drives into journeys and bundles each journey with its battery,
autonomous-driving and text summary analysis. Pure: no I/O, no shared state.
"""

from __future__ import annotations

from typing import Iterable, Optional

from drive_analysis.models.drive import DriveAnalysis, MergedDrive
from drive_analysis.models.raw import RawDrive
from drive_analysis.services.aggregator import CHARGING_DELTA_PERCENT, MERGE_GAP_MINUTES
from drive_analysis.services.analyzers import (
    PACK_CAPACITY_KWH,
    analyze_battery_consumption,
    analyze_fsd_usage,
)
from drive_analysis.services.merger import merge_drives
from drive_analysis.services.summary import generate_drive_summary


def analyze_merged_drive(
    drive: MergedDrive,
    pack_capacity_kwh: float = PACK_CAPACITY_KWH,
) -> DriveAnalysis:
    battery = analyze_battery_consumption(drive, pack_capacity_kwh)
    fsd = analyze_fsd_usage(drive)
    return DriveAnalysis(
        merged_drive=drive,
        battery_consumption=battery,
        fsd_analysis=fsd,
        summary=generate_drive_summary(drive, battery, fsd),
    )


def analyze_drives(
    drives: Iterable[RawDrive],
    pack_capacity_kwh: float = PACK_CAPACITY_KWH,
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> list[DriveAnalysis]:
    """Analyze every merged drive, oldest first."""
    return [
        analyze_merged_drive(merged, pack_capacity_kwh)
        for merged in merge_drives(drives, merge_gap_minutes, charging_delta_percent)
    ]


def analyze_latest_drive(
    drives: Iterable[RawDrive],
    pack_capacity_kwh: float = PACK_CAPACITY_KWH,
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> Optional[DriveAnalysis]:
    """
    Analyze the most recent merged drive.

    Returns:
        DriveAnalysis for the chronologically last journey, or None when
        there are no drives
    """
    merged = merge_drives(drives, merge_gap_minutes, charging_delta_percent)
    if not merged:
        return None
    return analyze_merged_drive(merged[-1], pack_capacity_kwh)
