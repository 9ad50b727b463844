"""
Drive aggregator.

Builds one MergedDrive from an ordered group of raw drives and classifies
the gaps between them as stops.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

from drive_analysis.models.drive import DriveStop, MergedDrive, StopType
from drive_analysis.models.raw import RawDrive
from drive_analysis.utils.rounding import round2


logger = logging.getLogger(__name__)


MERGE_GAP_MINUTES = float(os.getenv("DRIVE_MERGE_GAP_MINUTES", "7"))  # short-stop ceiling
CHARGING_DELTA_PERCENT = float(os.getenv("DRIVE_CHARGING_DELTA_PERCENT", "5"))  # battery gain => charging


class EmptyDriveGroupError(ValueError):
    """Raised when a merged drive is requested for an empty group."""


def gap_minutes(previous: RawDrive, following: RawDrive) -> float:
    """Minutes between the end of one drive and the start of the next."""
    return (following.started_at - previous.ended_at) / 60


def battery_delta(previous: RawDrive, following: RawDrive) -> float:
    """Battery percent gained between two drives (negative when lost)."""
    return following.starting_battery - previous.ending_battery


def classify_stop(
    gap: float,
    delta: float,
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> StopType:
    if delta > charging_delta_percent:
        return StopType.CHARGING
    if gap < merge_gap_minutes:
        return StopType.SHORT
    return StopType.EXCLUDED


def detect_stops(
    drives: Sequence[RawDrive],
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> list[DriveStop]:
    """
    Classify the gap between every adjacent pair of drives.

    Args:
        drives: Constituents of one merged drive, in start-time order
        merge_gap_minutes: Gaps shorter than this are short stops
        charging_delta_percent: Battery gains above this are charging stops

    Returns:
        One DriveStop per adjacent pair
    """
    stops = []
    for current, following in zip(drives, drives[1:]):
        gap = gap_minutes(current, following)
        stop_type = classify_stop(
            gap,
            battery_delta(current, following),
            merge_gap_minutes,
            charging_delta_percent,
        )
        if stop_type is StopType.EXCLUDED:
            # Unreachable for groups built with the same thresholds
            logger.warning(
                f"Stop between drives {current.id} and {following.id} "
                f"classified as excluded ({gap:.2f} min gap)"
            )

        stops.append(DriveStop(
            location=current.ending_location,
            duration_minutes=round2(gap),
            stop_type=stop_type,
            started_at=current.ended_at,
            ended_at=following.started_at,
        ))
    return stops


def aggregate_drives(
    drives: Sequence[RawDrive],
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> MergedDrive:
    """
    Combine an ordered, non-empty group of raw drives into one MergedDrive.

    Raises:
        EmptyDriveGroupError: If `drives` is empty
    """
    if len(drives) == 0:
        raise EmptyDriveGroupError("Cannot create merged drive from empty group")

    first, last = drives[0], drives[-1]

    total_distance = sum(d.odometer_distance for d in drives)
    total_autopilot = sum(d.autopilot_distance or 0.0 for d in drives)
    total_duration = (last.ended_at - first.started_at) / 60
    driving_duration = sum(d.duration_minutes for d in drives)

    max_speed = max((d.max_speed or 0.0) for d in drives)
    if driving_duration > 0:
        average_speed = total_distance / (driving_duration / 60)
    else:
        average_speed = 0.0

    if total_distance > 0:
        autopilot_percentage = round2(total_autopilot / total_distance * 100)
    else:
        autopilot_percentage = 0.0

    return MergedDrive(
        id="merged_" + "_".join(str(d.id) for d in drives),
        original_drive_ids=tuple(d.id for d in drives),
        started_at=first.started_at,
        ended_at=last.ended_at,
        starting_location=first.starting_location,
        ending_location=last.ending_location,
        starting_battery=first.starting_battery,
        ending_battery=last.ending_battery,
        total_distance=round2(total_distance),
        total_duration_minutes=round2(total_duration),
        driving_duration_minutes=round2(driving_duration),
        stops=tuple(detect_stops(drives, merge_gap_minutes, charging_delta_percent)),
        autopilot_distance=round2(total_autopilot),
        autopilot_percentage=autopilot_percentage,
        energy_consumed=first.starting_battery - last.ending_battery,
        average_speed=round2(average_speed),
        max_speed=round2(max_speed),
        autopilot_reported=any(d.autopilot_distance is not None for d in drives),
    )
