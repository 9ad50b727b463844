"""
Drive merger.

Partitions raw drives into logical journeys. Consecutive drives (in
start-time order) stay in one journey when the gap between them is short
or when the battery rose enough during the gap to imply charging.
"""

from __future__ import annotations

import logging
from typing import Iterable

from drive_analysis.models.drive import MergedDrive
from drive_analysis.models.raw import RawDrive
from drive_analysis.services.aggregator import (
    CHARGING_DELTA_PERCENT,
    MERGE_GAP_MINUTES,
    aggregate_drives,
    battery_delta,
    gap_minutes,
)


logger = logging.getLogger(__name__)


def should_merge(
    previous: RawDrive,
    following: RawDrive,
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> bool:
    """Whether `following` continues the journey `previous` belongs to."""
    if gap_minutes(previous, following) < merge_gap_minutes:
        return True
    # Battery went up while parked: charging stop, same journey
    return battery_delta(previous, following) > charging_delta_percent


def group_drives(
    drives: Iterable[RawDrive],
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> list[list[RawDrive]]:
    """
    Sort drives by start time and split them into journey groups.

    Each drive is compared with the one immediately before it in sort
    order, so merging chains: C joins A's group when it only merges with B.
    """
    ordered = sorted(drives, key=lambda d: d.started_at)

    finished: list[list[RawDrive]] = []
    open_group: list[RawDrive] = []
    for drive in ordered:
        if open_group and not should_merge(
            open_group[-1], drive, merge_gap_minutes, charging_delta_percent
        ):
            finished.append(open_group)
            open_group = []
        open_group.append(drive)

    if open_group:
        finished.append(open_group)

    logger.debug(f"Grouped {len(ordered)} drives into {len(finished)} journeys")
    return finished


def merge_drives(
    drives: Iterable[RawDrive],
    merge_gap_minutes: float = MERGE_GAP_MINUTES,
    charging_delta_percent: float = CHARGING_DELTA_PERCENT,
) -> list[MergedDrive]:
    """
    Merge raw drives into chronologically ordered MergedDrives.

    Every input drive ends up in exactly one MergedDrive.
    """
    return [
        aggregate_drives(group, merge_gap_minutes, charging_delta_percent)
        for group in group_drives(drives, merge_gap_minutes, charging_delta_percent)
    ]
