"""
Drive export adapters.

Parses drive exports (Tessie-style JSON payloads or one-row-per-drive CSV)
into RawDrive records. Merging and analysis happen in
drive_analysis.services.drive_analyzer.
"""

import json
import math
from pathlib import Path
from typing import Any, Optional, Protocol

import pandas as pd

from drive_analysis.models.raw import RawDrive


class DriveAdapter(Protocol):
    """Adapter interface for drive export sources."""

    name: str

    def can_parse(self, filepath: Path) -> bool:
        ...

    def parse(self, filepath: Path) -> list[RawDrive]:
        ...


# Field name mappings - providers and export tools name the same field differently.
# Earlier variants win when several are present.
FIELD_MAPPINGS = {
    "id": ["id", "drive_id", "ID", "Id"],
    "started_at": ["started_at", "start_date", "start_time", "Started At", "Start Date"],
    "ended_at": ["ended_at", "end_date", "end_time", "Ended At", "End Date"],
    "duration_min": ["duration_min", "duration_minutes", "Duration (min)"],
    "starting_location": [
        "starting_location",
        "start_saved_location",
        "start_address",
        "start_location",
        "Starting Location",
    ],
    "ending_location": [
        "ending_location",
        "end_saved_location",
        "end_address",
        "end_location",
        "Ending Location",
    ],
    "starting_battery": ["starting_battery", "start_battery_level", "Starting Battery (%)"],
    "ending_battery": ["ending_battery", "end_battery_level", "Ending Battery (%)"],
    "odometer_distance": ["odometer_distance", "distance_miles", "distance", "Distance (mi)"],
    "starting_odometer": ["starting_odometer", "start_odometer"],
    "ending_odometer": ["ending_odometer", "end_odometer"],
    "average_speed": ["average_speed", "avg_speed", "Average Speed (mph)"],
    "max_speed": ["max_speed", "Max Speed (mph)"],
    "autopilot_distance": ["autopilot_distance", "autopilot_distance_miles", "fsd_distance"],
}

UNKNOWN_LOCATION = "Unknown"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _lookup(record: dict, std_name: str) -> Any:
    for variant in FIELD_MAPPINGS[std_name]:
        value = record.get(variant)
        if not _is_missing(value):
            return value
    return None


def _optional_float(value: Any) -> Optional[float]:
    if _is_missing(value):
        return None
    return float(value)


def normalize_timestamp(value: Any) -> float:
    """
    Convert epoch seconds, epoch milliseconds or an ISO-8601 string to
    epoch seconds (UTC). Naive datetimes are taken as UTC.
    """
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            ts = pd.Timestamp(value)
            if ts.tzinfo is None:
                ts = ts.tz_localize("UTC")
            return ts.timestamp()

    seconds = float(value)
    if seconds > 1.0e11:
        seconds = seconds / 1000.0  # epoch ms -> s
    return seconds


def drive_from_record(record: dict) -> RawDrive:
    """
    Build a RawDrive from one provider record.

    Raises:
        ValueError: If a required field is missing
    """
    drive_id = _lookup(record, "id")
    if drive_id is None:
        raise ValueError("Drive record has no id")

    started = _lookup(record, "started_at")
    if started is None:
        raise ValueError(f"Drive {drive_id} has no start time")
    started_at = normalize_timestamp(started)

    ended = _lookup(record, "ended_at")
    duration = _lookup(record, "duration_min")
    if ended is not None:
        ended_at = normalize_timestamp(ended)
    elif duration is not None:
        ended_at = started_at + float(duration) * 60
    else:
        raise ValueError(f"Drive {drive_id} has no end time or duration")

    starting_battery = _lookup(record, "starting_battery")
    ending_battery = _lookup(record, "ending_battery")
    if starting_battery is None or ending_battery is None:
        raise ValueError(f"Drive {drive_id} has no battery levels")

    starting_odometer = _optional_float(_lookup(record, "starting_odometer"))
    ending_odometer = _optional_float(_lookup(record, "ending_odometer"))

    distance = _optional_float(_lookup(record, "odometer_distance"))
    if distance is None:
        if starting_odometer is None or ending_odometer is None:
            raise ValueError(f"Drive {drive_id} has no distance")
        distance = ending_odometer - starting_odometer

    return RawDrive(
        id=int(drive_id),
        started_at=started_at,
        ended_at=ended_at,
        starting_location=str(_lookup(record, "starting_location") or UNKNOWN_LOCATION),
        ending_location=str(_lookup(record, "ending_location") or UNKNOWN_LOCATION),
        starting_battery=float(starting_battery),
        ending_battery=float(ending_battery),
        odometer_distance=distance,
        average_speed=_optional_float(_lookup(record, "average_speed")),
        max_speed=_optional_float(_lookup(record, "max_speed")),
        autopilot_distance=_optional_float(_lookup(record, "autopilot_distance")),
        starting_odometer=starting_odometer,
        ending_odometer=ending_odometer,
    )


class JsonDriveAdapter:
    """
    Adapter for JSON drive exports.

    Accepts a bare list of drive objects or an object wrapping the list
    under `results` or `drives` (the shapes the Tessie API returns).
    """

    name = "json"

    def can_parse(self, filepath: Path) -> bool:
        return filepath.suffix.lower() == ".json"

    def parse(self, filepath: Path) -> list[RawDrive]:
        with open(filepath, "r", encoding="utf-8") as f:
            payload = json.load(f)

        if isinstance(payload, dict):
            records = payload.get("results", payload.get("drives"))
        else:
            records = payload

        if not isinstance(records, list):
            raise ValueError(f"No drive list found in {filepath.name}")
        if not all(isinstance(record, dict) for record in records):
            raise ValueError(f"Drive record is not an object in {filepath.name}")

        return [drive_from_record(record) for record in records]


class CsvDriveAdapter:
    """Adapter for CSV drive exports (one row per drive)."""

    name = "csv"

    def can_parse(self, filepath: Path) -> bool:
        return filepath.suffix.lower() == ".csv"

    def parse(self, filepath: Path) -> list[RawDrive]:
        df = pd.read_csv(filepath, encoding="utf-8-sig")
        df.columns = df.columns.str.strip()

        if not any(v in df.columns for v in FIELD_MAPPINGS["started_at"]):
            raise ValueError("No start time column found in CSV")

        return [drive_from_record(row) for row in df.to_dict(orient="records")]


ADAPTERS: list[DriveAdapter] = [
    JsonDriveAdapter(),
    CsvDriveAdapter(),
]


def _select_adapter(filepath: Path) -> DriveAdapter:
    for adapter in ADAPTERS:
        if adapter.can_parse(filepath):
            return adapter
    raise ValueError(f"No adapter available for file: {filepath}")


def parse_drive_file(filepath: Path) -> list[RawDrive]:
    """
    Parse a drive export via adapter selection.
    """
    return _select_adapter(filepath).parse(filepath)
