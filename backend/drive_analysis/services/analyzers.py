"""
Battery and autonomous-driving analyzers for merged drives.
"""

import os

from drive_analysis.models.drive import BatteryConsumption, FSDAnalysis, MergedDrive
from drive_analysis.utils.rounding import round2


PACK_CAPACITY_KWH = float(os.getenv("DRIVE_PACK_CAPACITY_KWH", "75"))

NO_AUTOPILOT_NOTE = "autonomous-driving data not available or no autonomous driving detected"


def analyze_battery_consumption(
    drive: MergedDrive,
    pack_capacity_kwh: float = PACK_CAPACITY_KWH,
) -> BatteryConsumption:
    """
    Estimate energy use from the battery percentage consumed.

    Efficiency is only reported when both distance and estimated kWh are
    positive; otherwise it is None.
    """
    percentage_used = round2(drive.energy_consumed)
    estimated_kwh = round2(percentage_used / 100 * pack_capacity_kwh)

    efficiency = None
    if drive.total_distance > 0 and estimated_kwh > 0:
        efficiency = round2(drive.total_distance / estimated_kwh)

    return BatteryConsumption(
        percentage_used=percentage_used,
        estimated_kwh_used=estimated_kwh,
        efficiency_miles_per_kwh=efficiency,
        net_charging=percentage_used < 0,
    )


def analyze_fsd_usage(drive: MergedDrive) -> FSDAnalysis:
    # Availability is a heuristic: any drive at all counts as "might have data".
    # telemetry_reported is the stricter signal.
    available = drive.autopilot_distance > 0 or drive.drive_count > 0

    return FSDAnalysis(
        total_autopilot_miles=drive.autopilot_distance,
        fsd_percentage=drive.autopilot_percentage,
        autopilot_available=available,
        note=NO_AUTOPILOT_NOTE if drive.autopilot_distance == 0 else None,
        telemetry_reported=drive.autopilot_reported,
    )
