"""
Human-readable summary for an analyzed merged drive.
"""

import math

from drive_analysis.models.drive import BatteryConsumption, FSDAnalysis, MergedDrive, StopType


def format_number(value: float) -> str:
    """Render a number with at most 2 decimals and no trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_duration(minutes: float) -> str:
    """Format minutes as `Xh Ym`, rounding to the nearest minute."""
    total = int(math.floor(minutes + 0.5))
    hours, mins = divmod(total, 60)
    return f"{hours}h {mins}m"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _stop_line(drive: MergedDrive) -> str:
    line = f"• Stop time: {format_duration(drive.stop_duration_minutes)}"
    if drive.stops:
        charging = drive.count_stops(StopType.CHARGING)
        short = drive.count_stops(StopType.SHORT)
        if charging > 0:
            line += f" ({_plural(charging, 'charging stop')})"
        if short > 0:
            line += f" ({_plural(short, 'short stop')})"
    return line


def generate_drive_summary(
    drive: MergedDrive,
    battery: BatteryConsumption,
    fsd: FSDAnalysis,
) -> str:
    """
    Build the multi-line summary for a merged drive.

    Stop time is only listed when it exceeds one minute, and efficiency
    only when it was measurable.
    """
    lines = [
        f"Drive from {drive.starting_location} to {drive.ending_location}:",
        f"• Total time: {format_duration(drive.total_duration_minutes)}",
        f"• Driving time: {format_duration(drive.driving_duration_minutes)}",
    ]

    if drive.stop_duration_minutes > 1:
        lines.append(_stop_line(drive))

    lines.append(f"• Distance: {format_number(drive.total_distance)} miles")
    lines.append(
        f"• Average speed: {format_number(drive.average_speed)} mph "
        f"(max: {format_number(drive.max_speed)} mph)"
    )

    battery_line = (
        f"• Battery used: {format_number(battery.percentage_used)}% "
        f"(≈{format_number(battery.estimated_kwh_used)} kWh)"
    )
    if battery.net_charging:
        battery_line += " - net gain from charging"
    lines.append(battery_line)

    if battery.efficiency_miles_per_kwh is not None:
        lines.append(f"• Efficiency: {format_number(battery.efficiency_miles_per_kwh)} mi/kWh")

    if fsd.autopilot_available and fsd.total_autopilot_miles > 0:
        lines.append(
            f"• FSD/Autopilot: {format_number(fsd.total_autopilot_miles)} miles "
            f"({format_number(fsd.fsd_percentage)}% of drive)"
        )
    else:
        lines.append(f"• FSD/Autopilot: {fsd.note or 'data not available'}")

    return "\n".join(lines)
