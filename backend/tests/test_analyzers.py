"""
Tests for battery consumption and FSD/Autopilot analysis.
"""

import pytest

from drive_analysis.services.aggregator import aggregate_drives
from drive_analysis.services.analyzers import (
    NO_AUTOPILOT_NOTE,
    analyze_battery_consumption,
    analyze_fsd_usage,
)


class TestBatteryConsumption:
    """Tests for analyze_battery_consumption."""

    def test_basic_consumption(self, make_drive):
        """20% of a 75 kWh pack is 15 kWh."""
        drive = aggregate_drives([make_drive(1, 1000, 3000, distance=60, starting_battery=90, ending_battery=70)])

        battery = analyze_battery_consumption(drive)

        assert battery.percentage_used == 20
        assert battery.estimated_kwh_used == 15
        assert battery.efficiency_miles_per_kwh == 4
        assert battery.net_charging is False

    def test_efficiency(self, make_drive):
        """75 miles on 15 kWh is 5 mi/kWh."""
        drive = aggregate_drives([make_drive(1, 1000, 3000, distance=75, starting_battery=90, ending_battery=70)])

        assert analyze_battery_consumption(drive).efficiency_miles_per_kwh == 5

    def test_custom_pack_capacity(self, make_drive):
        drive = aggregate_drives([make_drive(1, 1000, 3000, distance=60, starting_battery=90, ending_battery=70)])

        battery = analyze_battery_consumption(drive, pack_capacity_kwh=100)

        assert battery.estimated_kwh_used == 20
        assert battery.efficiency_miles_per_kwh == 3

    def test_no_consumption_has_no_efficiency(self, make_drive):
        """Efficiency is absent, not zero, when no energy was used."""
        drive = aggregate_drives([make_drive(1, 0, 600, distance=5, starting_battery=80, ending_battery=80)])

        battery = analyze_battery_consumption(drive)

        assert battery.estimated_kwh_used == 0
        assert battery.efficiency_miles_per_kwh is None

    def test_zero_distance_has_no_efficiency(self, make_drive):
        drive = aggregate_drives([make_drive(1, 0, 600, distance=0, starting_battery=80, ending_battery=78)])

        assert analyze_battery_consumption(drive).efficiency_miles_per_kwh is None

    def test_net_charging(self, make_drive):
        """Negative consumption is preserved and flagged."""
        drive = aggregate_drives([make_drive(1, 1000, 2000, distance=30, starting_battery=70, ending_battery=80)])

        battery = analyze_battery_consumption(drive)

        assert battery.percentage_used == -10
        assert battery.estimated_kwh_used == pytest.approx(-7.5)
        assert battery.efficiency_miles_per_kwh is None
        assert battery.net_charging is True

    def test_halves_round_up(self, make_drive):
        """0.125% used is reported as 0.13, not 0.12."""
        drive = aggregate_drives([make_drive(1, 0, 600, distance=1, starting_battery=80.125, ending_battery=80.0)])

        assert analyze_battery_consumption(drive).percentage_used == 0.13


class TestFSDAnalysis:
    """Tests for analyze_fsd_usage."""

    def test_autopilot_share(self, make_drive):
        drive = aggregate_drives([make_drive(1, 1000, 3000, distance=60, autopilot_distance=20)])

        fsd = analyze_fsd_usage(drive)

        assert fsd.total_autopilot_miles == 20
        assert fsd.fsd_percentage == pytest.approx(33.33)
        assert fsd.autopilot_available is True
        assert fsd.note is None
        assert fsd.telemetry_reported is True

    def test_no_autopilot(self, make_drive):
        """Zero autopilot distance attaches the not-available note."""
        drive = aggregate_drives([make_drive(1, 1000, 3000, distance=60, autopilot_distance=0)])

        fsd = analyze_fsd_usage(drive)

        assert fsd.total_autopilot_miles == 0
        assert fsd.fsd_percentage == 0
        assert fsd.note == NO_AUTOPILOT_NOTE
        assert "not available" in fsd.note

    def test_availability_heuristic_without_telemetry(self, make_drive):
        """Availability stays true for any drive; telemetry_reported tells the truth."""
        drive = aggregate_drives([make_drive(1, 1000, 3000, autopilot_distance=None)])

        fsd = analyze_fsd_usage(drive)

        assert fsd.autopilot_available is True
        assert fsd.telemetry_reported is False
