"""
Tests for the drive aggregator and stop detection.
"""

import logging

import pytest
from numpy.testing import assert_allclose

from drive_analysis.models.drive import StopType
from drive_analysis.services.aggregator import (
    EmptyDriveGroupError,
    aggregate_drives,
    classify_stop,
    detect_stops,
)


@pytest.fixture
def two_leg_trip(make_drive):
    """Two drives 5 minutes apart with some autopilot use."""
    return [
        make_drive(1, 1000, 2000, distance=30, starting_battery=80, ending_battery=75, autopilot_distance=10),
        make_drive(2, 2300, 3300, distance=20, starting_battery=75, ending_battery=65, autopilot_distance=5),
    ]


class TestAggregateDrives:
    """Tests for aggregate_drives."""

    def test_empty_group_raises(self):
        """An empty group is a contract violation."""
        with pytest.raises(EmptyDriveGroupError):
            aggregate_drives([])

    def test_empty_group_error_is_value_error(self):
        with pytest.raises(ValueError):
            aggregate_drives([])

    def test_identity_and_endpoints(self, two_leg_trip):
        """Id, ordering and endpoints come from the first and last drive."""
        merged = aggregate_drives(two_leg_trip)

        assert merged.id == "merged_1_2"
        assert merged.original_drive_ids == (1, 2)
        assert merged.started_at == 1000
        assert merged.ended_at == 3300
        assert merged.starting_location == "Location 1A"
        assert merged.ending_location == "Location 2B"
        assert merged.starting_battery == 80
        assert merged.ending_battery == 65

    def test_totals(self, two_leg_trip):
        """Distance, durations, autopilot share and energy."""
        merged = aggregate_drives(two_leg_trip)

        assert merged.total_distance == 50
        assert merged.autopilot_distance == 15
        assert merged.autopilot_percentage == 30.0
        assert merged.energy_consumed == 15
        assert_allclose(merged.total_duration_minutes, 38.33)
        assert_allclose(merged.driving_duration_minutes, 33.33)

    def test_speeds(self, two_leg_trip):
        """Average speed uses driving time only; max is the highest reported."""
        merged = aggregate_drives(two_leg_trip)

        # 50 miles over 2000 seconds of driving
        assert_allclose(merged.average_speed, 90.0)
        assert merged.max_speed == 65

    def test_distance_is_sum_of_constituents(self, make_drive):
        """Total distance is the sum of each drive's own distance."""
        drives = [
            make_drive(1, 0, 600, distance=3.333),
            make_drive(2, 700, 1300, distance=4.111),
            make_drive(3, 1400, 2000, distance=0.0),
        ]
        merged = aggregate_drives(drives)

        assert merged.total_distance == 7.44

    def test_zero_duration(self, make_drive):
        """Zero driving time yields zero durations and zero average speed."""
        merged = aggregate_drives([make_drive(1, 1000, 1000, distance=0, starting_battery=80, ending_battery=80)])

        assert merged.total_duration_minutes == 0
        assert merged.driving_duration_minutes == 0
        assert merged.average_speed == 0
        assert merged.autopilot_percentage == 0

    def test_missing_optional_values(self, make_drive):
        """Missing max speed and autopilot distance count as zero."""
        merged = aggregate_drives([make_drive(1, 0, 600, autopilot_distance=None, max_speed=None)])

        assert merged.max_speed == 0
        assert merged.autopilot_distance == 0
        assert merged.autopilot_reported is False

    def test_autopilot_reported(self, two_leg_trip):
        assert aggregate_drives(two_leg_trip).autopilot_reported is True

    def test_negative_energy_preserved(self, make_drive):
        """Net charging across the journey is kept as a negative value."""
        drives = [
            make_drive(1, 0, 600, starting_battery=40, ending_battery=35),
            make_drive(2, 2400, 3000, starting_battery=80, ending_battery=75),
        ]
        merged = aggregate_drives(drives)

        assert merged.energy_consumed == -35

    def test_back_to_back_drives_still_produce_a_stop(self, make_drive):
        """Every adjacent pair yields a stop, even with no gap."""
        drives = [make_drive(1, 0, 600), make_drive(2, 600, 1200), make_drive(3, 1200, 1800)]
        merged = aggregate_drives(drives)

        assert len(merged.stops) == 2
        assert all(stop.duration_minutes == 0 for stop in merged.stops)
        assert merged.total_duration_minutes == merged.driving_duration_minutes


class TestStops:
    """Tests for stop detection and classification."""

    def test_stop_fields(self, two_leg_trip):
        """A stop spans exactly the gap between two drives."""
        stops = detect_stops(two_leg_trip)

        assert len(stops) == 1
        stop = stops[0]
        assert stop.location == "Location 1B"
        assert stop.started_at == 2000
        assert stop.ended_at == 2300
        assert stop.duration_minutes == 5.0
        assert stop.stop_type == StopType.SHORT

    def test_charging_wins_over_short(self):
        """A short gap with a battery gain is a charging stop."""
        assert classify_stop(gap=3, delta=10) == StopType.CHARGING

    def test_classification_thresholds(self):
        assert classify_stop(gap=6.99, delta=0) == StopType.SHORT
        assert classify_stop(gap=7, delta=5) == StopType.EXCLUDED
        assert classify_stop(gap=30, delta=5.5) == StopType.CHARGING

    def test_excluded_stop_is_logged(self, make_drive, caplog):
        """A group that would not have been merged gets an excluded stop and a warning."""
        drives = [
            make_drive(1, 0, 600, ending_battery=70),
            make_drive(2, 3000, 3600, starting_battery=70),
        ]

        with caplog.at_level(logging.WARNING):
            stops = detect_stops(drives)

        assert stops[0].stop_type == StopType.EXCLUDED
        assert "excluded" in caplog.text

    def test_single_drive_has_no_stops(self, make_drive):
        assert detect_stops([make_drive(1, 0, 600)]) == []
