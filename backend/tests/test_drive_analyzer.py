"""
Tests for the drive analysis entry points.
"""

from drive_analysis.models.drive import DriveAnalysis, StopType
from drive_analysis.services.drive_analyzer import analyze_drives, analyze_latest_drive


class TestAnalyzeLatestDrive:
    """Tests for analyze_latest_drive."""

    def test_empty_input_returns_none(self):
        assert analyze_latest_drive([]) is None

    def test_single_drive(self, make_drive):
        """A single drive is analyzed as its own journey."""
        result = analyze_latest_drive([
            make_drive(1, 1000, 3000, distance=60, starting_battery=90, ending_battery=70, autopilot_distance=20),
        ])

        assert isinstance(result, DriveAnalysis)
        assert result.merged_drive.total_distance == 60
        assert result.battery_consumption.percentage_used == 20
        assert result.battery_consumption.estimated_kwh_used == 15
        assert result.fsd_analysis.total_autopilot_miles == 20
        assert round(result.fsd_analysis.fsd_percentage, 1) == 33.3

    def test_merged_drives(self, make_drive):
        """Drives separated by a short stop are analyzed together."""
        result = analyze_latest_drive([
            make_drive(1, 1000, 2000, distance=30, starting_battery=80, ending_battery=75, autopilot_distance=10),
            make_drive(2, 2300, 3300, distance=20, starting_battery=75, ending_battery=65, autopilot_distance=5),
        ])

        assert result.merged_drive.original_drive_ids == (1, 2)
        assert result.battery_consumption.percentage_used == 15
        assert result.fsd_analysis.total_autopilot_miles == 15
        assert "50 miles" in result.summary
        assert "15%" in result.summary

    def test_picks_most_recent_journey(self, make_drive):
        """The chronologically last journey wins regardless of input order."""
        latest = make_drive(3, 90000, 91000, starting_battery=60, ending_battery=55)
        result = analyze_latest_drive([
            latest,
            make_drive(1, 1000, 2000),
            make_drive(2, 2200, 3000),
        ])

        assert result.merged_drive.original_drive_ids == (3,)

    def test_pack_capacity_override(self, make_drive):
        result = analyze_latest_drive(
            [make_drive(1, 1000, 3000, distance=60, starting_battery=90, ending_battery=70)],
            pack_capacity_kwh=50,
        )

        assert result.battery_consumption.estimated_kwh_used == 10

    def test_accepts_generator(self, make_drive):
        drives = (make_drive(i, i * 600, i * 600 + 300) for i in range(3))

        assert analyze_latest_drive(drives).merged_drive.drive_count == 3


class TestAnalyzeDrives:
    """Tests for analyze_drives."""

    def test_one_analysis_per_journey(self, make_drive):
        charging_trip = [
            make_drive(3, 10000, 12000, starting_battery=60, ending_battery=30),
            make_drive(4, 14000, 16000, starting_battery=80, ending_battery=50),
        ]
        errand = [make_drive(1, 1000, 2000), make_drive(2, 2200, 3000)]

        results = analyze_drives(charging_trip + errand)

        assert [r.merged_drive.original_drive_ids for r in results] == [(1, 2), (3, 4)]
        assert results[1].merged_drive.stops[0].stop_type == StopType.CHARGING
        assert "(1 charging stop)" in results[1].summary

    def test_empty(self):
        assert analyze_drives([]) == []
