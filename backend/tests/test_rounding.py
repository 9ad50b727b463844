"""
Tests for presentation rounding.
"""

import pytest

from drive_analysis.utils.rounding import round2


class TestRound2:
    """Tests for round2."""

    @pytest.mark.parametrize("value,expected", [
        (0.125, 0.13),
        (2.5, 2.5),
        (33.333, 33.33),
        (0.375, 0.38),
        (-7.5, -7.5),
        (-0.125, -0.12),
        (0.0, 0.0),
    ])
    def test_round2(self, value, expected):
        assert round2(value) == expected

    def test_differs_from_builtin_round(self):
        """Builtin round() sends exact halves to the even neighbour."""
        assert round(0.125, 2) == 0.12
        assert round2(0.125) == 0.13
