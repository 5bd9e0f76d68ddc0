"""
Tests for secure logging utilities with location redaction.
"""

from utils.geo import Coordinate
from utils.secure_logging import (
    format_coordinate,
    redact_coordinates,
)


class TestRedactCoordinates:
    """Tests for coordinate rounding"""

    def test_default_precision(self):
        assert redact_coordinates(37.7749, -122.4194) == ('37.77', '-122.42')

    def test_custom_precision(self):
        assert redact_coordinates(37.7749, -122.4194, precision=1) == ('37.8', '-122.4')

    def test_missing_values(self):
        assert redact_coordinates(None, None) == ('[REDACTED]', '[REDACTED]')


class TestFormatCoordinate:
    """Tests for route log formatting"""

    def test_lat_lon_order(self):
        assert format_coordinate(Coordinate(-122.4194, 37.7749)) == "(37.77, -122.42)"

    def test_none(self):
        assert format_coordinate(None) == "([REDACTED], [REDACTED])"

    def test_output_has_no_precise_coordinates(self):
        formatted = format_coordinate(Coordinate(21.012229, 52.229676))
        assert formatted == "(52.23, 21.01)"
