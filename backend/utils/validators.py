"""
Validation utilities for route requests.

Provides centralized validation logic for:
- Start/end coordinates supplied by the caller
- Road segment geometry and cost

Every failure raises MalformedInput so the boundary layer can map it to a
client error.
"""
import math
from typing import List, Sequence, Tuple

from utils.errors import MalformedInput


def _as_finite_float(value, label: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedInput(f"{label} must be numeric, got {value!r}")
    if math.isnan(number) or math.isinf(number):
        raise MalformedInput(f"{label} must be finite, got {value!r}")
    return number


class CoordinateValidator:
    """Validator for geographic coordinates."""

    @staticmethod
    def validate_coordinates(lat: float, lon: float) -> bool:
        """
        Validate latitude and longitude ranges.

        Examples:
            >>> CoordinateValidator.validate_coordinates(37.7749, -122.4194)
            True
            >>> CoordinateValidator.validate_coordinates(91, 0)  # Invalid latitude
            False
        """
        try:
            latitude = float(lat)
            longitude = float(lon)
            if math.isnan(latitude) or math.isnan(longitude):
                return False
            return -90 <= latitude <= 90 and -180 <= longitude <= 180
        except (TypeError, ValueError):
            return False

    @staticmethod
    def require_coordinate(point, label: str = 'coordinate') -> Tuple[float, float]:
        """
        Check a (lon, lat) pair and return it as floats.

        Raises:
            MalformedInput: If the pair has the wrong shape or is out of range
        """
        try:
            x, y = point
        except (TypeError, ValueError):
            raise MalformedInput(f"{label} must be a (lon, lat) pair, got {point!r}")

        lon = _as_finite_float(x, f"{label} longitude")
        lat = _as_finite_float(y, f"{label} latitude")
        if not CoordinateValidator.validate_coordinates(lat, lon):
            raise MalformedInput(f"{label} out of range: lat={lat}, lon={lon}")
        return lon, lat


class SegmentValidator:
    """Validator for road segment geometry."""

    MIN_POINTS = 2

    @staticmethod
    def validate_geometry(points: Sequence) -> List[Tuple[float, float]]:
        """
        Check a polyline has at least two finite (x, y) points.

        Range is not checked here: segments may come from projected test data.
        """
        if points is None:
            raise MalformedInput("Segment geometry is missing")

        result = []
        for index, point in enumerate(points):
            try:
                x, y = point
            except (TypeError, ValueError):
                raise MalformedInput(f"Segment point {index} must be an (x, y) pair, got {point!r}")
            result.append((
                _as_finite_float(x, f"point {index} x"),
                _as_finite_float(y, f"point {index} y"),
            ))

        if len(result) < SegmentValidator.MIN_POINTS:
            raise MalformedInput(
                f"Segment geometry needs at least {SegmentValidator.MIN_POINTS} points, got {len(result)}"
            )
        return result

    @staticmethod
    def validate_cost(cost) -> float:
        value = _as_finite_float(cost, 'cost')
        if value < 0:
            raise MalformedInput(f"Segment cost must be non-negative, got {value}")
        return value
