"""
Secure logging utilities with location redaction.

Evacuation requests carry a user's precise position, so route logs never
print full-precision coordinates.

Usage:
    from utils.secure_logging import format_coordinate

    logger.info(f"Routing from {format_coordinate(start)}")
    # Output: "Routing from (37.77, -122.42)"
"""

from typing import Optional


def redact_coordinates(lat: Optional[float], lon: Optional[float], precision: int = 2) -> tuple[str, str]:
    """
    Redact coordinates to a safe precision level for logging.

    Precision levels:
    - 1 decimal: ~11 km (city level)
    - 2 decimals: ~1.1 km (neighborhood level) **RECOMMENDED**
    - 4+ decimals: ~11 m (building level) **TOO PRECISE FOR LOGS**

    Examples:
        >>> redact_coordinates(37.7749, -122.4194, precision=2)
        ('37.77', '-122.42')

        >>> redact_coordinates(None, None)
        ('[REDACTED]', '[REDACTED]')
    """
    if lat is None or lon is None:
        return ('[REDACTED]', '[REDACTED]')

    return (
        f"{lat:.{precision}f}",
        f"{lon:.{precision}f}"
    )


def format_coordinate(coordinate, precision: int = 2) -> str:
    """
    Render an (x=lon, y=lat) coordinate as a redacted "(lat, lon)" string.
    """
    if coordinate is None:
        lat, lon = redact_coordinates(None, None)
    else:
        lat, lon = redact_coordinates(coordinate[1], coordinate[0], precision)
    return f"({lat}, {lon})"
