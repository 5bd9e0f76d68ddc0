"""
Geospatial value types and helpers for the routing core.

Coordinates are stored as (x=longitude, y=latitude) and compared by exact
value, so they can be used directly as graph vertices. Flood polygons are
plain shapely Polygons.
"""
from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

from shapely.geometry import LineString, Polygon

from utils.distance import planar_distance
from utils.validators import SegmentValidator


class Coordinate(NamedTuple):
    """A planar point: x is longitude, y is latitude."""
    x: float
    y: float

    def distance(self, other: 'Coordinate') -> float:
        """Planar Euclidean distance in coordinate units (degrees)."""
        return planar_distance(self.x, self.y, other.x, other.y)


def polyline_length(points: Sequence[Coordinate]) -> float:
    """Sum of planar distances between consecutive points."""
    return sum(a.distance(b) for a, b in zip(points, points[1:]))


@dataclass(frozen=True)
class RoadSegment:
    """
    One road as a straight-line polyline.

    Attributes:
        id: Opaque identifier
        geometry: Ordered waypoints, at least two
        cost: Traversal cost, defaults to the polyline length
        flooded: Static flood flag assigned at load time
    """
    id: str
    geometry: Tuple[Coordinate, ...]
    cost: Optional[float] = None
    flooded: bool = False

    def __post_init__(self):
        points = tuple(Coordinate(x, y) for x, y in SegmentValidator.validate_geometry(self.geometry))
        object.__setattr__(self, 'geometry', points)

        if self.cost is None:
            object.__setattr__(self, 'cost', polyline_length(points))
        else:
            object.__setattr__(self, 'cost', SegmentValidator.validate_cost(self.cost))

    @property
    def start(self) -> Coordinate:
        return self.geometry[0]

    @property
    def end(self) -> Coordinate:
        return self.geometry[-1]

    @cached_property
    def line(self) -> LineString:
        """Shapely LineString of the segment geometry (built on first use)."""
        return LineString(self.geometry)


def make_flood_polygon(ring: Iterable[Sequence[float]]) -> Polygon:
    """
    Build a flood polygon from an exterior ring of (lon, lat) pairs.

    The ring is closed if the source omitted the closing point. Self
    intersection is not checked.
    """
    points = [Coordinate(float(p[0]), float(p[1])) for p in ring]
    if len(points) < 3:
        raise ValueError(f"Flood polygon ring needs at least 3 points, got {len(points)}")
    if points[0] != points[-1]:
        points.append(points[0])
    return Polygon(points)
