"""
Proximity A* path finder.

The graph is implicit: the vertices are the distinct waypoints of every road
segment, and two waypoints are connected when their planar distance is below
the proximity tolerance. Edge cost and heuristic are both planar Euclidean
distance, so the heuristic is admissible.

Waypoints are bucketed into a square grid whose cell size equals the
tolerance; a neighbour query only scans the 3x3 block of cells around the
vertex and returns exactly the points a full scan would.
"""
import heapq
import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from config import Config
from utils.geo import Coordinate, RoadSegment
from utils.secure_logging import format_coordinate

logger = logging.getLogger(__name__)

# Costs are compared at this many decimal places; differences below that are
# floating-point noise on degree-scale coordinates.
COST_PRECISION = 12

DEFAULT_PROXIMITY_TOLERANCE = 0.0003


def quantize_cost(value: float) -> float:
    return round(value, COST_PRECISION)


class ProximityIndex:
    """Grid bucketing of distinct segment waypoints for radius queries."""

    def __init__(self, segments: Iterable[RoadSegment], tolerance: float):
        if tolerance <= 0:
            raise ValueError(f"Proximity tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self._cells: Dict[Tuple[int, int], List[Coordinate]] = defaultdict(list)

        # First-seen order keeps neighbour iteration deterministic
        points = dict.fromkeys(p for segment in segments for p in segment.geometry)
        for point in points:
            self._cells[self._cell_of(point)].append(point)
        self.size = len(points)

    def _cell_of(self, point: Coordinate) -> Tuple[int, int]:
        return (math.floor(point.x / self.tolerance), math.floor(point.y / self.tolerance))

    def neighbors(self, coordinate: Coordinate) -> List[Coordinate]:
        """Distinct waypoints strictly closer than the tolerance, excluding the coordinate itself."""
        cx, cy = self._cell_of(coordinate)
        result = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for point in self._cells.get((cx + dx, cy + dy), ()):
                    if point != coordinate and coordinate.distance(point) < self.tolerance:
                        result.append(point)
        return result


class ProximityAStarPathFinder:
    """A* over the proximity graph of road waypoints."""

    name = 'astar'

    def __init__(self, tolerance: Optional[float] = None):
        self.tolerance = tolerance if tolerance is not None else (
            Config.PROXIMITY_TOLERANCE or DEFAULT_PROXIMITY_TOLERANCE
        )

    def neighbors_of(self, coordinate: Coordinate, segments: List[RoadSegment]) -> List[Coordinate]:
        return ProximityIndex(segments, self.tolerance).neighbors(coordinate)

    @staticmethod
    def heuristic(a: Coordinate, b: Coordinate) -> float:
        return a.distance(b)

    def find_path(self, segments: List[RoadSegment], start: Coordinate, end: Coordinate) -> List[Coordinate]:
        """
        Shortest waypoint chain from start to end.

        The open set is ordered by rounded f, then g (shallower first), then
        insertion order. A vertex reached again at an equal rounded cost takes
        the chain with more waypoints, so the route follows the road points
        instead of jumping across the tolerance gap.

        Returns:
            Coordinates from start to end inclusive, [start] when start == end,
            or an empty list when end is unreachable
        """
        index = ProximityIndex(segments, self.tolerance)

        g_score: Dict[Coordinate, float] = {start: 0.0}
        hops: Dict[Coordinate, int] = {start: 0}
        came_from: Dict[Coordinate, Coordinate] = {}
        closed = set()

        counter = 0
        open_set = [(quantize_cost(self.heuristic(start, end)), 0.0, counter, start)]

        while open_set:
            _, _, _, current = heapq.heappop(open_set)
            if current in closed:
                continue

            if current == end:
                path = self._reconstruct(came_from, current)
                logger.info(f"A* path computed, {len(path)} steps over {index.size} waypoints")
                return path

            closed.add(current)
            current_g = g_score[current]

            for neighbor in index.neighbors(current):
                if neighbor in closed:
                    continue

                tentative_g = current_g + current.distance(neighbor)
                tentative_hops = hops[current] + 1

                if neighbor in g_score:
                    best = quantize_cost(g_score[neighbor])
                    candidate = quantize_cost(tentative_g)
                    if candidate > best or (candidate == best and tentative_hops <= hops[neighbor]):
                        continue

                g_score[neighbor] = tentative_g
                hops[neighbor] = tentative_hops
                came_from[neighbor] = current

                counter += 1
                f_score = quantize_cost(tentative_g + self.heuristic(neighbor, end))
                heapq.heappush(open_set, (f_score, tentative_g, counter, neighbor))

        logger.info(f"A* found no path to {format_coordinate(end)}")
        return []

    @staticmethod
    def _reconstruct(came_from: Dict[Coordinate, Coordinate], end: Coordinate) -> List[Coordinate]:
        path = [end]
        current = end
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path
