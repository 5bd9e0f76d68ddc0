"""
Endpoint Dijkstra path finder.

Each non-flooded road segment becomes one directed edge from its first
waypoint to its last, weighted by the segment cost. Segments are one-way:
a road is only traversable backwards if an opposing segment exists.
"""
import heapq
import itertools
import logging
from typing import Dict, Iterator, List

from utils.geo import Coordinate, RoadSegment

logger = logging.getLogger(__name__)


class EndpointDijkstraPathFinder:
    """Dijkstra over the segment endpoint graph, skipping flooded segments."""

    name = 'dijkstra'

    def find_path(self, segments: List[RoadSegment], start: Coordinate, end: Coordinate) -> List[Coordinate]:
        """
        Cheapest endpoint chain from start to end.

        Queue entries are ordered by tentative distance, then insertion order.
        The search stops as soon as end is popped.

        Returns:
            Coordinates from start to end inclusive, [start] when start == end,
            or an empty list when end is unreachable
        """
        adjacency = self.build_adjacency(segments)
        distances = self.initialize_distances(start)
        previous: Dict[Coordinate, Coordinate] = {}

        queue = [(0.0, 0, start)]
        counter = itertools.count(1)

        while queue:
            distance, _, current = heapq.heappop(queue)

            if current == end:
                break
            if distance > distances.get(current, float('inf')):
                continue

            self.relax_edges(current, adjacency, distances, previous, queue, counter)

        path = self.reconstruct_path(previous, start, end)
        logger.info(f"Dijkstra path computed, {len(path)} steps")
        return path

    def build_adjacency(self, segments: List[RoadSegment]) -> Dict[Coordinate, List[RoadSegment]]:
        """Map each start endpoint to the non-flooded segments leaving it."""
        adjacency: Dict[Coordinate, List[RoadSegment]] = {}
        for segment in segments:
            if segment.flooded:
                continue
            adjacency.setdefault(self.extract_coordinate(segment, True), []).append(segment)
        return adjacency

    @staticmethod
    def initialize_distances(start: Coordinate) -> Dict[Coordinate, float]:
        return {start: 0.0}

    def relax_edges(
        self,
        current: Coordinate,
        adjacency: Dict[Coordinate, List[RoadSegment]],
        distances: Dict[Coordinate, float],
        previous: Dict[Coordinate, Coordinate],
        queue: list,
        counter: Iterator[int]
    ) -> None:
        """Lower the tentative distance of every endpoint reachable from current."""
        for segment in adjacency.get(current, []):
            neighbor = self.extract_neighbor(segment)
            alternative = distances[current] + segment.cost

            if alternative < distances.get(neighbor, float('inf')):
                distances[neighbor] = alternative
                previous[neighbor] = current
                heapq.heappush(queue, (alternative, next(counter), neighbor))

    @staticmethod
    def reconstruct_path(
        previous: Dict[Coordinate, Coordinate],
        start: Coordinate,
        end: Coordinate
    ) -> List[Coordinate]:
        if end not in previous and start != end:
            return []

        path = []
        step = end
        while step is not None:
            path.append(step)
            step = previous.get(step)
        path.reverse()
        return path

    @staticmethod
    def extract_coordinate(segment: RoadSegment, start_point: bool) -> Coordinate:
        return segment.start if start_point else segment.end

    def extract_neighbor(self, segment: RoadSegment) -> Coordinate:
        return self.extract_coordinate(segment, False)
