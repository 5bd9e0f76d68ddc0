"""
Route Service for Flood-Aware Evacuation Routing

Takes the raw road segments for a request, removes the ones that touch a
flood zone, and runs the configured path finder between start and end.

Features:
- Two path finders selected by configuration ('astar' or endpoint Dijkstra)
- Flood polygon filtering before every search
- Boundary helper that turns a path into (lat, lon) steps with a length in miles

An empty path means no route was found; interpreting it is left to the caller.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from config import Config
from services.astar_path_finder import ProximityAStarPathFinder
from services.dijkstra_path_finder import EndpointDijkstraPathFinder
from services.flood_zone_service import FloodZoneService, get_flood_zone_service
from utils.distance import haversine_distance
from utils.errors import MalformedInput
from utils.geo import Coordinate, RoadSegment
from utils.secure_logging import format_coordinate
from utils.validators import CoordinateValidator

logger = logging.getLogger(__name__)


class RoutingStrategy(Enum):
    """The two supported path finding strategies."""
    ASTAR = 'astar'
    DIJKSTRA = 'dijkstra'

    @classmethod
    def from_value(cls, value: Optional[Union[str, 'RoutingStrategy']]) -> 'RoutingStrategy':
        """
        Map a configuration value to a strategy.

        Examples:
            >>> RoutingStrategy.from_value('AStar')
            <RoutingStrategy.ASTAR: 'astar'>
            >>> RoutingStrategy.from_value(None)
            <RoutingStrategy.DIJKSTRA: 'dijkstra'>
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.ASTAR.value:
            return cls.ASTAR
        return cls.DIJKSTRA


class RouteService:
    """
    Computes flood-safe routes over a set of road segments.

    Provides methods to:
    - Validate start/end coordinates
    - Filter segments through the flood zone service
    - Run the selected path finder
    """

    def __init__(
        self,
        flood_service: Optional[FloodZoneService] = None,
        strategy: Optional[Union[str, RoutingStrategy]] = None,
        astar: Optional[ProximityAStarPathFinder] = None,
        dijkstra: Optional[EndpointDijkstraPathFinder] = None
    ):
        """
        Initialize the Route Service.

        Args:
            flood_service: Flood filter to use. If None, the process-wide service
            strategy: Default strategy. If None, reads Config.ROUTING_STRATEGY
            astar: Optional preconfigured A* path finder
            dijkstra: Optional preconfigured Dijkstra path finder
        """
        self.flood_service = flood_service or get_flood_zone_service()
        self.strategy = RoutingStrategy.from_value(
            strategy if strategy is not None else Config.ROUTING_STRATEGY
        )
        self.path_finders = {
            RoutingStrategy.ASTAR: astar or ProximityAStarPathFinder(),
            RoutingStrategy.DIJKSTRA: dijkstra or EndpointDijkstraPathFinder(),
        }
        logger.info(f"RouteService initialized with {self.strategy.value} strategy")

    def select_path_finder(self, strategy: Optional[Union[str, RoutingStrategy]] = None):
        """Path finder for the given strategy value, or the configured default."""
        selected = self.strategy if strategy is None else RoutingStrategy.from_value(strategy)
        return self.path_finders[selected]

    def compute_route(
        self,
        segments: List[RoadSegment],
        start: Coordinate,
        end: Coordinate,
        strategy: Optional[Union[str, RoutingStrategy]] = None
    ) -> List[Coordinate]:
        """
        Compute an ordered flood-safe path from start to end.

        Args:
            segments: Raw road segments for this request
            start: Start coordinate (x=lon, y=lat)
            end: End coordinate (x=lon, y=lat)
            strategy: Optional per-call strategy override

        Returns:
            Coordinates from start to end inclusive, or an empty list if no route exists

        Raises:
            MalformedInput: If start or end is not a valid coordinate
            EmptyInput: If segments is empty
            UpstreamUnavailable, NoPolygons: If flood zones cannot be loaded
        """
        start = Coordinate(*CoordinateValidator.require_coordinate(start, 'start'))
        end = Coordinate(*CoordinateValidator.require_coordinate(end, 'end'))
        if segments is not None and not all(isinstance(s, RoadSegment) for s in segments):
            raise MalformedInput("Segments must be RoadSegment instances")

        path_finder = self.select_path_finder(strategy)
        logger.info(
            f"Computing {path_finder.name} route from {format_coordinate(start)} "
            f"to {format_coordinate(end)} over {len(segments or [])} segments"
        )

        safe_segments = self.flood_service.filter_safe(segments)
        path = path_finder.find_path(safe_segments, start, end)

        if not path:
            logger.warning(f"No flood-safe route found to {format_coordinate(end)}")
        return path


def build_route_response(path: List[Coordinate]) -> Dict[str, Any]:
    """
    Convert a path into boundary form.

    Steps are (lat, lon) dictionaries, swapped from the internal (lon, lat)
    order, and distance_mi is the great-circle length of the route.
    """
    steps = [{'lat': point.y, 'lon': point.x} for point in path]
    distance_mi = sum(
        haversine_distance(a.y, a.x, b.y, b.x)
        for a, b in zip(path, path[1:])
    )
    return {
        'steps': steps,
        'distance_mi': round(distance_mi, 3),
        'found': bool(path)
    }
