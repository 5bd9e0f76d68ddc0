"""
Tests for RouteService

Tests strategy selection, flood filtering before the search, and the
boundary response helper.
"""
import pytest
from unittest.mock import Mock, patch
from shapely.geometry import Polygon

from services.astar_path_finder import ProximityAStarPathFinder
from services.dijkstra_path_finder import EndpointDijkstraPathFinder
from services.flood_zone_service import FloodZoneService
from services.route_service import RouteService, RoutingStrategy, build_route_response
from utils.errors import EmptyInput, MalformedInput, UpstreamUnavailable
from utils.geo import Coordinate, RoadSegment


def square(x0, y0, x1, y1):
    return Polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)])


@pytest.fixture
def flood_service():
    service = FloodZoneService(url='http://flood.test/zones')
    # Flood zone sits on the direct road between (0, 0) and (2, 0)
    service.set_flood_zones([square(0.9, -0.1, 1.1, 0.1)])
    return service


@pytest.fixture
def network():
    a, b, c, d = Coordinate(0, 0), Coordinate(2, 0), Coordinate(1, 1), Coordinate(1, 0)
    return {
        'points': (a, b, c, d),
        'segments': [
            RoadSegment('direct', (a, d, b)),
            RoadSegment('north_1', (a, c)),
            RoadSegment('north_2', (c, b)),
        ]
    }


class TestRoutingStrategy:
    """Test configuration value mapping"""

    @pytest.mark.parametrize('value', ['astar', 'ASTAR', ' AStar '])
    def test_astar_values(self, value):
        assert RoutingStrategy.from_value(value) is RoutingStrategy.ASTAR

    @pytest.mark.parametrize('value', [None, '', 'dijkstra', 'a-star', 'bfs', 42])
    def test_everything_else_is_dijkstra(self, value):
        assert RoutingStrategy.from_value(value) is RoutingStrategy.DIJKSTRA

    def test_enum_passthrough(self):
        assert RoutingStrategy.from_value(RoutingStrategy.ASTAR) is RoutingStrategy.ASTAR


class TestStrategySelection:
    """Test which path finder the service uses"""

    def test_default_from_config(self, flood_service):
        with patch('services.route_service.Config') as mock_config:
            mock_config.ROUTING_STRATEGY = 'astar'
            service = RouteService(flood_service=flood_service)
        assert isinstance(service.select_path_finder(), ProximityAStarPathFinder)

    def test_unset_config_selects_dijkstra(self, flood_service):
        with patch('services.route_service.Config') as mock_config:
            mock_config.ROUTING_STRATEGY = None
            service = RouteService(flood_service=flood_service)
        assert isinstance(service.select_path_finder(), EndpointDijkstraPathFinder)

    def test_per_call_override(self, flood_service):
        service = RouteService(flood_service=flood_service, strategy='dijkstra')
        assert isinstance(service.select_path_finder('astar'), ProximityAStarPathFinder)
        assert isinstance(service.select_path_finder('unknown'), EndpointDijkstraPathFinder)


class TestComputeRoute:
    """Test the filter-then-search pipeline"""

    def test_dijkstra_detours_around_flood(self, flood_service, network):
        a, b, c, _ = network['points']
        service = RouteService(flood_service=flood_service, strategy='dijkstra')

        assert service.compute_route(network['segments'], a, b) == [a, c, b]

    def test_astar_avoids_flooded_waypoints(self, flood_service):
        start = Coordinate(0, 0)
        end = Coordinate(0.0006, 0)
        wet = Coordinate(0.0003, 0)
        dry = Coordinate(0.0003, 0.0002)
        segments = [
            RoadSegment('wet', (start, wet, end)),
            RoadSegment('dry', (start, dry, end)),
        ]
        flood_service.set_flood_zones([square(0.00028, -0.00005, 0.00032, 0.00005)])
        service = RouteService(
            flood_service=flood_service,
            strategy='astar',
            astar=ProximityAStarPathFinder(tolerance=0.0004)
        )

        assert service.compute_route(segments, start, end) == [start, dry, end]

    def test_path_returned_unchanged(self, flood_service, network):
        a, b, _, _ = network['points']
        dijkstra = Mock(spec=EndpointDijkstraPathFinder)
        dijkstra.name = 'dijkstra'
        dijkstra.find_path.return_value = [a, b]
        service = RouteService(flood_service=flood_service, strategy='dijkstra', dijkstra=dijkstra)

        assert service.compute_route(network['segments'], a, b) == [a, b]

        filtered = dijkstra.find_path.call_args[0][0]
        assert [s.id for s in filtered] == ['north_1', 'north_2']

    def test_no_route_is_empty_list(self, flood_service):
        a, b = Coordinate(0, 0), Coordinate(2, 0)
        service = RouteService(flood_service=flood_service, strategy='dijkstra')

        assert service.compute_route([RoadSegment('direct', (a, b))], a, b) == []

    def test_static_flood_flag_still_respected(self, flood_service):
        a, b = Coordinate(5, 5), Coordinate(6, 5)
        service = RouteService(flood_service=flood_service, strategy='dijkstra')

        assert service.compute_route([RoadSegment('r', (a, b), flooded=True)], a, b) == []

    def test_empty_segments_raise(self, flood_service):
        service = RouteService(flood_service=flood_service)
        with pytest.raises(EmptyInput):
            service.compute_route([], Coordinate(0, 0), Coordinate(1, 1))

    @pytest.mark.parametrize('bad', [(0, 91), (181, 0), (float('nan'), 0), ('x', 1), (1,)])
    def test_malformed_coordinates_raise(self, flood_service, network, bad):
        service = RouteService(flood_service=flood_service)
        with pytest.raises(MalformedInput):
            service.compute_route(network['segments'], bad, Coordinate(1, 1))

    def test_plain_tuples_accepted(self, flood_service, network):
        service = RouteService(flood_service=flood_service, strategy='dijkstra')
        path = service.compute_route(network['segments'], (0, 0), (2.0, 0.0))
        assert path[0] == Coordinate(0, 0)
        assert path[-1] == Coordinate(2, 0)

    def test_non_segment_input_raises(self, flood_service):
        service = RouteService(flood_service=flood_service)
        with pytest.raises(MalformedInput):
            service.compute_route([((0, 0), (1, 1))], Coordinate(0, 0), Coordinate(1, 1))

    def test_upstream_failure_propagates(self, network):
        flood_service = FloodZoneService(polygon_loader=Mock(side_effect=UpstreamUnavailable("down")))
        service = RouteService(flood_service=flood_service)
        a, b, _, _ = network['points']

        with pytest.raises(UpstreamUnavailable):
            service.compute_route(network['segments'], a, b)


class TestBuildRouteResponse:
    """Test the (lat, lon) boundary conversion"""

    def test_steps_are_lat_lon(self):
        path = [Coordinate(-122.4194, 37.7749), Coordinate(-122.2711, 37.8044)]

        response = build_route_response(path)

        assert response['steps'][0] == {'lat': 37.7749, 'lon': -122.4194}
        assert response['found'] is True
        assert response['distance_mi'] == pytest.approx(8.3, abs=0.3)

    def test_empty_path(self):
        assert build_route_response([]) == {'steps': [], 'distance_mi': 0.0, 'found': False}

    def test_single_point_path(self):
        response = build_route_response([Coordinate(1, 2)])
        assert response['distance_mi'] == 0.0
        assert response['found'] is True
