"""
Test suite for the evacuation routing backend.

This package contains:
- test_astar_path_finder.py: Proximity A* neighbour lookup and search tests
- test_dijkstra_path_finder.py: Endpoint Dijkstra adjacency and search tests
- test_flood_zone_service.py: Flood polygon fetch, cache and filter tests
- test_route_service.py: Strategy selection and end-to-end route tests
- test_geo.py, test_validators.py, test_secure_logging.py: utility tests

Run tests:
    pip install -e ".[test]"
    python -m pytest
"""
