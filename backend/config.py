"""
Configuration file for the evacuation routing backend.
"""
import logging
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration"""
    # Debug mode lowers the default log level to DEBUG
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Path finding strategy: 'astar' selects the proximity A* search,
    # anything else (including unset) selects endpoint Dijkstra
    ROUTING_STRATEGY = os.getenv('ROUTING_STRATEGY', 'dijkstra')

    # A* proximity tolerance in coordinate units (degrees)
    PROXIMITY_TOLERANCE = float(os.getenv('PROXIMITY_TOLERANCE', '0.0003'))

    # Flood zone backend (GeoJSON FeatureCollection of Polygon features)
    FLOOD_ZONES_URL = os.getenv('FLOOD_ZONES_URL')
    FLOOD_ZONES_TIMEOUT_SECONDS = int(os.getenv('FLOOD_ZONES_TIMEOUT_SECONDS', '30'))


def configure_logging(level=None):
    """
    Set up root logging.

    An explicit level wins; otherwise DEBUG mode logs at DEBUG and anything
    else at Config.LOG_LEVEL. Returns the level used.
    """
    if level is None:
        if Config.DEBUG:
            level = logging.DEBUG
        else:
            level = getattr(logging, Config.LOG_LEVEL, logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    return level
