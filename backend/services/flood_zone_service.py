"""
Flood Zone Service for Evacuation Routing

Downloads flood hazard polygons from the flood backend once, caches them for
the lifetime of the process, and removes road segments whose geometry
touches any cached polygon.

Features:
- Lazy single-flight cache load guarded by a lock (concurrent cold-start
  callers share one fetch and never see a half-built cache)
- Explicit reload / replace / clear of the cached polygon set
- STRtree-backed intersection test, equivalent to checking every polygon
- Stable filter: surviving segments keep their input order
"""
import logging
import threading
from typing import Callable, Iterable, List, Optional

import requests
from shapely.geometry import LineString, Polygon
from shapely.strtree import STRtree

from config import Config
from utils.errors import EmptyInput, NoPolygons, UpstreamUnavailable
from utils.geo import RoadSegment, make_flood_polygon

logger = logging.getLogger(__name__)


class FloodZoneSnapshot:
    """
    Immutable polygon set together with the STRtree built over it.

    Every load publishes a new snapshot, so a caller holding one keeps a
    consistent view while the cache is reloaded or cleared.
    """

    __slots__ = ('zones', 'index')

    def __init__(self, polygons: Iterable[Polygon]):
        zones = tuple(polygons)
        for zone in zones:
            if not isinstance(zone, Polygon):
                raise UpstreamUnavailable(f"Flood zone must be a Polygon, got {type(zone).__name__}")
        object.__setattr__(self, 'zones', zones)
        object.__setattr__(self, 'index', STRtree(zones))

    def __setattr__(self, name, value):
        raise AttributeError("FloodZoneSnapshot is read-only")

    def __len__(self) -> int:
        return len(self.zones)

    def is_safe(self, line: LineString) -> bool:
        return len(self.index.query(line, predicate='intersects')) == 0


class FloodZoneService:
    """
    Flood safety filter backed by a cached set of flood polygons.

    Provides methods to:
    - Fetch flood polygons from the configured backend (or an injected loader)
    - Check whether a single road geometry is safe
    - Filter a list of road segments down to the safe ones
    """

    DEFAULT_TIMEOUT_SECONDS = 30

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[int] = None,
        polygon_loader: Optional[Callable[[], Iterable[Polygon]]] = None
    ):
        """
        Initialize the Flood Zone Service.

        Args:
            url: Flood backend URL. If None, reads Config.FLOOD_ZONES_URL
            timeout: HTTP timeout in seconds. If None, reads Config.FLOOD_ZONES_TIMEOUT_SECONDS
            polygon_loader: Optional zero-argument supplier of polygons used
                instead of the HTTP fetch
        """
        self.url = url or Config.FLOOD_ZONES_URL
        self.timeout = timeout or Config.FLOOD_ZONES_TIMEOUT_SECONDS or self.DEFAULT_TIMEOUT_SECONDS
        self.polygon_loader = polygon_loader

        self._lock = threading.Lock()
        self._snapshot: Optional[FloodZoneSnapshot] = None

    @property
    def flood_zones(self):
        """Cached polygons, or None when nothing has been loaded yet."""
        snapshot = self._snapshot
        return snapshot.zones if snapshot is not None else None

    def is_loaded(self) -> bool:
        return self._snapshot is not None

    # ------------------------------------------------------------------
    # Cache lifecycle
    # ------------------------------------------------------------------

    def ensure_loaded(self) -> FloodZoneSnapshot:
        """
        Load the flood polygons on first use and return the current snapshot.

        Only one caller performs the fetch; others block on the lock and then
        see the finished cache. A failed load leaves the cache empty.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        with self._lock:
            if self._snapshot is None:
                logger.warning("Flood polygon cache is empty - loading...")
                self._snapshot = FloodZoneSnapshot(self._load_polygons())
            return self._snapshot

    def load_flood_zones(self) -> FloodZoneSnapshot:
        """Fetch polygons and replace the cache unconditionally."""
        with self._lock:
            self._snapshot = FloodZoneSnapshot(self._load_polygons())
            return self._snapshot

    def reload(self) -> FloodZoneSnapshot:
        logger.info("Reloading flood polygon cache")
        return self.load_flood_zones()

    def set_flood_zones(self, polygons: Iterable[Polygon]) -> None:
        """Install an explicit polygon set, bypassing the fetch."""
        snapshot = FloodZoneSnapshot(polygons)
        if not snapshot:
            raise NoPolygons("Flood zone set must contain at least one polygon")
        with self._lock:
            self._snapshot = snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None
        logger.info("Cleared flood polygon cache")

    def _load_polygons(self) -> List[Polygon]:
        if self.polygon_loader is not None:
            try:
                polygons = list(self.polygon_loader())
            except (NoPolygons, UpstreamUnavailable):
                raise
            except Exception as e:
                logger.error(f"Flood polygon loader failed: {e}", exc_info=True)
                raise UpstreamUnavailable(f"Cannot load flood zones: {e}") from e
        else:
            polygons = self.fetch_flood_zones()

        if not polygons:
            logger.error("Flood backend returned zero polygons")
            raise NoPolygons("Flood backend returned zero polygons")

        logger.info(f"Loaded {len(polygons)} flood polygons")
        return polygons

    # ------------------------------------------------------------------
    # Remote source
    # ------------------------------------------------------------------

    def fetch_flood_zones(self) -> List[Polygon]:
        """
        Download and parse the flood FeatureCollection.

        Returns:
            List of shapely Polygons (may be empty)

        Raises:
            UpstreamUnavailable: If the backend is unreachable or the payload is malformed
        """
        if not self.url:
            raise UpstreamUnavailable("FLOOD_ZONES_URL is not configured")

        logger.info(f"Downloading flood zones from backend: {self.url}")
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to download flood zones: {e}")
            raise UpstreamUnavailable(f"Cannot load flood zones from backend: {e}") from e

        if not response.text or not response.text.strip():
            raise UpstreamUnavailable("Empty flood response from backend")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"Invalid flood JSON: {e}") from e

        features = self.extract_features(data)
        try:
            return [self.parse_polygon(feature.get('geometry')) for feature in features]
        except (ValueError, TypeError, AttributeError, LookupError) as e:
            logger.error(f"Failed to parse flood polygons: {e}")
            raise UpstreamUnavailable(f"Invalid flood geometry: {e}") from e

    @staticmethod
    def extract_features(data) -> list:
        if not isinstance(data, dict):
            raise UpstreamUnavailable("Invalid flood JSON structure - expected an object")
        features = data.get('features')
        if not isinstance(features, list):
            raise UpstreamUnavailable("Invalid flood JSON structure - missing 'features'")
        return features

    @staticmethod
    def parse_polygon(geometry) -> Polygon:
        """
        Build a Polygon from a GeoJSON Polygon geometry (exterior ring only).

        Raises:
            ValueError: If the geometry is missing, not a Polygon, or has no coordinate rings
        """
        if not geometry or geometry.get('type') != 'Polygon':
            raise ValueError("Invalid flood geometry type - expected Polygon")

        coordinates = geometry.get('coordinates')
        if not isinstance(coordinates, list) or not coordinates:
            raise ValueError("Polygon coordinates must be a non-empty list of rings")

        return make_flood_polygon(coordinates[0])

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def is_safe(self, road, snapshot: Optional[FloodZoneSnapshot] = None) -> bool:
        """
        True iff the road touches none of the flood polygons.

        Args:
            road: RoadSegment or shapely LineString
            snapshot: Polygon set to test against. If None, the cached set is used
        """
        if snapshot is None:
            snapshot = self.ensure_loaded()
        line = road.line if isinstance(road, RoadSegment) else road
        return snapshot.is_safe(line)

    def filter_safe(self, segments: List[RoadSegment]) -> List[RoadSegment]:
        """
        Keep the segments that intersect no flood polygon, in input order.

        All segments of one call are tested against the same polygon set.

        Raises:
            EmptyInput: If segments is empty
            UpstreamUnavailable, NoPolygons: If the polygon cache cannot be loaded
        """
        if not segments:
            raise EmptyInput("No road segments to filter")

        snapshot = self.ensure_loaded()
        safe = [segment for segment in segments if self.is_safe(segment, snapshot)]

        logger.info(f"Flood filter kept {len(safe)} of {len(segments)} road segments")
        return safe


_default_service: Optional[FloodZoneService] = None
_default_lock = threading.Lock()


def get_flood_zone_service() -> FloodZoneService:
    """Process-wide FloodZoneService built from Config on first use."""
    global _default_service
    if _default_service is None:
        with _default_lock:
            if _default_service is None:
                _default_service = FloodZoneService()
    return _default_service
