"""
Error types raised by the evacuation routing core.

"No route found" is not an error: the path finders return an empty list and
the caller decides how to present it.
"""


class RoutingError(Exception):
    """Base class for routing core errors"""


class MalformedInput(RoutingError, ValueError):
    """Caller-supplied coordinates or segment geometry are invalid"""


class EmptyInput(RoutingError, ValueError):
    """The flood filter was given no road segments"""


class UpstreamUnavailable(RoutingError):
    """The flood-zone source could not be reached or returned unusable data"""


class NoPolygons(RoutingError):
    """The flood-zone source parsed correctly but contained zero polygons"""
