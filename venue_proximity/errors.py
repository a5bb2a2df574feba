"""
Error taxonomy for the venue proximity core.

"No containment" and "no nearest venue" are never errors; they surface as
empty or absent results.
"""


class ProximityError(Exception):
    """Base class for every error raised by the proximity core."""


class InvalidRadius(ProximityError, ValueError):
    """Raised when a buffer radius is not a positive, finite number."""

    def __init__(self, radius_km):
        self.radius_km = radius_km
        super().__init__(f"Buffer radius must be > 0 km, got {radius_km!r}")


class InvalidSegmentCount(ProximityError, ValueError):
    """Raised when a buffer is requested with fewer than three vertices."""

    def __init__(self, segments):
        self.segments = segments
        super().__init__(f"Buffer needs at least 3 segments, got {segments!r}")


class EmptyInput(ProximityError, ValueError):
    """Raised when an envelope (or a session) is built from no points at all."""


class CatalogError(ProximityError):
    """Raised when a venue catalog file cannot be turned into venues."""
