"""Exceptions raised by the resolution and scoring pipeline."""


class ProspectorError(RuntimeError):
    """Base class for pipeline errors."""


class PlaceLookupError(ProspectorError):
    """Raised when the Places API errors, times out, or denies a request."""


class BusinessNotFoundError(ProspectorError):
    """Raised when no search variant produced an accepted match."""

    def __init__(self, query: str, resolution=None):
        self.query = query
        self.resolution = resolution
        super().__init__(f"Business not found: {query}")
