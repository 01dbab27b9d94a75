"""External data providers.

- mapbox: Static Images API URL builders and image fetch
- boundary_source: Boundary GeoJSON data set client
"""

from idn_area_map.providers.base import BoundaryNotFoundError, BoundarySourceError, ProviderError
from idn_area_map.providers.boundary_source import BoundarySource

__all__ = [
    "BoundaryNotFoundError",
    "BoundarySource",
    "BoundarySourceError",
    "ProviderError",
]
