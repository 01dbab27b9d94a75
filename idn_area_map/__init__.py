"""idn-area Map static boundary imagery.

Builds static map preview images for Indonesian administrative areas
(provinces, regencies, districts, villages) by encoding their boundaries
into a Mapbox Static Images request that stays under the URL length
ceiling, degrading detail and island coverage only as far as needed.
"""

__version__ = "0.1.0"
