"""
flightscout Visualization Component

Interactive HTML map export for scan and ranking results.

Main Classes:
    - MapGenerator: Folium map with reference airports, aircraft and
      ranked origin airports

Example:
    >>> from flightscout.visualization import MapGenerator
    >>> generator = MapGenerator(53.6304, 9.9882)
    >>> generator.add_scan_result(result)
    >>> generator.save('aircraft.html')

Map Styles:
    - CartoDB.Positron (default)
    - CartoDB.DarkMatter
    - OpenStreetMap
"""

from .map_generator import MapGenerator

__all__ = [
    "MapGenerator",
]
