"""KML Viewer.

Loads KML documents into GeoJSON-shaped feature collections and derives
the statistics shown next to the map: a per-geometry-type summary and the
great-circle length of every line.
"""

__version__ = "0.1.0"
