"""Viewer activities.

Each activity performs a single unit of work on a loaded document:
- load_kml: Read a KML document into a GeoJSON feature collection
- classify_features: Count features per geometry type
- measure_lines: Great-circle length of every line path
"""
