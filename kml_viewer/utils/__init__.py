"""Shared helpers: spherical geodesy."""
