"""Queries over a loaded GTFS feed."""
