"""Parsing, loading and fetching of GTFS files."""
