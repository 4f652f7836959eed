"""GTFS entity models and the loaded feed."""
