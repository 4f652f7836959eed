"""The loaded GTFS feed and its lookups."""

from datetime import date
from pathlib import Path
from typing import IO, TypeVar

from pydantic import BaseModel, Field

from gtfs_structures.errors import GTFSReferenceError
from gtfs_structures.models.gtfs import (
    Agency,
    Calendar,
    CalendarDate,
    FareAttribute,
    Route,
    Shape,
    Stop,
    Trip,
)

T = TypeVar("T")


def _lookup(collection: dict[str, T], id: str) -> T:
    try:
        return collection[id]
    except KeyError:
        raise GTFSReferenceError(id) from None


class Gtfs(BaseModel):
    """A fully loaded and resolved GTFS feed.

    Built once by GTFSLoader and only read afterwards. Every stop time of a
    trip points at the Stop object stored in ``stops``.
    """

    agencies: list[Agency] = Field(default_factory=list)
    stops: dict[str, Stop] = Field(default_factory=dict)
    routes: dict[str, Route] = Field(default_factory=dict)
    trips: dict[str, Trip] = Field(default_factory=dict)
    calendar: dict[str, Calendar] = Field(default_factory=dict)
    calendar_dates: dict[str, list[CalendarDate]] = Field(default_factory=dict)
    shapes: dict[str, list[Shape]] = Field(default_factory=dict)
    fare_attributes: dict[str, FareAttribute] = Field(default_factory=dict)
    read_duration: int = 0  # milliseconds

    @classmethod
    def from_path(cls, gtfs_path: Path | str) -> "Gtfs":
        """Load a GTFS directory or ZIP file."""
        from gtfs_structures.data.gtfs_loader import GTFSLoader

        return GTFSLoader().load(gtfs_path)

    @classmethod
    def from_zip(cls, zip_path: Path | str) -> "Gtfs":
        """Load a zipped GTFS bundle."""
        from gtfs_structures.data.gtfs_loader import GTFSLoader

        return GTFSLoader().load_zip(zip_path)

    @classmethod
    def from_reader(cls, reader: IO[bytes]) -> "Gtfs":
        """Load a zipped GTFS bundle from a seekable binary stream."""
        from gtfs_structures.data.gtfs_loader import GTFSLoader

        return GTFSLoader().load_reader(reader)

    @classmethod
    async def from_url(cls, url: str) -> "Gtfs":
        """Download and load a zipped GTFS bundle."""
        from gtfs_structures.data.gtfs_loader import GTFSLoader

        return await GTFSLoader().load_url(url)

    def get_stop(self, id: str) -> Stop:
        return _lookup(self.stops, id)

    def get_trip(self, id: str) -> Trip:
        return _lookup(self.trips, id)

    def get_route(self, id: str) -> Route:
        return _lookup(self.routes, id)

    def get_calendar(self, id: str) -> Calendar:
        return _lookup(self.calendar, id)

    def get_calendar_date(self, id: str) -> list[CalendarDate]:
        """All calendar exceptions of a service, in file order."""
        return _lookup(self.calendar_dates, id)

    def get_shape(self, id: str) -> list[Shape]:
        """All points of a shape, in file order."""
        return _lookup(self.shapes, id)

    def get_fare_attribute(self, id: str) -> FareAttribute:
        return _lookup(self.fare_attributes, id)

    def trip_days(self, service_id: str, start_date: date) -> list[int]:
        """Day offsets from start_date on which a service runs.

        See gtfs_structures.services.calendar_service.trip_days.
        """
        from gtfs_structures.services.calendar_service import trip_days

        return trip_days(self, service_id, start_date)

    def counts(self) -> dict[str, int]:
        """Number of loaded records per collection."""
        return {
            "agencies": len(self.agencies),
            "stops": len(self.stops),
            "routes": len(self.routes),
            "trips": len(self.trips),
            "stop_times": sum(len(trip.stop_times) for trip in self.trips.values()),
            "calendar": len(self.calendar),
            "calendar_dates": len(self.calendar_dates),
            "shapes": len(self.shapes),
            "fare_attributes": len(self.fare_attributes),
        }
