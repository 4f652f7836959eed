"""Read GTFS bundles into a cross-referenced in-memory model."""

from gtfs_structures.data.gtfs_loader import GTFSLoader
from gtfs_structures.errors import (
    GTFSAccessError,
    GTFSDecodeError,
    GTFSError,
    GTFSFormatError,
    GTFSReferenceError,
)
from gtfs_structures.models.enums import (
    Availability,
    LocationType,
    ObjectType,
    PaymentMethod,
    PickupDropOffType,
    RouteType,
    Transfers,
)
from gtfs_structures.models.feed import Gtfs
from gtfs_structures.models.gtfs import (
    Agency,
    Calendar,
    CalendarDate,
    FareAttribute,
    Route,
    Shape,
    Stop,
    StopTime,
    Trip,
)

__version__ = "0.1.0"

__all__ = [
    # Loading
    "Gtfs",
    "GTFSLoader",
    # Errors
    "GTFSError",
    "GTFSAccessError",
    "GTFSFormatError",
    "GTFSDecodeError",
    "GTFSReferenceError",
    # Models
    "Agency",
    "Calendar",
    "CalendarDate",
    "FareAttribute",
    "Route",
    "Shape",
    "Stop",
    "StopTime",
    "Trip",
    # Enums
    "Availability",
    "LocationType",
    "ObjectType",
    "PaymentMethod",
    "PickupDropOffType",
    "RouteType",
    "Transfers",
]
