"""Enumerations used by the GTFS entity models.

Closed enumerations reject unknown codes. Open enumerations (subclasses of
``OpenIntEnum``) keep unknown codes as ``OTHER`` pseudo-members so that a
feed with a non-standard value still loads and the raw code can be inspected.
"""

from enum import Enum, IntEnum


class ObjectType(str, Enum):
    """Kind of GTFS object."""

    AGENCY = "agency"
    STOP = "stop"
    ROUTE = "route"
    TRIP = "trip"
    CALENDAR = "calendar"
    SHAPE = "shape"
    FARE = "fare"


class OpenIntEnum(IntEnum):
    """IntEnum that turns unknown non-negative codes into ``OTHER`` members."""

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            return None
        member = int.__new__(cls, value)
        member._name_ = "OTHER"
        member._value_ = value
        return member

    @property
    def is_other(self) -> bool:
        """True when the code is outside the values defined by GTFS."""
        return self._name_ == "OTHER"


class RouteType(OpenIntEnum):
    """Transport mode of a route.

    Only 0-7 are defined, but real feeds contain other codes
    (e.g. extended route types), kept as ``RouteType.OTHER``.
    """

    TRAMWAY = 0
    SUBWAY = 1
    RAIL = 2
    BUS = 3
    FERRY = 4
    CABLE_CAR = 5
    GONDOLA = 6
    FUNICULAR = 7


class Transfers(OpenIntEnum):
    """Number of transfers permitted on a fare."""

    UNLIMITED = -1  # empty transfers field
    NO_TRANSFER = 0
    UNIQUE_TRANSFER = 1
    TWO_TRANSFERS = 2


class LocationType(IntEnum):
    STOP_POINT = 0
    STOP_AREA = 1
    STATION_ENTRANCE = 2


class PickupDropOffType(IntEnum):
    """Pickup or drop off policy at a stop time."""

    REGULAR = 0
    NOT_AVAILABLE = 1
    ARRANGE_BY_PHONE = 2
    COORDINATE_WITH_DRIVER = 3


class Availability(IntEnum):
    """Wheelchair boarding availability."""

    INFORMATION_NOT_AVAILABLE = 0
    AVAILABLE = 1
    NOT_AVAILABLE = 2


class PaymentMethod(IntEnum):
    ABOARD = 0
    PRE_BOARDING = 1


# calendar_dates.txt exception_type values
SERVICE_ADDED = 1
SERVICE_REMOVED = 2
