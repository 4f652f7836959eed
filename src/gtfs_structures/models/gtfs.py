"""Pydantic models for GTFS entities.

Field names follow the GTFS column names so a CSV row (as a dict keyed by
header) validates straight into a model. Unknown columns are ignored.
"""

from datetime import date
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gtfs_structures.data.decoders import (
    AvailabilityField,
    GTFSBool,
    GTFSDate,
    GTFSTime,
    LocationTypeField,
    PaymentMethodField,
    PickupDropOffField,
    RouteTypeField,
    TransfersField,
    TrimmedFloat,
    Unsigned,
)
from gtfs_structures.models.enums import (
    Availability,
    LocationType,
    ObjectType,
    PickupDropOffType,
    RouteType,
    Transfers,
)

WEEKDAY_FIELDS = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


class GTFSRecord(BaseModel):
    """Base for records decoded from a GTFS file.

    A blank cell in a column that has a default is treated as if the column
    were absent, so the default applies.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _blank_as_default(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        fields = cls.model_fields
        return {
            key: value
            for key, value in data.items()
            if not (
                isinstance(value, str)
                and not value.strip()
                and key in fields
                and not fields[key].is_required()
            )
        }


class Agency(GTFSRecord):
    """GTFS agency entity."""

    object_type: ClassVar[ObjectType] = ObjectType.AGENCY

    agency_id: str | None = None
    agency_name: str
    agency_url: str
    agency_timezone: str
    agency_lang: str | None = None
    agency_phone: str | None = None
    agency_fare_url: str | None = None
    agency_email: str | None = None

    @property
    def id(self) -> str:
        """Agency id, or "" for single-agency feeds that omit it."""
        return self.agency_id or ""

    def __str__(self) -> str:
        return self.agency_name


class Stop(GTFSRecord):
    """GTFS stop entity."""

    object_type: ClassVar[ObjectType] = ObjectType.STOP

    stop_id: str
    stop_code: str | None = None
    stop_name: str
    stop_desc: str = ""
    location_type: LocationTypeField = LocationType.STOP_POINT
    parent_station: str | None = None  # not checked against stops
    stop_lon: TrimmedFloat = 0.0
    stop_lat: TrimmedFloat = 0.0
    stop_timezone: str | None = None
    wheelchair_boarding: AvailabilityField = Availability.INFORMATION_NOT_AVAILABLE

    @property
    def id(self) -> str:
        return self.stop_id

    def __str__(self) -> str:
        return self.stop_name


class Route(GTFSRecord):
    """GTFS route entity."""

    object_type: ClassVar[ObjectType] = ObjectType.ROUTE

    route_id: str
    route_short_name: str = ""
    route_long_name: str = ""
    route_type: RouteTypeField = RouteType.BUS
    agency_id: str | None = None
    route_order: Unsigned | None = None

    @property
    def id(self) -> str:
        return self.route_id

    def __str__(self) -> str:
        return self.route_long_name or self.route_short_name


class Calendar(GTFSRecord):
    """GTFS calendar entity: the weekly pattern of a service."""

    object_type: ClassVar[ObjectType] = ObjectType.CALENDAR

    service_id: str
    monday: GTFSBool
    tuesday: GTFSBool
    wednesday: GTFSBool
    thursday: GTFSBool
    friday: GTFSBool
    saturday: GTFSBool
    sunday: GTFSBool
    start_date: GTFSDate
    end_date: GTFSDate

    @property
    def id(self) -> str:
        return self.service_id

    def valid_weekday(self, day: date) -> bool:
        """Return True if the weekly pattern runs on day's weekday."""
        return getattr(self, WEEKDAY_FIELDS[day.weekday()])

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()}-{self.end_date.isoformat()}"


class CalendarDate(GTFSRecord):
    """GTFS calendar_dates entity for service exceptions."""

    service_id: str
    date: GTFSDate
    exception_type: Unsigned  # 1=added, 2=removed


class Shape(GTFSRecord):
    """One point of a GTFS shape."""

    object_type: ClassVar[ObjectType] = ObjectType.SHAPE

    shape_id: str
    shape_pt_lat: TrimmedFloat = 0.0
    shape_pt_lon: TrimmedFloat = 0.0
    shape_pt_sequence: Unsigned
    shape_dist_traveled: TrimmedFloat | None = None

    @property
    def id(self) -> str:
        return self.shape_id


class FareAttribute(GTFSRecord):
    """GTFS fare_attributes entity.

    The price is kept as written in the feed; rounding depends on the
    currency and is left to the caller.
    """

    object_type: ClassVar[ObjectType] = ObjectType.FARE

    fare_id: str
    price: str
    currency_type: str
    payment_method: PaymentMethodField
    transfers: TransfersField = Transfers.UNLIMITED
    agency_id: str | None = None
    transfer_duration: Unsigned | None = None  # seconds

    @property
    def id(self) -> str:
        return self.fare_id


class StopTimeRecord(GTFSRecord):
    """A stop_times.txt row before its trip and stop are resolved."""

    trip_id: str
    arrival_time: GTFSTime
    departure_time: GTFSTime
    stop_id: str
    stop_sequence: Unsigned
    pickup_type: PickupDropOffField | None = None
    drop_off_type: PickupDropOffField | None = None


class StopTime(BaseModel):
    """A resolved stop time.

    ``stop`` is the same Stop instance held by the feed, shared by every
    stop time that visits it.
    """

    model_config = ConfigDict(frozen=True)

    arrival_time: int  # seconds since midnight, can exceed 86400
    departure_time: int
    stop: Stop
    pickup_type: PickupDropOffType | None = None
    drop_off_type: PickupDropOffType | None = None
    stop_sequence: int

    @classmethod
    def from_record(cls, record: StopTimeRecord, stop: Stop) -> "StopTime":
        """Build a stop time from its staging record and resolved stop."""
        return cls(
            arrival_time=record.arrival_time,
            departure_time=record.departure_time,
            stop=stop,
            pickup_type=record.pickup_type,
            drop_off_type=record.drop_off_type,
            stop_sequence=record.stop_sequence,
        )

    @property
    def effective_pickup_type(self) -> PickupDropOffType:
        """Pickup policy, REGULAR when the feed leaves it empty."""
        return self.pickup_type if self.pickup_type is not None else PickupDropOffType.REGULAR

    @property
    def effective_drop_off_type(self) -> PickupDropOffType:
        """Drop off policy, REGULAR when the feed leaves it empty."""
        return self.drop_off_type if self.drop_off_type is not None else PickupDropOffType.REGULAR


class Trip(GTFSRecord):
    """GTFS trip entity.

    ``stop_times`` is filled in by the loader once stop_times.txt has been
    resolved, and is ordered by stop_sequence.
    """

    object_type: ClassVar[ObjectType] = ObjectType.TRIP

    trip_id: str
    service_id: str
    route_id: str
    stop_times: list[StopTime] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return self.trip_id

    def __str__(self) -> str:
        return f"route id: {self.route_id}, service id: {self.service_id}"
