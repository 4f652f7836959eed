"""Field decoders shared by the GTFS entity models.

Each decoder turns the raw text of a CSV cell into a Python value and raises
``ValueError`` when the text cannot be decoded. The ``Annotated`` aliases at
the bottom plug them into pydantic models.
"""

import math
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainValidator

from gtfs_structures.models.enums import (
    Availability,
    LocationType,
    PaymentMethod,
    PickupDropOffType,
    RouteType,
    Transfers,
)


def parse_bool(value: Any) -> bool:
    """Decode a GTFS flag: only the literal "1" is true."""
    if isinstance(value, bool):
        return value
    return value == "1"


def parse_date(value: Any) -> date:
    """Parse a GTFS date (YYYYMMDD).

    Args:
        value: Date string, exactly 8 digits.

    Returns:
        The parsed date.

    Raises:
        ValueError: If the string is not a valid YYYYMMDD date.
    """
    if isinstance(value, date):
        return value
    text = str(value)
    if len(text) != 8 or not (text.isascii() and text.isdigit()):
        raise ValueError(f"Invalid GTFS date format: {value!r}")
    try:
        return datetime.strptime(text, "%Y%m%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid GTFS date format: {value!r}") from e


def parse_time(value: Any) -> int:
    """Parse a GTFS time into seconds since midnight of the service day.

    GTFS times can exceed 24:00:00 for trips that extend past midnight,
    so "25:30:00" gives 91800.

    Args:
        value: Time string in H:MM:SS format (hours can exceed 24).

    Returns:
        hours * 3600 + minutes * 60 + seconds.

    Raises:
        ValueError: If the time string is invalid.
    """
    if isinstance(value, int):
        return value
    parts = str(value).strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Invalid GTFS time format: {value!r}")

    try:
        hours, minutes, seconds = (parse_unsigned(part) for part in parts)
    except ValueError as e:
        raise ValueError(f"Invalid GTFS time format: {value!r}") from e

    return hours * 3600 + minutes * 60 + seconds


def parse_trimmed_float(value: Any) -> float:
    """Parse a finite float, ignoring surrounding whitespace.

    Digit separators ("1_000") and nan/inf spellings are rejected.
    """
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if "_" in text:
            raise ValueError(f"Invalid number: {value!r}")
        try:
            number = float(text)
        except ValueError as e:
            raise ValueError(f"Invalid number: {value!r}") from e
    if not math.isfinite(number):
        raise ValueError(f"Invalid number: {value!r}")
    return number


def parse_unsigned(value: Any) -> int:
    """Parse a non-negative integer written with ASCII digits only."""
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"Invalid unsigned integer: {value!r}")
        return value
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"Invalid unsigned integer: {value!r}")
    return int(text)


def parse_route_type(value: Any) -> RouteType:
    """Decode a route type, keeping unknown codes as RouteType.OTHER."""
    if isinstance(value, RouteType):
        return value
    return RouteType(parse_unsigned(value))


def parse_transfers(value: Any) -> Transfers:
    """Decode a transfers count; unknown counts become Transfers.OTHER."""
    if isinstance(value, Transfers):
        return value
    return Transfers(parse_unsigned(value))


def parse_location_type(value: Any) -> LocationType:
    # anything we don't recognise is treated as a plain stop point
    if isinstance(value, LocationType):
        return value
    text = str(value).strip()
    if text == "1":
        return LocationType.STOP_AREA
    if text == "2":
        return LocationType.STATION_ENTRANCE
    return LocationType.STOP_POINT


def _closed_enum_parser(enum_cls):
    """Build a decoder that accepts only the codes defined by enum_cls."""

    def parse(value: Any):
        if isinstance(value, enum_cls):
            return value
        code = parse_unsigned(value)
        try:
            return enum_cls(code)
        except ValueError as e:
            raise ValueError(f"Invalid {enum_cls.__name__} code: {value!r}") from e

    return parse


parse_pickup_drop_off_type = _closed_enum_parser(PickupDropOffType)
parse_availability = _closed_enum_parser(Availability)
parse_payment_method = _closed_enum_parser(PaymentMethod)


GTFSBool = Annotated[bool, PlainValidator(parse_bool)]
GTFSDate = Annotated[date, PlainValidator(parse_date)]
GTFSTime = Annotated[int, PlainValidator(parse_time)]
TrimmedFloat = Annotated[float, BeforeValidator(parse_trimmed_float)]
Unsigned = Annotated[int, PlainValidator(parse_unsigned)]
RouteTypeField = Annotated[RouteType, PlainValidator(parse_route_type)]
TransfersField = Annotated[Transfers, PlainValidator(parse_transfers)]
LocationTypeField = Annotated[LocationType, PlainValidator(parse_location_type)]
PickupDropOffField = Annotated[PickupDropOffType, PlainValidator(parse_pickup_drop_off_type)]
AvailabilityField = Annotated[Availability, PlainValidator(parse_availability)]
PaymentMethodField = Annotated[PaymentMethod, PlainValidator(parse_payment_method)]
