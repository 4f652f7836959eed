"""Decoders turning GTFS CSV files into entity records.

Every reader takes a binary stream. A file is either decoded completely or
rejected: the first row that fails to decode raises GTFSDecodeError.
"""

import csv
import io
import logging
from collections.abc import Iterator
from typing import IO, TypeVar

from pydantic import ValidationError

from gtfs_structures.errors import GTFSDecodeError
from gtfs_structures.models.gtfs import (
    Agency,
    Calendar,
    CalendarDate,
    FareAttribute,
    GTFSRecord,
    Route,
    Shape,
    Stop,
    StopTimeRecord,
    Trip,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=GTFSRecord)

# Files are UTF-8, possibly with a byte order mark
CSV_ENCODING = "utf-8-sig"


def _build_header_index(header: list[str]) -> dict[str, int]:
    """Map each column name to its position; the first duplicate wins."""
    header_index: dict[str, int] = {}
    for idx, name in enumerate(header):
        cleaned = name.strip()
        if cleaned and cleaned not in header_index:
            header_index[cleaned] = idx
    return header_index


def _row_from_index(row: list[str], header_index: dict[str, int]) -> dict[str, str]:
    """Map a CSV row list to a dict by header index."""
    return {col: row[idx] if idx < len(row) else "" for col, idx in header_index.items()}


def iter_rows(stream: IO[bytes], filename: str) -> Iterator[tuple[int, dict[str, str]]]:
    """Yield (line number, row dict) for each data row of a CSV file.

    Raises:
        GTFSDecodeError: If the file has no header or is not valid CSV.
    """
    text_file = io.TextIOWrapper(stream, encoding=CSV_ENCODING, newline="")
    reader = csv.reader(text_file)
    try:
        header = next(reader, None)
        if header is None:
            raise GTFSDecodeError(filename, "file is empty")
        header_index = _build_header_index(header)
        for row in reader:
            if not row:
                continue
            yield reader.line_num, _row_from_index(row, header_index)
    except (csv.Error, UnicodeDecodeError) as e:
        raise GTFSDecodeError(filename, str(e), reader.line_num) from e
    finally:
        # leave the underlying stream to its owner
        if not stream.closed:
            text_file.detach()


def decode_records(
    model: type[RecordT], stream: IO[bytes], filename: str
) -> Iterator[RecordT]:
    """Decode each row of a CSV file into a model instance."""
    for line, row in iter_rows(stream, filename):
        try:
            yield model.model_validate(row)
        except ValidationError as e:
            raise GTFSDecodeError(filename, _describe(e), line) from e


def _describe(error: ValidationError) -> str:
    """One-line summary of a pydantic validation error."""
    parts = []
    for detail in error.errors():
        column = ".".join(str(loc) for loc in detail["loc"]) or "row"
        parts.append(f"{column}: {detail['msg']}")
    return "; ".join(parts)


def _index_by_id(records: Iterator[RecordT], filename: str) -> dict[str, RecordT]:
    """Key records by id, keeping the last record when an id repeats."""
    indexed: dict[str, RecordT] = {}
    for record in records:
        if record.id in indexed:
            logger.warning(f"Duplicate id {record.id!r} in {filename}, keeping the last one")
        indexed[record.id] = record
    return indexed


def _group_by(records: Iterator[RecordT], key: str) -> dict[str, list[RecordT]]:
    """Group records by one of their fields, keeping file order."""
    grouped: dict[str, list[RecordT]] = {}
    for record in records:
        grouped.setdefault(getattr(record, key), []).append(record)
    return grouped


def read_agencies(stream: IO[bytes], filename: str = "agency.txt") -> list[Agency]:
    return list(decode_records(Agency, stream, filename))


def read_stops(stream: IO[bytes], filename: str = "stops.txt") -> dict[str, Stop]:
    return _index_by_id(decode_records(Stop, stream, filename), filename)


def read_routes(stream: IO[bytes], filename: str = "routes.txt") -> dict[str, Route]:
    return _index_by_id(decode_records(Route, stream, filename), filename)


def read_trips(stream: IO[bytes], filename: str = "trips.txt") -> dict[str, Trip]:
    return _index_by_id(decode_records(Trip, stream, filename), filename)


def read_calendars(stream: IO[bytes], filename: str = "calendar.txt") -> dict[str, Calendar]:
    return _index_by_id(decode_records(Calendar, stream, filename), filename)


def read_calendar_dates(
    stream: IO[bytes], filename: str = "calendar_dates.txt"
) -> dict[str, list[CalendarDate]]:
    """Read calendar_dates.txt grouped by service id.

    Exceptions keep file order and are never deduplicated.
    """
    return _group_by(decode_records(CalendarDate, stream, filename), "service_id")


def read_shapes(stream: IO[bytes], filename: str = "shapes.txt") -> dict[str, list[Shape]]:
    """Read shapes.txt grouped by shape id, points in file order."""
    return _group_by(decode_records(Shape, stream, filename), "shape_id")


def read_fare_attributes(
    stream: IO[bytes], filename: str = "fare_attributes.txt"
) -> dict[str, FareAttribute]:
    return _index_by_id(decode_records(FareAttribute, stream, filename), filename)


def read_stop_times(
    stream: IO[bytes], filename: str = "stop_times.txt"
) -> list[StopTimeRecord]:
    """Read stop_times.txt into staging records, in file order.

    The records still reference their trip and stop by id; the loader
    resolves them once trips and stops are known.
    """
    return list(decode_records(StopTimeRecord, stream, filename))
