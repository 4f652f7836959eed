"""GTFS data loader building the in-memory feed model."""

import io
import logging
import time
import zipfile
import zlib
from collections.abc import Callable
from operator import attrgetter
from pathlib import Path
from typing import IO, Any

from gtfs_structures.data import readers
from gtfs_structures.data.archive_client import GTFSArchiveClient
from gtfs_structures.data.config import GTFSConfig, get_config
from gtfs_structures.data.sources import GTFSSource, ZipSource, open_source
from gtfs_structures.errors import GTFSAccessError, GTFSReferenceError
from gtfs_structures.models.feed import Gtfs
from gtfs_structures.models.gtfs import Stop, StopTime, StopTimeRecord, Trip

logger = logging.getLogger(__name__)

STOP_TIMES_FILE = "stop_times.txt"

# File definitions: feed attribute -> (csv_filename, reader, mandatory).
# stop_times.txt is not listed: it is read last, once trips and stops are known.
FILE_DEFINITIONS: dict[str, tuple[str, Callable[..., Any], bool]] = {
    "agencies": ("agency.txt", readers.read_agencies, True),
    "stops": ("stops.txt", readers.read_stops, True),
    "routes": ("routes.txt", readers.read_routes, True),
    "trips": ("trips.txt", readers.read_trips, True),
    "calendar": ("calendar.txt", readers.read_calendars, True),
    "calendar_dates": ("calendar_dates.txt", readers.read_calendar_dates, True),
    "shapes": ("shapes.txt", readers.read_shapes, False),
    "fare_attributes": ("fare_attributes.txt", readers.read_fare_attributes, False),
}


def resolve_stop_times(
    records: list[StopTimeRecord],
    trips: dict[str, Trip],
    stops: dict[str, Stop],
) -> None:
    """Attach stop times to their trips, then order each trip by stop_sequence.

    The trip id is checked before the stop id. The sort is stable, so stop
    times sharing a sequence number keep their file order.

    Raises:
        GTFSReferenceError: If a record names an unknown trip or stop.
    """
    for record in records:
        trip = trips.get(record.trip_id)
        if trip is None:
            raise GTFSReferenceError(record.trip_id, filename=STOP_TIMES_FILE)
        stop = stops.get(record.stop_id)
        if stop is None:
            raise GTFSReferenceError(record.stop_id, filename=STOP_TIMES_FILE)
        trip.stop_times.append(StopTime.from_record(record, stop))

    for trip in trips.values():
        trip.stop_times.sort(key=attrgetter("stop_sequence"))


class GTFSLoader:
    """Loader for GTFS bundles (directory, ZIP file, stream or URL)."""

    def __init__(self, config: GTFSConfig | None = None):
        """Initialize the loader.

        Args:
            config: Settings used for downloads. Defaults to get_config(),
                read on the first download.
        """
        self._config = config

    @property
    def config(self) -> GTFSConfig:
        if self._config is None:
            self._config = get_config()
        return self._config

    def load(self, gtfs_path: Path | str) -> Gtfs:
        """Load GTFS data from a directory or ZIP file.

        Raises:
            GTFSAccessError: If the path or a mandatory file cannot be read.
            GTFSFormatError: If the archive is invalid or incomplete.
            GTFSDecodeError: If a row cannot be decoded.
            GTFSReferenceError: If a stop time names an unknown trip or stop.
        """
        with open_source(gtfs_path) as source:
            return self.load_source(source)

    def load_zip(self, zip_path: Path | str) -> Gtfs:
        """Load GTFS data from a ZIP file."""
        with ZipSource(zip_path) as source:
            return self.load_source(source)

    def load_reader(self, reader: IO[bytes]) -> Gtfs:
        """Load GTFS data from a seekable stream holding a ZIP archive."""
        with ZipSource(reader) as source:
            return self.load_source(source)

    async def load_url(self, url: str) -> Gtfs:
        """Download a zipped bundle and load it."""
        async with GTFSArchiveClient(self.config) as client:
            body = await client.fetch_archive(url)
        return self.load_reader(io.BytesIO(body))

    def load_source(self, source: GTFSSource) -> Gtfs:
        """Load every GTFS file of a source and resolve stop times.

        Either the complete feed is returned or an error is raised; nothing
        partially loaded escapes.
        """
        started = time.monotonic()
        logger.info(f"Loading GTFS data from {source!r}")

        collections: dict[str, Any] = {}
        for attribute, (csv_filename, reader, mandatory) in FILE_DEFINITIONS.items():
            loaded = self._read_file(source, csv_filename, reader, mandatory)
            if loaded is not None:
                collections[attribute] = loaded

        stop_time_records = self._read_file(
            source, STOP_TIMES_FILE, readers.read_stop_times, mandatory=True
        )
        resolve_stop_times(stop_time_records, collections["trips"], collections["stops"])

        read_duration = int((time.monotonic() - started) * 1000)
        gtfs = Gtfs(**collections, read_duration=read_duration)
        logger.info(f"GTFS loading complete in {read_duration:,} ms")
        return gtfs

    def _read_file(
        self,
        source: GTFSSource,
        csv_filename: str,
        reader: Callable[..., Any],
        mandatory: bool,
    ) -> Any:
        """Decode one file of the source, or return None for a missing optional file."""
        name = source.locate(csv_filename)
        if name is None:
            if mandatory:
                raise source.missing_file_error(csv_filename)
            logger.warning(f"Optional file {csv_filename} not found")
            return None

        logger.info(f"Loading {csv_filename} from {name}...")
        try:
            with source.open_entry(name) as stream:
                loaded = reader(stream, csv_filename)
        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            # damaged archive entry, detected while decompressing
            raise GTFSAccessError(f"Cannot read {name}: {e}") from e
        logger.info(f"  Loaded {len(loaded):,} records from {csv_filename}")
        return loaded
