import struct
import zipfile
from pathlib import Path

import pytest

SAMPLE_FILES: dict[str, str] = {
    "agency.txt": (
        "agency_id,agency_name,agency_url,agency_timezone,agency_lang,agency_phone\n"
        "1,BIBUS,http://www.bibus.fr,Europe/Paris,fr,02 98 34 42 22\n"
    ),
    "stops.txt": (
        "stop_id,stop_code,stop_name,stop_desc,location_type,parent_station,"
        "stop_lon,stop_lat,stop_timezone,wheelchair_boarding\n"
        "stop1,,Stop Area,,1,,-4.4806, 48.3918,,\n"
        "stop2,S2,StopPoint,Near the port,0,stop1,-4.48,48.39,Europe/Paris,1\n"
        "stop3,,Stop Point child,,,1,-4.49, 48.38 ,,2\n"
        "stop4,,Entrance,,2,stop1,,,,\n"
        "stop5,,Sorano,,,,-4.5,48.4,,0\n"
    ),
    "routes.txt": (
        "route_id,agency_id,route_short_name,route_long_name,route_desc,route_type,route_order\n"
        "1,1,100,100 Long Name,,3,1\n"
        "invalid_type,1,42,,,42,\n"
    ),
    "trips.txt": (
        "route_id,service_id,trip_id,trip_headsign\n"
        "1,service1,trip1,Plouzané\n"
        "1,service1,trip2,Brest\n"
    ),
    "calendar.txt": (
        "service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,start_date,end_date\n"
        "service1,0,0,0,0,0,1,1,20170101,20170115\n"
    ),
    "calendar_dates.txt": (
        "service_id,date,exception_type\n"
        "service1,20170101,2\n"
        "service1,20161231,1\n"
        "service2,20170101,1\n"
    ),
    "stop_times.txt": (
        "trip_id,arrival_time,departure_time,stop_id,stop_sequence,pickup_type,drop_off_type\n"
        "trip1,14:20:00,14:20:00,stop3,1,2,\n"
        "trip1,14:00:00,14:00:00,stop2,0,0,1\n"
        "trip2,25:10:00,25:10:30,stop5,3,,\n"
        "trip2,24:55:00,24:56:00,stop2,2,,\n"
        "trip2,25:00:00,25:00:00,stop3,2,,\n"
    ),
    "shapes.txt": (
        "shape_id,shape_pt_lat,shape_pt_lon,shape_pt_sequence,shape_dist_traveled\n"
        "A_shp,37.61956,-122.48161,1,\n"
        "A_shp,37.64430,-122.41070,6,6.8310\n"
        "A_shp,37.65863,-122.30839,11,15.8765\n"
    ),
    "fare_attributes.txt": (
        "fare_id,price,currency_type,payment_method,transfers,agency_id,transfer_duration\n"
        "50,1.50,EUR,0,,1,3600\n"
    ),
}


def write_gtfs_dir(gtfs_dir: Path, files: dict[str, str]) -> Path:
    """Write GTFS files into a directory."""
    gtfs_dir.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (gtfs_dir / name).write_text(content, encoding="utf-8")
    return gtfs_dir


def write_gtfs_zip(
    zip_path: Path,
    files: dict[str, str],
    prefix: str = "",
    compression: int = zipfile.ZIP_STORED,
) -> Path:
    """Write GTFS files into a ZIP archive, optionally under a directory."""
    with zipfile.ZipFile(zip_path, "w", compression=compression) as zf:
        if prefix:
            zf.writestr(zipfile.ZipInfo(prefix), "")
        for name, content in files.items():
            zf.writestr(prefix + name, content)
    return zip_path


def flip_entry_bytes(zip_path: Path, name: str, count: int = 10) -> Path:
    """Invert a few payload bytes of one entry, keeping the archive readable."""
    with zipfile.ZipFile(zip_path) as zf:
        info = zf.getinfo(name)
    data = bytearray(zip_path.read_bytes())
    # local file header: 30 fixed bytes, then the file name and extra field
    name_len, extra_len = struct.unpack_from("<HH", data, info.header_offset + 26)
    start = info.header_offset + 30 + name_len + extra_len
    for pos in range(start + 2, start + min(count + 2, info.compress_size)):
        data[pos] ^= 0xFF
    zip_path.write_bytes(bytes(data))
    return zip_path


@pytest.fixture
def sample_files() -> dict[str, str]:
    """A copy of the sample GTFS files, safe to modify."""
    return dict(SAMPLE_FILES)


@pytest.fixture
def sample_gtfs_dir(tmp_path: Path, sample_files: dict[str, str]) -> Path:
    """Create a sample GTFS directory with minimal valid data."""
    return write_gtfs_dir(tmp_path / "gtfs", sample_files)


@pytest.fixture
def sample_gtfs_zip(tmp_path: Path, sample_files: dict[str, str]) -> Path:
    """Create a sample GTFS ZIP file."""
    return write_gtfs_zip(tmp_path / "gtfs.zip", sample_files)


@pytest.fixture
def sample_gtfs_subdirectory_zip(tmp_path: Path, sample_files: dict[str, str]) -> Path:
    """Create a GTFS ZIP file whose files sit in a top-level directory."""
    return write_gtfs_zip(tmp_path / "subdirectory.zip", sample_files, prefix="gtfs/")
