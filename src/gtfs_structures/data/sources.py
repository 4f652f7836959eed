"""Byte sources for GTFS bundles.

A source lists the names of the files it holds and opens them as binary
streams. The loader only needs this; where the bytes come from (a directory,
a ZIP file on disk, a downloaded archive held in memory) is up to the source.
"""

import logging
import zipfile
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from gtfs_structures.errors import GTFSAccessError, GTFSError, GTFSFormatError

logger = logging.getLogger(__name__)


class GTFSSource(ABC):
    """A named collection of readable byte streams."""

    @abstractmethod
    def names(self) -> list[str]:
        """Names of all the files in the source."""

    @abstractmethod
    def open_entry(self, name: str) -> IO[bytes]:
        """Open a file of the source for binary reading.

        Raises:
            GTFSAccessError: If the file cannot be opened.
        """

    def locate(self, filename: str) -> str | None:
        """Find the entry for a GTFS file name.

        Matches the exact name or any name ending in "/<filename>", so
        archives that wrap the files in a top-level directory still work.
        """
        suffix = "/" + filename
        for name in self.names():
            if name == filename or name.endswith(suffix):
                return name
        return None

    def missing_file_error(self, filename: str) -> GTFSError:
        """Error to raise when a mandatory file is not in the source."""
        return GTFSFormatError(f"Missing {filename}")

    def close(self) -> None:
        """Release resources held by the source."""

    def __enter__(self) -> "GTFSSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[tuple[str, IO[bytes]]]:
        """Yield (name, stream) for every file; each stream is closed after use."""
        for name in self.names():
            with self.open_entry(name) as stream:
                yield name, stream


class DirectorySource(GTFSSource):
    """GTFS files laid out in a directory."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def names(self) -> list[str]:
        try:
            return sorted(entry.name for entry in self.path.iterdir() if entry.is_file())
        except OSError as e:
            raise GTFSAccessError(f"Cannot list GTFS directory {self.path}: {e}") from e

    def open_entry(self, name: str) -> IO[bytes]:
        try:
            return open(self.path / name, "rb")
        except OSError as e:
            raise GTFSAccessError(f"Cannot open {name}: {e}") from e

    def missing_file_error(self, filename: str) -> GTFSError:
        return GTFSAccessError(f"GTFS file not found: {self.path / filename}")

    def __repr__(self) -> str:
        return f"DirectorySource({str(self.path)!r})"


class ZipSource(GTFSSource):
    """GTFS files packed in a ZIP archive.

    Accepts a path or any seekable binary stream (e.g. an io.BytesIO holding a
    downloaded archive).
    """

    def __init__(self, archive: Path | str | IO[bytes]):
        self._label = str(archive) if isinstance(archive, (str, Path)) else "<stream>"
        try:
            self._zip = zipfile.ZipFile(archive, "r")
        except FileNotFoundError as e:
            raise GTFSAccessError(f"GTFS archive not found: {archive}") from e
        except zipfile.BadZipFile as e:
            raise GTFSFormatError(f"Invalid GTFS archive {self._label}: {e}") from e
        except OSError as e:
            raise GTFSAccessError(f"Cannot read GTFS archive {self._label}: {e}") from e

    def names(self) -> list[str]:
        return [info.filename for info in self._zip.infolist() if not info.is_dir()]

    def open_entry(self, name: str) -> IO[bytes]:
        try:
            return self._zip.open(name)
        except (zipfile.BadZipFile, KeyError) as e:
            raise GTFSFormatError(f"Cannot read {name} from {self._label}: {e}") from e
        except OSError as e:
            raise GTFSAccessError(f"Cannot read {name} from {self._label}: {e}") from e

    def close(self) -> None:
        self._zip.close()

    def __repr__(self) -> str:
        return f"ZipSource({self._label!r})"


def open_source(gtfs_path: Path | str) -> GTFSSource:
    """Open a GTFS directory or ZIP file.

    Raises:
        GTFSAccessError: If the path does not exist.
        GTFSFormatError: If the file is not a ZIP archive.
    """
    gtfs_path = Path(gtfs_path)
    if not gtfs_path.exists():
        raise GTFSAccessError(f"GTFS path not found: {gtfs_path}")
    if gtfs_path.is_dir():
        logger.debug(f"Reading GTFS directory {gtfs_path}")
        return DirectorySource(gtfs_path)
    logger.debug(f"Reading GTFS archive {gtfs_path}")
    return ZipSource(gtfs_path)
