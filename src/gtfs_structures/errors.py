"""Exceptions raised while loading and querying GTFS data."""


class GTFSError(Exception):
    """Base class for every error raised by gtfs_structures."""


class GTFSAccessError(GTFSError, OSError):
    """A source or one of its files cannot be opened or read."""


class GTFSFormatError(GTFSError, ValueError):
    """The container is not what we expected (bad ZIP, missing entry)."""


class GTFSDecodeError(GTFSError, ValueError):
    """A CSV row could not be decoded into its record type."""

    def __init__(self, filename: str, message: str, line: int | None = None):
        self.filename = filename
        self.line = line
        self.message = message
        location = f"{filename}, line {line}" if line is not None else filename
        super().__init__(f"Error reading {location}: {message}")


class GTFSReferenceError(GTFSError, LookupError):
    """An id does not resolve in the collection it should belong to."""

    def __init__(self, id: str, filename: str | None = None):
        self.id = id
        self.filename = filename
        message = f"The id {id} is not known"
        if filename:
            message = f"Error reading {filename}: {message}"
        super().__init__(message)
