"""Service day calculation for GTFS calendars."""

from datetime import date, timedelta

from gtfs_structures.models.enums import SERVICE_ADDED, SERVICE_REMOVED
from gtfs_structures.models.feed import Gtfs


def trip_days(gtfs: Gtfs, service_id: str, start_date: date) -> list[int]:
    """Get the days on which a service runs, as offsets from start_date.

    Implements the GTFS service day algorithm:
    1. Walk the calendar_dates exceptions of the service. Exceptions before
       start_date are ignored. exception_type=1 adds its offset to the
       result, exception_type=2 marks it as removed.
    2. If the service has a calendar, add every offset from 0 to its
       end_date whose date is within [start_date, end_date] of the calendar,
       whose weekday flag is 1 and which was not removed.

    The offsets added by exceptions come first, in file order, followed by the
    calendar offsets in ascending order. The result is neither sorted nor
    deduplicated as a whole: a day both added by an exception and matching the
    weekly pattern appears twice.

    Args:
        gtfs: Loaded feed.
        service_id: Service to expand.
        start_date: Day with offset 0.

    Returns:
        List of non-negative day offsets. Empty for an unknown service.
    """
    result: list[int] = []

    removed_days: set[int] = set()
    for extra_day in gtfs.calendar_dates.get(service_id, []):
        offset = (extra_day.date - start_date).days
        if offset < 0:
            continue
        if extra_day.exception_type == SERVICE_ADDED:
            result.append(offset)
        elif extra_day.exception_type == SERVICE_REMOVED:
            removed_days.add(offset)

    calendar = gtfs.calendar.get(service_id)
    if calendar is not None:
        # days before the calendar starts can never match
        first_offset = max(0, (calendar.start_date - start_date).days)
        total_days = (calendar.end_date - start_date).days
        for days_offset in range(first_offset, total_days + 1):
            current_date = start_date + timedelta(days=days_offset)
            if (
                calendar.start_date <= current_date <= calendar.end_date
                and calendar.valid_weekday(current_date)
                and days_offset not in removed_days
            ):
                result.append(days_offset)

    return result
