"""
Days of Presence Calculator

Counts days physically present in the U.S. for a calendar year:
the day of arrival counts, the day of departure does not.
"""

from datetime import date
from typing import Iterable, List, NamedTuple, Optional

from f1taxmate.models.filing import Visit


class TravelSegment(NamedTuple):
    """Stay clipped to one calendar year (Schedule O Line G row)"""
    entry: date
    exit: Optional[date]


def days_present(visits: Iterable[Visit], year: int, today: Optional[date] = None) -> int:
    """
    Days present in the U.S. during ``year``.

    A visit without an exit date is still ongoing: it runs to today, or to
    Dec 31 when that is earlier. Stays that end after the year (or are still
    ongoing) count Dec 31 itself.
    """
    today = today or date.today()
    year_start = date(year, 1, 1)
    year_end = date(year, 12, 31)
    total = 0

    for visit in visits:
        if visit.entry_date is None:
            continue

        if visit.exit_date is not None:
            exit_day = visit.exit_date
        else:
            exit_day = today if today < year_end else year_end

        start = max(visit.entry_date, year_start)
        end = min(exit_day, year_end)
        if start > end:
            continue

        diff = (end - start).days
        if visit.exit_date is not None and year_start <= visit.exit_date <= year_end:
            total += diff
        else:
            total += diff + 1

    return total


def travel_segments(visits: Iterable[Visit], year: int) -> List[TravelSegment]:
    """
    Stays overlapping ``year``, sorted by entry.

    Entry is clipped to Jan 1 for stays that began earlier; the exit is only
    reported when the filer actually left during the year.
    """
    year_start = date(year, 1, 1)
    year_end = date(year, 12, 31)
    segments = []

    for visit in visits:
        if visit.entry_date is None or visit.entry_date > year_end:
            continue
        if visit.exit_date is not None and visit.exit_date < year_start:
            continue

        entry = max(visit.entry_date, year_start)
        exit_day = visit.exit_date if visit.exit_date is not None and visit.exit_date <= year_end else None
        segments.append(TravelSegment(entry=entry, exit=exit_day))

    segments.sort(key=lambda segment: segment.entry)
    return segments
