"""Date arguments and canonical timestamp strings.

Stored timestamps are fixed-width RFC-3339 UTC strings
(`YYYY-MM-DDTHH:MM:SS+00:00`). Range filters compare them as plain strings
and bucketing truncates them to a prefix, so every timestamp written to the
store must go through `format_timestamp`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from dateutil import parser as date_parser

from orgstats.exceptions import InvalidDateError

DATE_FORMAT = "%Y-%m-%d"

START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59)


def parse_day(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as exc:
        raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def parse_date(value: str, *, end_of_day: bool = False) -> datetime:
    """Parse `YYYY-MM-DD` into a UTC day boundary (00:00:00 or 23:59:59)."""
    day = parse_day(value)
    return datetime.combine(day, END_OF_DAY if end_of_day else START_OF_DAY, tzinfo=timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # isoformat keeps a four-digit year
    return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()


def normalize_timestamp(raw: str) -> str:
    """Re-encode any ISO-8601 timestamp from GitHub into the stored form."""
    try:
        return format_timestamp(date_parser.isoparse(raw))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid timestamp {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class DateRange:
    """Calendar-day range, inclusive on both ends.

    SQL filters use the half-open string interval `[lower, upper)` where
    `upper` is the day after `until`; the GitHub API filter uses
    `[start, end]` at second precision. Both cover the same days.
    """

    since: date
    until: date

    @classmethod
    def from_args(cls, since: str, until: str) -> "DateRange":
        date_range = cls(parse_day(since), parse_day(until))
        if date_range.since > date_range.until:
            raise InvalidDateError(f"Start date {since} is after end date {until}")
        return date_range

    @property
    def lower(self) -> str:
        return self.since.isoformat()

    @property
    def upper(self) -> str:
        if self.until == date.max:
            # no next day exists; "T24" sorts after every timestamp of the last day
            return f"{self.until.isoformat()}T24"
        return (self.until + timedelta(days=1)).isoformat()

    @property
    def start(self) -> datetime:
        return datetime.combine(self.since, START_OF_DAY, tzinfo=timezone.utc)

    @property
    def end(self) -> datetime:
        return datetime.combine(self.until, END_OF_DAY, tzinfo=timezone.utc)

    def __str__(self) -> str:
        return f"{self.since.isoformat()} to {self.until.isoformat()}"
