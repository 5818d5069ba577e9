"""
GPL-3.0 LICENSE

Copyright (C) 2021-2024  Shobhits7, avizum

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

from __future__ import annotations

import datetime
import time

import humanize
import pytz

__all__ = (
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "MONTH",
    "YEAR",
    "DECADE",
    "current_ms",
    "format_timestamp",
    "age_ms",
    "humanize_age",
)

# Unit sizes in milliseconds. Months and years are averages.
SECOND: int = 1000
MINUTE: int = 60 * SECOND
HOUR: int = 60 * MINUTE
DAY: int = 24 * HOUR
WEEK: int = 7 * DAY
MONTH: float = 30.44 * DAY
YEAR: float = 365.25 * DAY
DECADE: float = 10 * YEAR


def current_ms() -> int:
    return time.time_ns() // 1_000_000


def format_timestamp(timestamp_ms: int, tz: str = "UTC") -> str:
    """Converts a millisecond timestamp to a readable string in the given time zone.

    Ex: 1420070401000 -> Thursday, January 01 2015 00:00:01.000 UTC
    """
    when = datetime.datetime.fromtimestamp(timestamp_ms / 1000, tz=pytz.timezone(tz))
    return f"{when:%A, %B %d %Y %H:%M:%S}.{timestamp_ms % 1000:03d} {when:%Z}"


def age_ms(timestamp_ms: int, now_ms: int | None = None) -> int:
    """How many milliseconds ago `timestamp_ms` was."""
    if now_ms is None:
        now_ms = current_ms()
    return now_ms - timestamp_ms


def humanize_age(timestamp_ms: int, now_ms: int | None = None, *, minimum_unit: str = "milliseconds") -> str:
    """Converts the age of a timestamp to a readable string.

    Ex: 90500ms ago -> 1 minute, 30 seconds and 500 milliseconds
    """
    delta = datetime.timedelta(milliseconds=age_ms(timestamp_ms, now_ms))
    return humanize.precisedelta(delta, minimum_unit=minimum_unit)
