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

import pytz

from ..utils import SnowflakeDict, ValidationResult, format_timestamp

__all__ = (
    "WORKER_ID_BITS",
    "SEQUENCE_BITS",
    "MAX_WORKER_ID",
    "MAX_SEQUENCE",
    "WORKER_ID_SHIFT",
    "TIMESTAMP_SHIFT",
    "DEFAULT_EPOCH",
    "encode",
    "decode",
    "parse",
    "validate",
    "compare",
    "is_newer",
    "to_datetime",
    "from_datetime",
)

WORKER_ID_BITS: int = 5
SEQUENCE_BITS: int = 12
MAX_WORKER_ID: int = (1 << WORKER_ID_BITS) - 1
MAX_SEQUENCE: int = (1 << SEQUENCE_BITS) - 1
WORKER_ID_SHIFT: int = SEQUENCE_BITS
TIMESTAMP_SHIFT: int = WORKER_ID_SHIFT + WORKER_ID_BITS

DEFAULT_EPOCH: int = 1420070400000  # 2015-01-01T00:00:00Z

_UNIX_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def _is_snowflake_like(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.isascii() and value.isdigit()


def encode(timestamp_ms: int, worker_id: int, sequence: int, *, epoch: int = DEFAULT_EPOCH) -> int:
    """Packs a timestamp, worker ID and sequence into a snowflake.

    The parts are not range checked. Use `validate` on the result if they come from somewhere untrusted.
    """
    return ((timestamp_ms - epoch) << TIMESTAMP_SHIFT) | (worker_id << WORKER_ID_SHIFT) | sequence


def decode(snowflake: int | str, *, epoch: int = DEFAULT_EPOCH) -> tuple[int, int, int]:
    """Unpacks a snowflake into (timestamp_ms, worker_id, sequence)."""
    snowflake = int(snowflake)
    timestamp_ms = (snowflake >> TIMESTAMP_SHIFT) + epoch
    worker_id = (snowflake >> WORKER_ID_SHIFT) & MAX_WORKER_ID
    sequence = snowflake & MAX_SEQUENCE
    return timestamp_ms, worker_id, sequence


def parse(snowflake: int | str, *, epoch: int = DEFAULT_EPOCH, tz: str = "UTC") -> SnowflakeDict:
    """Decodes a snowflake along with a readable timestamp.

    IDs whose timestamp falls outside of what datetime can represent get the raw
    millisecond value as their readable timestamp.
    """
    timestamp_ms, worker_id, sequence = decode(snowflake, epoch=epoch)
    try:
        human_timestamp = format_timestamp(timestamp_ms, tz)
    except (OverflowError, ValueError, OSError):
        human_timestamp = f"{timestamp_ms}ms"
    return {
        "id": int(snowflake),
        "timestamp": timestamp_ms,
        "human_timestamp": human_timestamp,
        "worker_id": worker_id,
        "sequence": sequence,
    }


def validate(snowflake: object, *, epoch: int = DEFAULT_EPOCH) -> ValidationResult:
    """Checks whether a value could be a snowflake made with `epoch`.

    Never raises. The worker ID and sequence checks can not fail for anything that
    gets past the first check, they are kept to catch layout constant mistakes.
    """
    if not _is_snowflake_like(snowflake):
        return ValidationResult(False, "Snowflake must be a non-negative integer")

    try:
        timestamp_ms, worker_id, sequence = decode(snowflake, epoch=epoch)  # type: ignore
    except ValueError:
        # Digit strings past the int conversion limit.
        return ValidationResult(False, "Snowflake must be a non-negative integer")

    if timestamp_ms < epoch:
        return ValidationResult(False, f"Timestamp {timestamp_ms} is before the epoch {epoch}")
    if not 0 <= worker_id <= MAX_WORKER_ID:
        return ValidationResult(False, f"Worker ID {worker_id} is out of range")
    if not 0 <= sequence <= MAX_SEQUENCE:
        return ValidationResult(False, f"Sequence {sequence} is out of range")

    return ValidationResult(True, "Valid snowflake")


def compare(first: int | str, second: int | str, *, epoch: int = DEFAULT_EPOCH) -> int:
    """Compares the millisecond two snowflakes were made in.

    Returns -1, 0 or 1. Snowflakes from the same millisecond are equal, even if
    their worker ID or sequence differ.
    """
    first_ms = decode(first, epoch=epoch)[0]
    second_ms = decode(second, epoch=epoch)[0]
    return (first_ms > second_ms) - (first_ms < second_ms)


def is_newer(first: int | str, second: int | str, *, epoch: int = DEFAULT_EPOCH) -> bool:
    return compare(first, second, epoch=epoch) == 1


def to_datetime(
    snowflake: int | str, *, epoch: int = DEFAULT_EPOCH, tz: str | None = None
) -> datetime.datetime:
    timestamp_ms = decode(snowflake, epoch=epoch)[0]
    zone = pytz.timezone(tz) if tz else pytz.utc
    return datetime.datetime.fromtimestamp(timestamp_ms / 1000, tz=zone)


def from_datetime(when: datetime.datetime, *, epoch: int = DEFAULT_EPOCH, high: bool = False) -> int:
    """Makes a snowflake pretending to be created at `when`.

    Useful as a bound when filtering IDs by time. With `high` the worker ID and
    sequence bits are all set, so the result is the largest ID for that millisecond.
    Naive datetimes are treated as UTC.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=datetime.timezone.utc)
    timestamp_ms = (when - _UNIX_EPOCH) // datetime.timedelta(milliseconds=1)
    if high:
        return encode(timestamp_ms, MAX_WORKER_ID, MAX_SEQUENCE, epoch=epoch)
    return encode(timestamp_ms, 0, 0, epoch=epoch)
