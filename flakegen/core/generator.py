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
import logging
import os
import threading
import time
from typing import Callable

import pytz

from ..utils import (
    DAY,
    DECADE,
    HOUR,
    MINUTE,
    MONTH,
    SECOND,
    WEEK,
    YEAR,
    ClockRegressionError,
    InvalidWorkerId,
    SnowflakeDict,
    ValidationResult,
    age_ms,
    current_ms,
    humanize_age,
)
from . import codec
from .config import load_config

_log = logging.getLogger(__name__)

__all__ = ("IDGenerator",)


class IDGenerator:
    """Issues snowflakes for a single worker.

    One instance should be shared by everything in the process that needs IDs.
    `generate` and the setters hold the same lock, so it is safe to use from many threads.
    """

    def __init__(
        self,
        worker_id: int = 0,
        *,
        epoch: int = codec.DEFAULT_EPOCH,
        clock: Callable[[], int] = current_ms,
        timezone: str = "UTC",
        debug: bool = False,
    ) -> None:
        self._check_worker_id(worker_id)
        # Unknown time zones should fail here, not on the first parse.
        pytz.timezone(timezone)

        self._lock: threading.Lock = threading.Lock()
        self._worker_id: int = worker_id
        self._epoch: int = epoch
        self.clock: Callable[[], int] = clock
        self.timezone: str = timezone
        self.debug: bool = debug
        self.sequence: int = 0
        self.last_ms: int = -1

        _log.info(f"ID generator ready. Worker {worker_id}, epoch {epoch}")

    @classmethod
    def from_config(cls, path: str | os.PathLike[str] = "config.toml", **kwargs) -> IDGenerator:
        config = load_config(path)
        options = {
            "worker_id": config.get("WORKER_ID", 0),
            "epoch": config.get("EPOCH", codec.DEFAULT_EPOCH),
            "timezone": config.get("TIMEZONE", "UTC"),
            "debug": config.get("DEBUG", False),
        }
        options.update(kwargs)
        return cls(**options)

    @staticmethod
    def _check_worker_id(worker_id: int) -> None:
        if isinstance(worker_id, bool) or not isinstance(worker_id, int) or not 0 <= worker_id <= codec.MAX_WORKER_ID:
            raise InvalidWorkerId(worker_id, codec.MAX_WORKER_ID)

    @property
    def worker_id(self) -> int:
        return self._worker_id

    @worker_id.setter
    def worker_id(self, value: int) -> None:
        self._check_worker_id(value)
        with self._lock:
            self._worker_id = value
        _log.info(f"Worker ID set to {value}")

    @property
    def epoch(self) -> int:
        return self._epoch

    @epoch.setter
    def epoch(self, value: int) -> None:
        # IDs made before this will no longer decode correctly.
        with self._lock:
            self._epoch = value
        _log.info(f"Epoch set to {value}")

    def _wait_next_ms(self, last_ms: int) -> int:
        _log.debug(f"Sequence exhausted for {last_ms}, waiting for the next millisecond")
        current_time = self.clock()
        while current_time <= last_ms:
            time.sleep(0)
            current_time = self.clock()
        return current_time

    def generate(self) -> int:
        with self._lock:
            current_time = self.clock()

            if current_time < self.last_ms:
                _log.error(f"Clock moved backwards. Last ID at {self.last_ms}, clock says {current_time}")
                raise ClockRegressionError(self.last_ms, current_time)

            if current_time == self.last_ms:
                self.sequence = (self.sequence + 1) & codec.MAX_SEQUENCE

                # Wrapped around, the sequence stays at 0 for the next millisecond.
                if self.sequence == 0:
                    current_time = self._wait_next_ms(self.last_ms)
            else:
                self.sequence = 0

            self.last_ms = current_time
            return codec.encode(current_time, self._worker_id, self.sequence, epoch=self._epoch)

    def generate_str(self) -> str:
        return str(self.generate())

    def decode(self, snowflake: int | str) -> tuple[int, int, int]:
        return codec.decode(snowflake, epoch=self._epoch)

    def parse(self, snowflake: int | str) -> SnowflakeDict:
        parsed = codec.parse(snowflake, epoch=self._epoch, tz=self.timezone)
        if self.debug:
            _log.debug(f"Snowflake {parsed['id']} was made {parsed['human_timestamp']}")
        return parsed

    def validate(self, snowflake: object) -> ValidationResult:
        return codec.validate(snowflake, epoch=self._epoch)

    def compare(self, first: int | str, second: int | str) -> int:
        return codec.compare(first, second, epoch=self._epoch)

    def is_newer(self, first: int | str, second: int | str) -> bool:
        return codec.is_newer(first, second, epoch=self._epoch)

    def to_datetime(self, snowflake: int | str) -> datetime.datetime:
        return codec.to_datetime(snowflake, epoch=self._epoch, tz=self.timezone)

    def _age(self, snowflake: int | str, unit: float) -> float:
        timestamp_ms = self.decode(snowflake)[0]
        return age_ms(timestamp_ms, self.clock()) / unit

    def age_in_seconds(self, snowflake: int | str) -> float:
        return self._age(snowflake, SECOND)

    def age_in_minutes(self, snowflake: int | str) -> float:
        return self._age(snowflake, MINUTE)

    def age_in_hours(self, snowflake: int | str) -> float:
        return self._age(snowflake, HOUR)

    def age_in_days(self, snowflake: int | str) -> float:
        return self._age(snowflake, DAY)

    def age_in_weeks(self, snowflake: int | str) -> float:
        return self._age(snowflake, WEEK)

    def age_in_months(self, snowflake: int | str) -> float:
        return self._age(snowflake, MONTH)

    def age_in_years(self, snowflake: int | str) -> float:
        return self._age(snowflake, YEAR)

    def age_in_decades(self, snowflake: int | str) -> float:
        return self._age(snowflake, DECADE)

    def humanize_age(self, snowflake: int | str, *, minimum_unit: str = "milliseconds") -> str:
        """Ex: 1 hour, 2 minutes and 3 seconds"""
        return humanize_age(self.decode(snowflake)[0], self.clock(), minimum_unit=minimum_unit)

    def __repr__(self) -> str:
        return f"<IDGenerator worker_id={self._worker_id} epoch={self._epoch} last_ms={self.last_ms}>"
