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

__all__ = (
    "SnowflakeError",
    "ClockRegressionError",
    "InvalidWorkerId",
    "ConfigError",
)


class SnowflakeError(Exception):
    """
    Base exception for everything raised by flakegen.
    """


class ClockRegressionError(SnowflakeError):
    """
    Raised when the clock reports a time earlier than the last issued ID.

    This is never retried. Reusing a timestamp would break ordering, so the
    caller has to decide what to do (usually alert and stop issuing IDs).
    """

    def __init__(self, last_ms: int, current_ms: int) -> None:
        self.last_ms: int = last_ms
        self.current_ms: int = current_ms
        super().__init__(f"Clock moved backwards by {last_ms - current_ms}ms. Refusing to generate ID.")


class InvalidWorkerId(SnowflakeError, ValueError):
    """
    Raised when a worker ID is outside of the range a snowflake can hold.
    """

    def __init__(self, worker_id: object, maximum: int) -> None:
        self.worker_id: object = worker_id
        super().__init__(f"Worker ID must be between 0 and {maximum}, got {worker_id!r}")


class ConfigError(SnowflakeError):
    """
    Raised when the config file is missing or can not be parsed.
    """
