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

from typing import NamedTuple, TypedDict

__all__ = (
    "SnowflakeDict",
    "ValidationResult",
)


class SnowflakeDict(TypedDict):
    id: int
    timestamp: int
    human_timestamp: str
    worker_id: int
    sequence: int


class ValidationResult(NamedTuple):
    valid: bool
    reason: str
