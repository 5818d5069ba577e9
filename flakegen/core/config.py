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

import logging
import os
from typing import Any

import toml

from ..utils import ConfigError

_log = logging.getLogger(__name__)

__all__ = ("load_config",)


def load_config(path: str | os.PathLike[str] = "config.toml") -> dict[str, Any]:
    """Reads generator settings from a TOML file.

    Known keys are WORKER_ID, EPOCH, TIMEZONE and DEBUG. Anything else is left in the
    returned dict untouched.
    """
    try:
        with open(path, "r") as f:
            config = toml.loads(f.read())
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file {os.fspath(path)!r} does not exist") from exc
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Config file {os.fspath(path)!r} is not valid TOML: {exc}") from exc

    _log.debug(f"Loaded config from {os.fspath(path)}")
    return config
