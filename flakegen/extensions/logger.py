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
from collections import deque

__all__ = (
    "BatchHandler",
    "setup_logging",
)


class BatchHandler(logging.Handler):
    """Keeps formatted records in memory until `flush_batch` is called.

    Only the newest `capacity` records are kept, older ones are dropped.
    """

    def __init__(self, level: int = logging.NOTSET, *, capacity: int = 1000) -> None:
        super().__init__(level=level)
        self.batch: deque[str] = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.batch.append(self.format(record))
        except Exception:
            self.handleError(record)

    def flush_batch(self) -> list[str]:
        """Returns everything collected so far and empties the batch."""
        self.acquire()
        try:
            batch = list(self.batch)
            self.batch.clear()
        finally:
            self.release()
        return batch


def setup_logging(level: int = logging.INFO, *, stream: bool = True, capacity: int = 1000) -> BatchHandler:
    """Attaches handlers to the flakegen logger.

    Nothing is configured on import. Pass logging.DEBUG together with a generator made
    with debug=True to see parsed timestamps. Calling this again only changes the level,
    handlers that are already attached are reused.
    """
    formatter = logging.Formatter("[{asctime}] [{levelname:<8}] {name}: {message}", "%Y-%m-%d %H:%M:%S", style="{")
    logger = logging.getLogger("flakegen")
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if isinstance(h, BatchHandler)), None)
    if handler is None:
        handler = BatchHandler(capacity=capacity)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if stream and not any(type(h) is logging.StreamHandler for h in logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    return handler
