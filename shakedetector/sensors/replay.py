"""
CSV replay source.

Plays back a recorded accelerometer session. The file needs a header row with
at least the columns ``timestamp_millis,x,y,z`` (acceleration in m/s^2). Rows
that cannot be parsed are logged and skipped. A new subscription continues
from the row after the last one read.
"""

import asyncio
import csv
import itertools
from pathlib import Path
from typing import IO, Iterator, Optional, Dict

from shakedetector.detector import AccelerationSample
from .base import BaseSensor

REQUIRED_COLUMNS = ("timestamp_millis", "x", "y", "z")


class ReplaySensor(BaseSensor):
    """Reads AccelerationSamples from a CSV recording."""

    def __init__(self, path, realtime: bool = False, name: Optional[str] = None):
        """
        Args:
            path: CSV file to replay
            realtime: Sleep for the gap between consecutive timestamps
            name: Optional sensor name
        """
        super().__init__(None, name)
        self.path = Path(path)
        self.realtime = realtime
        self._file: Optional[IO[str]] = None
        self._rows: Optional[Iterator[Dict[str, str]]] = None
        self._previous_timestamp: Optional[int] = None
        self._rows_read = 0  # data rows consumed, kept across subscriptions
        self.skipped_rows = 0

    def is_available(self) -> bool:
        return self.path.is_file()

    async def _initialize_impl(self) -> None:
        self._file = self.path.open(newline="")
        reader = csv.DictReader(self._file)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            self._file.close()
            self._file = None
            raise ValueError(f"{self.path} is missing columns: {', '.join(missing)}")
        self._rows = itertools.islice(reader, self._rows_read, None)
        self._previous_timestamp = None
        self.logger.debug("Replaying recording", path=str(self.path), from_row=self._rows_read)

    async def _shutdown_impl(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._rows = None

    def _parse(self, row: Dict[str, str]) -> AccelerationSample:
        return AccelerationSample(
            x=float(row["x"]),
            y=float(row["y"]),
            z=float(row["z"]),
            timestamp_millis=int(row["timestamp_millis"]),
        )

    async def read_sample(self) -> Optional[AccelerationSample]:
        if self._rows is None:
            raise RuntimeError("Sensor read outside of a subscription")

        for row in self._rows:
            self._rows_read += 1
            try:
                sample = self._parse(row)
            except (TypeError, ValueError) as e:
                self.skipped_rows += 1
                self.logger.warning("Skipping unreadable row", row=row, error=str(e))
                continue

            if self.realtime and self._previous_timestamp is not None:
                gap = sample.timestamp_millis - self._previous_timestamp
                if gap > 0:
                    await asyncio.sleep(gap / 1000.0)
            self._previous_timestamp = sample.timestamp_millis
            return sample

        return None
