"""
Bailout report writer — persists the curated bailout records.

The write is awaited by the caller: it runs in a worker thread so the
event loop stays free, and its result (or failure) comes back to the
``done`` hook. The file handle is closed on every exit path.

Write errors are not caught here; they propagate to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from pathlib import Path

from gimbalgate.core.models.bailout import BailoutRecord
from gimbalgate.core.models.config import DEFAULT_BAILOUT_REPORT
from gimbalgate.core.services.bailouts import serialize_bailout_records

logger = logging.getLogger(__name__)


class BailoutReportWriter:
    """Writes one bailout report file.

    Each call to write() replaces the file's content with the given
    records. Parent directories are created as needed.
    """

    def __init__(self, path: Path | None = None, base_dir: Path | None = None):
        if path is not None:
            self._path = path
        elif base_dir is not None:
            self._path = base_dir / DEFAULT_BAILOUT_REPORT
        else:
            self._path = Path(DEFAULT_BAILOUT_REPORT)

    @property
    def path(self) -> Path:
        return self._path

    def write_sync(self, records: Iterable[BailoutRecord]) -> Path:
        """Serialize and write the records, blocking."""
        records = list(records)
        text = serialize_bailout_records(records)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
        logger.info("Bailout report written: %s (%d module(s))", self._path, len(records))
        return self._path

    async def write(self, records: Iterable[BailoutRecord]) -> Path:
        """Serialize and write the records without blocking the loop."""
        return await asyncio.to_thread(self.write_sync, list(records))

    def read(self) -> list[list]:
        """Read the report back as raw triples. Empty if missing."""
        if not self._path.is_file():
            return []
        return json.loads(self._path.read_text(encoding="utf-8"))
