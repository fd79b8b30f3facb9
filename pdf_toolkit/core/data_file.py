"""Host data file: one JSON object shared by settings and the job ledger.

Readers are tolerant (missing or malformed content reads as an empty object);
writers replace the file atomically so a crash mid-write never leaves a
truncated document behind.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Guards read-modify-write cycles on any data file in this process.
WRITE_LOCK = threading.RLock()


def _json_dump(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class DataFile:
    path: str

    def read_raw(self) -> Any:
        """Return the parsed document, or None if missing or not valid JSON."""
        p = Path(self.path)
        if not p.exists():
            return None
        try:
            content = p.read_text(encoding="utf-8").strip()
            if not content:
                return None
            return json.loads(content)
        except (OSError, RecursionError, json.JSONDecodeError, UnicodeDecodeError):
            return None

    def read(self) -> dict[str, Any]:
        data = self.read_raw()
        return data if isinstance(data, dict) else {}

    def write(self, obj: dict[str, Any]) -> None:
        p = Path(self.path)
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix=f".{p.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(_json_dump(obj))
            os.replace(tmp, p)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def merge(self, updates: dict[str, Any]) -> dict[str, Any]:
        """Write `updates` over the current document, keeping every other key."""
        with WRITE_LOCK:
            data = self.read()
            data.update(updates)
            self.write(data)
        return data
