from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path


logger = logging.getLogger(__name__)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class JsonObservationLog:
    """Append-only history kept as one pretty-printed JSON array.

    The whole file is rewritten on every append. A missing, unreadable or
    non-array file is treated as an empty history.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, *, timestamp: datetime, record: dict) -> None:
        entries = self._load()
        entries.append({"timestamp": format_timestamp(timestamp), **record})
        self._path.write_text(json.dumps(entries, indent=2), encoding="utf-8")

    def read_all(self, *, limit: int | None = None) -> list[dict]:
        entries = self._load()
        if limit is not None:
            return entries[-limit:]
        return entries

    def _load(self) -> list[dict]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning("json_observation_log: read_failed path=%s error=%s", self._path, exc)
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("json_observation_log: corrupt_file path=%s starting_fresh=true", self._path)
            return []
        if not isinstance(data, list):
            logger.warning("json_observation_log: not_an_array path=%s starting_fresh=true", self._path)
            return []
        return data
