from __future__ import annotations

from datetime import datetime
from typing import Protocol


class ObservationLogPort(Protocol):
    def append(self, *, timestamp: datetime, record: dict) -> None:
        ...

    def read_all(self, *, limit: int | None = None) -> list[dict]:
        ...
