from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from swap_tracker.domain.entities.swap_price import PriceObservation


@dataclass(frozen=True)
class CycleResult:
    observed_at: datetime
    observation: PriceObservation | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.observation is not None

    def to_record(self) -> dict:
        if self.observation is not None:
            return self.observation.to_record()
        return {"error": self.error or "Unknown error."}


@dataclass(frozen=True)
class ListObservationsInput:
    limit: int | None = None


@dataclass(frozen=True)
class ListObservationsOutput:
    total: int
    data: list[dict]
