from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timezone

from swap_tracker.application.dto.swap_price import CycleResult
from swap_tracker.application.ports.observation_log_port import ObservationLogPort
from swap_tracker.application.use_cases.get_swap_price import GetSwapPriceUseCase
from swap_tracker.domain.exceptions import DomainError
from swap_tracker.domain.services.price_observation import to_display_record


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PollSwapPriceUseCase:
    """Run the quote engine on a fixed cadence, one isolated pass at a time.

    Every pass produces a ``CycleResult``; failures become ``{"error": ...}``
    records and never stop the loop. The delay is applied after every pass,
    including failed ones.
    """

    def __init__(
        self,
        *,
        get_swap_price: GetSwapPriceUseCase,
        observation_log: ObservationLogPort,
        display_labels: Mapping[str, str],
        interval_seconds: float,
        presenter: Callable[[datetime, dict], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._get_swap_price = get_swap_price
        self._observation_log = observation_log
        self._display_labels = dict(display_labels)
        self._interval_seconds = max(0.0, interval_seconds)
        self._presenter = presenter
        self._sleep = sleep
        self._clock = clock

    def run_cycle(self) -> CycleResult:
        result = self._compute()
        display_record = to_display_record(result.to_record(), self._display_labels)

        if self._presenter is not None:
            try:
                self._presenter(result.observed_at, display_record)
            except Exception:  # noqa: BLE001
                logger.exception("poll_swap_price: present_failed")

        try:
            self._observation_log.append(timestamp=result.observed_at, record=display_record)
        except Exception:  # noqa: BLE001
            logger.exception("poll_swap_price: persist_failed")

        return result

    def run(self, *, max_cycles: int | None = None) -> int:
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            result = self.run_cycle()
            cycles += 1
            logger.debug("poll_swap_price: cycle_done cycle=%s ok=%s", cycles, result.ok)
            self._sleep(self._interval_seconds)
        return cycles

    def _compute(self) -> CycleResult:
        try:
            observation = self._get_swap_price.execute()
        except DomainError as exc:
            logger.warning(
                "poll_swap_price: cycle_failed token=%s error_type=%s error=%s",
                self._get_swap_price.token_address,
                type(exc).__name__,
                exc,
            )
            return CycleResult(observed_at=self._clock(), error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "poll_swap_price: cycle_crashed token=%s",
                self._get_swap_price.token_address,
            )
            return CycleResult(observed_at=self._clock(), error=f"Swap calculation failed: {exc}")
        return CycleResult(observed_at=observation.observed_at, observation=observation)
