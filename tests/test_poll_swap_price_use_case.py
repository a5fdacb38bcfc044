from __future__ import annotations

from datetime import datetime, timezone

from swap_tracker.application.use_cases.poll_swap_price import PollSwapPriceUseCase
from swap_tracker.domain.entities.swap_price import PriceObservation
from swap_tracker.domain.exceptions import NoPoolFoundError
from swap_tracker.domain.services.price_observation import DEFAULT_DISPLAY_LABELS


OBSERVED_AT = datetime(2026, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


def _observation() -> PriceObservation:
    return PriceObservation(
        pool_address="pool-1",
        amount_out_for_1_native="2.500000",
        total_tvl="500.00",
        token_symbol="TOK",
        token_address="token",
        observed_at=OBSERVED_AT,
    )


class ScriptedGetSwapPrice:
    token_address = "token"

    def __init__(self, outcomes: list):
        self.outcomes = list(outcomes)

    def execute(self) -> PriceObservation:
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingLog:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.entries: list[tuple[datetime, dict]] = []

    def append(self, *, timestamp: datetime, record: dict) -> None:
        if self.fail:
            raise OSError("disk full")
        self.entries.append((timestamp, record))

    def read_all(self, *, limit: int | None = None) -> list[dict]:
        return [record for _, record in self.entries]


def _poller(get_swap_price, log, *, presenter=None, sleeps=None) -> PollSwapPriceUseCase:
    return PollSwapPriceUseCase(
        get_swap_price=get_swap_price,
        observation_log=log,
        display_labels=DEFAULT_DISPLAY_LABELS,
        interval_seconds=1,
        presenter=presenter,
        sleep=(sleeps.append if sleeps is not None else (lambda _seconds: None)),
        clock=lambda: OBSERVED_AT,
    )


def test_no_pool_found_becomes_error_record_without_raising():
    log = RecordingLog()
    poller = _poller(ScriptedGetSwapPrice([NoPoolFoundError("No SOL-token pool found.")]), log)

    result = poller.run_cycle()

    assert result.ok is False
    assert log.entries == [(OBSERVED_AT, {"error": "No SOL-token pool found."})]


def test_unexpected_errors_are_reported_as_calculation_failures():
    log = RecordingLog()
    poller = _poller(ScriptedGetSwapPrice([RuntimeError("boom")]), log)

    result = poller.run_cycle()

    assert result.error == "Swap calculation failed: boom"
    assert log.entries[0][1] == {"error": "Swap calculation failed: boom"}


def test_successful_cycle_persists_display_labels():
    log = RecordingLog()
    shown: list[dict] = []
    poller = _poller(ScriptedGetSwapPrice([_observation()]), log, presenter=lambda _at, record: shown.append(record))

    poller.run_cycle()

    record = log.entries[0][1]
    assert record["Price"] == "2.500000"
    assert record["Pool address"] == "pool-1"
    assert record["Symbol name"] == "TOK"
    assert shown == [record]


def test_failures_do_not_stop_the_loop_and_delay_follows_every_cycle():
    log = RecordingLog()
    sleeps: list[float] = []
    outcomes = [NoPoolFoundError("none"), RuntimeError("x"), _observation()]
    poller = _poller(ScriptedGetSwapPrice(outcomes), log, sleeps=sleeps)

    cycles = poller.run(max_cycles=3)

    assert cycles == 3
    assert sleeps == [1, 1, 1]
    assert [("error" in record) for _, record in log.entries] == [True, True, False]


def test_presenter_and_persistence_failures_are_isolated():
    def broken_presenter(_at, _record):
        raise ValueError("bad terminal")

    poller = _poller(ScriptedGetSwapPrice([_observation()]), RecordingLog(fail=True), presenter=broken_presenter)

    result = poller.run_cycle()

    assert result.ok is True
