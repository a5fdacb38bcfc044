from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime

from swap_tracker.api.deps import build_get_swap_price_use_case
from swap_tracker.application.use_cases.poll_swap_price import PollSwapPriceUseCase
from swap_tracker.domain.exceptions import TokenAddressInputError
from swap_tracker.infrastructure.storage.json_observation_log import JsonObservationLog
from swap_tracker.shared.addresses import parse_token_address
from swap_tracker.shared.config import get_settings
from swap_tracker.shared.logging_setup import setup_logging


logger = logging.getLogger(__name__)


def print_observation(observed_at: datetime, record: dict) -> None:
    print(f"\n[{observed_at.astimezone().strftime('%H:%M:%S')}] Real-time swap info:", flush=True)
    for label, value in record.items():
        print(f"  {label}: {value}", flush=True)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="swap-tracker",
        description=f"Track the {settings.native_symbol}-to-token swap price of the most liquid pool.",
    )
    parser.add_argument("--token", default=None, help="Token mint address; prompted for when omitted.")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.poll_interval_seconds,
        help=f"Seconds between cycles (default: {settings.poll_interval_seconds:g}).",
    )
    parser.add_argument(
        "--output",
        default=settings.observation_log_path,
        help=f"Observation log file (default: {settings.observation_log_path}).",
    )
    parser.add_argument("--cycles", type=int, default=None, help="Stop after N cycles (default: run forever).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    raw_token = args.token
    if raw_token is None:
        print("Enter a token mint to view real-time data, or press Ctrl+C to quit.")
        try:
            raw_token = input("Enter token mint address: ")
        except (KeyboardInterrupt, EOFError):
            print()
            return 0

    try:
        token_address = parse_token_address(raw_token)
    except TokenAddressInputError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    poller = PollSwapPriceUseCase(
        get_swap_price=build_get_swap_price_use_case(token_address),
        observation_log=JsonObservationLog(args.output),
        display_labels=settings.display_labels,
        interval_seconds=args.interval,
        presenter=print_observation,
    )
    logger.info(
        "cli: tracking_started token=%s interval=%s output=%s",
        token_address,
        args.interval,
        args.output,
    )
    try:
        poller.run(max_cycles=args.cycles)
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
