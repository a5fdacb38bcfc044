from __future__ import annotations

from solders.pubkey import Pubkey

from swap_tracker.domain.exceptions import TokenAddressInputError


def parse_token_address(value: str | None) -> str:
    candidate = (value or "").strip()
    if not candidate:
        raise TokenAddressInputError("No token address provided.")
    try:
        return str(Pubkey.from_string(candidate))
    except ValueError as exc:
        raise TokenAddressInputError(f"Invalid token address: {candidate}") from exc
