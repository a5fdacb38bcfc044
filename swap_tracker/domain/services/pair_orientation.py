from __future__ import annotations

from decimal import Decimal


def invert_decimal_price(price: Decimal, *, field_name: str = "price") -> Decimal:
    if price <= 0:
        raise ValueError(f"{field_name} must be positive.")
    return Decimal("1") / price


def normalize_mint(value: str | None) -> str:
    return (value or "").strip().lower()


def same_mint(left: str | None, right: str | None) -> bool:
    return normalize_mint(left) == normalize_mint(right) and bool(normalize_mint(left))


def native_is_first(*, first_mint: str, second_mint: str, native_mint: str, token_mint: str) -> bool:
    """Return True when the native asset occupies the first side of the pair."""
    if same_mint(first_mint, native_mint) and same_mint(second_mint, token_mint):
        return True
    if same_mint(second_mint, native_mint) and same_mint(first_mint, token_mint):
        return False
    raise ValueError(f"Pair {first_mint}/{second_mint} does not pair {native_mint} with {token_mint}.")


def token_per_native(price_second_per_first: Decimal, *, native_first: bool) -> Decimal:
    if native_first:
        return price_second_per_first
    return invert_decimal_price(price_second_per_first)
