from __future__ import annotations


UNKNOWN_SYMBOL = "UNKNOWN"


def parse_token_symbol(pool_name: str | None, *, native_symbol: str, separator: str = "-") -> str:
    if not pool_name:
        return UNKNOWN_SYMBOL
    parts = [part.strip() for part in pool_name.split(separator)]
    if len(parts) < 2:
        return UNKNOWN_SYMBOL
    native_key = native_symbol.strip().upper()
    for part in parts:
        if part and part.upper() != native_key:
            return part
    return UNKNOWN_SYMBOL
