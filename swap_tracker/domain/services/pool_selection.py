from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from swap_tracker.domain.entities.pool import PoolSummary


def parse_liquidity(value: object) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


def select_highest_liquidity_pool(pools: Iterable[PoolSummary]) -> PoolSummary | None:
    best: PoolSummary | None = None
    best_liquidity = Decimal("0")
    for pool in pools:
        liquidity = parse_liquidity(pool.tvl)
        if best is None or liquidity > best_liquidity:
            best = pool
            best_liquidity = liquidity
    return best


def dedupe_pools(pools: Iterable[PoolSummary]) -> list[PoolSummary]:
    seen: set[str] = set()
    result: list[PoolSummary] = []
    for pool in pools:
        if pool.pool_address in seen:
            continue
        seen.add(pool.pool_address)
        result.append(pool)
    return result
