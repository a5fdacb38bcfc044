from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from swap_tracker.domain.entities.pool import PoolSummary
from swap_tracker.domain.exceptions import PoolDiscoveryError
from swap_tracker.domain.services.pair_orientation import normalize_mint
from swap_tracker.domain.services.pool_selection import parse_liquidity
from swap_tracker.infrastructure.mappers.pool_index_mapper import map_dlmm_row_to_pool_summary


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DlmmPoolIndexClientSettings:
    api_url: str
    native_mint: str
    timeout_seconds: float


class DlmmPoolIndexClient:
    """Flat bin-pool index: every pair in a single unparameterized response."""

    def __init__(self, settings: DlmmPoolIndexClientSettings):
        self._settings = settings

    def discover(self, *, token_address: str) -> list[PoolSummary]:
        try:
            rows = self._fetch_all()
        except (httpx.HTTPError, PoolDiscoveryError, ValueError) as exc:
            logger.warning("dlmm_pool_index_client: fetch_failed error=%s", exc)
            return []

        wanted = {normalize_mint(self._settings.native_mint), normalize_mint(token_address)}
        matched: list[PoolSummary] = []
        seen: set[str] = set()
        skipped = 0
        for row in rows:
            try:
                pool = map_dlmm_row_to_pool_summary(row)
            except (KeyError, TypeError, ValueError, AttributeError):
                skipped += 1
                continue
            if {normalize_mint(pool.mint_a), normalize_mint(pool.mint_b)} != wanted or len(wanted) != 2:
                continue
            if not self._is_usable(pool) or pool.pool_address in seen:
                continue
            seen.add(pool.pool_address)
            matched.append(pool)

        logger.info(
            "dlmm_pool_index_client: scanned pools=%s matched=%s skipped=%s token=%s",
            len(rows),
            len(matched),
            skipped,
            token_address,
        )
        return matched

    @staticmethod
    def _is_usable(pool: PoolSummary) -> bool:
        return (
            parse_liquidity(pool.tvl) > 0
            and parse_liquidity(pool.reserve_a) > 0
            and parse_liquidity(pool.reserve_b) > 0
        )

    def _fetch_all(self) -> list[dict]:
        with httpx.Client(timeout=self._settings.timeout_seconds) as client:
            response = client.get(self._settings.api_url)
            response.raise_for_status()
            payload = response.json()
        if not isinstance(payload, list):
            raise PoolDiscoveryError("Bin pool index returned a non-list payload.")
        return payload
