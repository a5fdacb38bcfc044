from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from swap_tracker.domain.entities.pool import PoolSummary
from swap_tracker.domain.exceptions import PoolDiscoveryError
from swap_tracker.domain.services.pair_orientation import same_mint
from swap_tracker.infrastructure.mappers.pool_index_mapper import map_damm_v2_row_to_pool_summary


logger = logging.getLogger(__name__)


QUERY_FIELDS = ("token_a_mint", "token_b_mint")


@dataclass(frozen=True)
class DammV2PoolIndexClientSettings:
    api_url: str
    native_mint: str
    page_size: int
    max_pages: int
    timeout_seconds: float


class DammV2PoolIndexClient:
    """Paginated pool index: one query per side the token may occupy."""

    def __init__(self, settings: DammV2PoolIndexClientSettings):
        self._settings = settings

    def discover(self, *, token_address: str) -> list[PoolSummary]:
        matched: list[PoolSummary] = []
        seen: set[str] = set()
        for field in QUERY_FIELDS:
            for pool in self._discover_by_field(field=field, token_address=token_address):
                if pool.pool_address in seen:
                    continue
                seen.add(pool.pool_address)
                matched.append(pool)

        logger.info(
            "damm_v2_pool_index_client: discovered token=%s pools=%s",
            token_address,
            len(matched),
        )
        return matched

    def _discover_by_field(self, *, field: str, token_address: str) -> list[PoolSummary]:
        page_size = max(1, self._settings.page_size)
        result: list[PoolSummary] = []
        offset = 0
        pages = 0

        while True:
            if pages >= self._settings.max_pages:
                logger.warning(
                    "damm_v2_pool_index_client: page_cap_reached field=%s pages=%s accumulated=%s",
                    field,
                    pages,
                    len(result),
                )
                break
            try:
                rows = self._fetch_page(field=field, token_address=token_address, offset=offset, limit=page_size)
                if not rows:
                    break
                pages += 1
                for row in rows:
                    pool = map_damm_v2_row_to_pool_summary(row)
                    if self._is_match(pool, field=field, token_address=token_address):
                        result.append(pool)
            except (httpx.HTTPError, PoolDiscoveryError, ValueError, KeyError, TypeError, AttributeError) as exc:
                logger.warning(
                    "damm_v2_pool_index_client: query_aborted field=%s offset=%s accumulated=%s error=%s",
                    field,
                    offset,
                    len(result),
                    exc,
                )
                break
            offset += page_size

        return result

    def _is_match(self, pool: PoolSummary, *, field: str, token_address: str) -> bool:
        native_mint = self._settings.native_mint
        if field == "token_a_mint":
            return same_mint(pool.mint_a, token_address) and same_mint(pool.mint_b, native_mint)
        return same_mint(pool.mint_b, token_address) and same_mint(pool.mint_a, native_mint)

    def _fetch_page(self, *, field: str, token_address: str, offset: int, limit: int) -> list[dict]:
        params = {
            "limit": str(limit),
            "offset": str(offset),
            "order_by": "tvl",
            "order": "desc",
            field: token_address,
            "timestamp": str(int(time.time() * 1000)),
        }
        with httpx.Client(timeout=self._settings.timeout_seconds) as client:
            response = client.get(self._settings.api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        rows = payload.get("data")
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise PoolDiscoveryError("Pool index returned a non-list data field.")
        return rows
