from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone

from swap_tracker.application.ports.pool_index_port import PoolIndexPort
from swap_tracker.application.ports.quoter_port import QuoterPort
from swap_tracker.domain.entities.pool import NativeAsset, PoolModel, PoolSummary
from swap_tracker.domain.entities.swap_price import PriceObservation
from swap_tracker.domain.exceptions import NoPoolFoundError, QuoteComputationError
from swap_tracker.domain.services.pool_selection import dedupe_pools, select_highest_liquidity_pool
from swap_tracker.domain.services.price_observation import build_price_observation


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GetSwapPriceUseCase:
    """Discover, select and quote the most liquid native/token pool."""

    def __init__(
        self,
        *,
        token_address: str,
        native: NativeAsset,
        pool_index_ports: Sequence[PoolIndexPort],
        quoters: Mapping[PoolModel, QuoterPort],
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._token_address = token_address
        self._native = native
        self._pool_index_ports = tuple(pool_index_ports)
        self._quoters = dict(quoters)
        self._clock = clock

    @property
    def token_address(self) -> str:
        return self._token_address

    def discover(self) -> list[PoolSummary]:
        pools: list[PoolSummary] = []
        for port in self._pool_index_ports:
            pools.extend(port.discover(token_address=self._token_address))
        return dedupe_pools(pools)

    def execute(self) -> PriceObservation:
        pools = self.discover()
        pool = select_highest_liquidity_pool(pools)
        if pool is None:
            raise NoPoolFoundError(f"No {self._native.symbol}-token pool found.")

        logger.info(
            "get_swap_price: selected_pool pool=%s model=%s tvl=%s candidates=%s",
            pool.pool_address,
            pool.model,
            pool.tvl,
            len(pools),
        )

        quoter = self._quoters.get(pool.model)
        if quoter is None:
            raise QuoteComputationError(f"No quoter configured for pool model: {pool.model}")

        pool_quote = quoter.quote(pool=pool, token_address=self._token_address)
        return build_price_observation(
            pool=pool,
            pool_quote=pool_quote,
            token_address=self._token_address,
            observed_at=self._clock(),
        )
