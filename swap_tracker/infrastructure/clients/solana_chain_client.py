from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from threading import Lock

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey

from swap_tracker.domain.entities.pool import MintInfo
from swap_tracker.domain.entities.pool_state import Bin, BinPoolState, CurvePoolState
from swap_tracker.domain.exceptions import PoolStateUnavailableError
from swap_tracker.domain.services.bin_math import bin_array_indexes
from swap_tracker.infrastructure.chain.account_layouts import (
    decode_bin_array,
    decode_bin_pool_state,
    decode_curve_pool_state,
    decode_mint,
    derive_bin_array_address,
)


logger = logging.getLogger(__name__)


RPC_ERRORS = (SolanaRpcException, RPCException, httpx.HTTPError)


@dataclass(frozen=True)
class SolanaChainClientSettings:
    rpc_url: str
    timeout_seconds: float
    max_workers: int = 4


class SolanaChainClient:
    """JSON-RPC adapter for mints, clock values and pool accounts."""

    def __init__(self, settings: SolanaChainClientSettings, *, rpc: Client | None = None):
        self._settings = settings
        self._rpc = rpc or Client(settings.rpc_url, timeout=settings.timeout_seconds)
        self._mint_cache: dict[str, MintInfo] = {}
        self._lock = Lock()

    def get_account_data(self, address: str) -> bytes | None:
        response = self._rpc.get_account_info(Pubkey.from_string(address))
        account = response.value
        if account is None:
            return None
        return bytes(account.data)

    def get_multiple_account_data(self, addresses: list[str]) -> list[bytes | None]:
        if not addresses:
            return []
        response = self._rpc.get_multiple_accounts([Pubkey.from_string(item) for item in addresses])
        return [bytes(account.data) if account is not None else None for account in response.value]

    def get_mint(self, address: str) -> MintInfo:
        with self._lock:
            cached = self._mint_cache.get(address)
        if cached is not None:
            return cached

        try:
            data = self.get_account_data(address)
        except (*RPC_ERRORS, ValueError) as exc:
            raise PoolStateUnavailableError(f"Failed to fetch mint info for {address}: {exc}") from exc
        if not data:
            raise PoolStateUnavailableError(f"Mint account not found: {address}")
        try:
            mint = decode_mint(address, data)
        except (ValueError, IndexError) as exc:
            raise PoolStateUnavailableError(f"Failed to decode mint {address}: {exc}") from exc

        with self._lock:
            self._mint_cache[address] = mint
        logger.info("solana_chain_client: mint_cached mint=%s decimals=%s", address, mint.decimals)
        return mint

    def get_mints(self, *, addresses: list[str]) -> dict[str, MintInfo]:
        unique = list(dict.fromkeys(addresses))
        workers = max(1, min(self._settings.max_workers, len(unique)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            mints = list(executor.map(self.get_mint, unique))
        return {mint.address: mint for mint in mints}

    def get_epoch(self) -> int:
        try:
            return int(self._rpc.get_epoch_info().value.epoch)
        except RPC_ERRORS as exc:
            raise PoolStateUnavailableError(f"Failed to fetch epoch: {exc}") from exc

    def get_slot(self) -> int:
        try:
            return int(self._rpc.get_slot().value)
        except RPC_ERRORS as exc:
            raise PoolStateUnavailableError(f"Failed to fetch slot: {exc}") from exc

    def get_curve_pool_state(self, *, pool_address: str) -> CurvePoolState | None:
        data = self._fetch_pool_account(pool_address)
        if data is None:
            return None
        try:
            return decode_curve_pool_state(data)
        except (ValueError, IndexError) as exc:
            logger.warning("solana_chain_client: curve_pool_decode_failed pool=%s error=%s", pool_address, exc)
            return None

    def get_bin_pool_state(self, *, pool_address: str) -> BinPoolState | None:
        data = self._fetch_pool_account(pool_address)
        if data is None:
            return None
        try:
            return decode_bin_pool_state(data)
        except (ValueError, IndexError) as exc:
            logger.warning("solana_chain_client: bin_pool_decode_failed pool=%s error=%s", pool_address, exc)
            return None

    def get_bins(
        self,
        *,
        pool_address: str,
        active_id: int,
        swap_for_y: bool,
        array_count: int,
    ) -> dict[int, Bin]:
        indexes = bin_array_indexes(active_id, swap_for_y=swap_for_y, count=array_count)
        addresses = [derive_bin_array_address(pool_address, index) for index in indexes]
        try:
            accounts = self.get_multiple_account_data(addresses)
        except RPC_ERRORS as exc:
            raise PoolStateUnavailableError(f"Failed to fetch bin arrays: {exc}") from exc

        bins: dict[int, Bin] = {}
        for index, data in zip(indexes, accounts):
            if not data:
                logger.info("solana_chain_client: bin_array_missing pool=%s index=%s", pool_address, index)
                continue
            try:
                decoded = decode_bin_array(data)
            except (ValueError, IndexError) as exc:
                logger.warning(
                    "solana_chain_client: bin_array_decode_failed pool=%s index=%s error=%s",
                    pool_address,
                    index,
                    exc,
                )
                continue
            for bin_row in decoded:
                bins[bin_row.bin_id] = bin_row
        return bins

    def _fetch_pool_account(self, pool_address: str) -> bytes | None:
        try:
            data = self.get_account_data(pool_address)
        except (*RPC_ERRORS, ValueError) as exc:
            logger.warning("solana_chain_client: pool_fetch_failed pool=%s error=%s", pool_address, exc)
            return None
        if not data:
            logger.warning("solana_chain_client: pool_account_empty pool=%s", pool_address)
            return None
        return data
