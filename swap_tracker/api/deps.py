from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

from swap_tracker.application.ports.pool_index_port import PoolIndexPort
from swap_tracker.application.ports.quoter_port import QuoterPort
from swap_tracker.application.quoters.bin_quoter import BinQuoter
from swap_tracker.application.quoters.constant_product_quoter import ConstantProductQuoter
from swap_tracker.application.use_cases.get_swap_price import GetSwapPriceUseCase
from swap_tracker.application.use_cases.list_observations import ListObservationsUseCase
from swap_tracker.domain.entities.pool import PoolModel
from swap_tracker.infrastructure.clients.damm_v2_pool_index_client import (
    DammV2PoolIndexClient,
    DammV2PoolIndexClientSettings,
)
from swap_tracker.infrastructure.clients.dlmm_pool_index_client import (
    DlmmPoolIndexClient,
    DlmmPoolIndexClientSettings,
)
from swap_tracker.infrastructure.clients.solana_chain_client import (
    SolanaChainClient,
    SolanaChainClientSettings,
)
from swap_tracker.infrastructure.storage.json_observation_log import JsonObservationLog
from swap_tracker.shared.config import get_settings


@lru_cache(maxsize=1)
def get_solana_chain_client() -> SolanaChainClient:
    settings = get_settings()
    return SolanaChainClient(
        SolanaChainClientSettings(
            rpc_url=settings.solana_rpc_url,
            timeout_seconds=settings.solana_rpc_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def get_pool_index_clients() -> tuple[PoolIndexPort, ...]:
    settings = get_settings()
    clients: list[PoolIndexPort] = []
    if "damm_v2" in settings.pool_models:
        clients.append(
            DammV2PoolIndexClient(
                DammV2PoolIndexClientSettings(
                    api_url=settings.damm_v2_api_url,
                    native_mint=settings.native_mint,
                    page_size=settings.pool_index_page_size,
                    max_pages=settings.pool_index_max_pages,
                    timeout_seconds=settings.pool_index_timeout_seconds,
                )
            )
        )
    if "dlmm" in settings.pool_models:
        clients.append(
            DlmmPoolIndexClient(
                DlmmPoolIndexClientSettings(
                    api_url=settings.dlmm_api_url,
                    native_mint=settings.native_mint,
                    timeout_seconds=settings.pool_index_timeout_seconds,
                )
            )
        )
    return tuple(clients)


@lru_cache(maxsize=1)
def get_quoters() -> dict[PoolModel, QuoterPort]:
    settings = get_settings()
    chain_client = get_solana_chain_client()
    return {
        "damm_v2": ConstantProductQuoter(
            chain_port=chain_client,
            pool_state_port=chain_client,
            native=settings.native,
            slippage_bps=settings.slippage_bps,
        ),
        "dlmm": BinQuoter(
            chain_port=chain_client,
            pool_state_port=chain_client,
            native=settings.native,
            slippage_bps=settings.slippage_bps,
            bin_array_count=settings.bin_arrays_per_quote,
        ),
    }


def build_get_swap_price_use_case(token_address: str) -> GetSwapPriceUseCase:
    return GetSwapPriceUseCase(
        token_address=token_address,
        native=get_settings().native,
        pool_index_ports=get_pool_index_clients(),
        quoters=get_quoters(),
    )


def get_swap_price_use_case_factory() -> Callable[[str], GetSwapPriceUseCase]:
    return build_get_swap_price_use_case


@lru_cache(maxsize=1)
def get_observation_log() -> JsonObservationLog:
    return JsonObservationLog(get_settings().observation_log_path)


def get_list_observations_use_case() -> ListObservationsUseCase:
    return ListObservationsUseCase(observation_log=get_observation_log())
