from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from swap_tracker.domain.entities.pool import POOL_MODELS, NativeAsset, PoolModel
from swap_tracker.domain.services.price_observation import DEFAULT_DISPLAY_LABELS


load_dotenv()


SOL_MINT = "So11111111111111111111111111111111111111112"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _pool_models(value: str | None) -> tuple[PoolModel, ...]:
    requested = [item.strip().lower() for item in (value or "").split(",") if item.strip()]
    models = tuple(model for model in POOL_MODELS if model in requested)
    unknown = sorted(set(requested) - set(POOL_MODELS))
    if unknown:
        raise ValueError(f"Unsupported POOL_MODELS entries: {', '.join(unknown)}")
    return models or POOL_MODELS


@dataclass(frozen=True)
class Settings:
    solana_rpc_url: str
    solana_rpc_timeout_seconds: float
    native_mint: str
    native_symbol: str
    damm_v2_api_url: str
    dlmm_api_url: str
    pool_index_page_size: int
    pool_index_max_pages: int
    pool_index_timeout_seconds: float
    pool_models: tuple[PoolModel, ...]
    slippage_bps: int
    bin_arrays_per_quote: int
    poll_interval_seconds: float
    observation_log_path: str
    display_labels: dict
    log_level: str

    @property
    def native(self) -> NativeAsset:
        return NativeAsset(mint=self.native_mint, symbol=self.native_symbol)


def get_settings() -> Settings:
    return Settings(
        solana_rpc_url=_env("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com"),
        solana_rpc_timeout_seconds=float(_env("SOLANA_RPC_TIMEOUT_SECONDS", "10")),
        native_mint=_env("NATIVE_MINT", SOL_MINT),
        native_symbol=_env("NATIVE_SYMBOL", "SOL"),
        damm_v2_api_url=_env("DAMM_V2_API_URL", "https://dammv2-api.meteora.ag/pools"),
        dlmm_api_url=_env("DLMM_API_URL", "https://dlmm-api.meteora.ag/pair/all"),
        pool_index_page_size=int(_env("POOL_INDEX_PAGE_SIZE", "50")),
        pool_index_max_pages=int(_env("POOL_INDEX_MAX_PAGES", "40")),
        pool_index_timeout_seconds=float(_env("POOL_INDEX_TIMEOUT_SECONDS", "15")),
        pool_models=_pool_models(_env("POOL_MODELS", "damm_v2,dlmm")),
        slippage_bps=int(_env("SLIPPAGE_BPS", "50")),
        bin_arrays_per_quote=int(_env("BIN_ARRAYS_PER_QUOTE", "3")),
        poll_interval_seconds=float(_env("POLL_INTERVAL_SECONDS", "1")),
        observation_log_path=_env("OBSERVATION_LOG_PATH", "latest_price.json"),
        display_labels={**DEFAULT_DISPLAY_LABELS, **_json("DISPLAY_LABELS")},
        log_level=_env("LOG_LEVEL", "INFO"),
    )
