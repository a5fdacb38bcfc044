from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException

from swap_tracker.api.deps import get_swap_price_use_case_factory
from swap_tracker.api.schemas.swap_price import SwapPriceResponse
from swap_tracker.application.use_cases.get_swap_price import GetSwapPriceUseCase
from swap_tracker.domain.exceptions import (
    NoPoolFoundError,
    PoolStateUnavailableError,
    QuoteComputationError,
    TokenAddressInputError,
)
from swap_tracker.infrastructure.storage.json_observation_log import format_timestamp
from swap_tracker.shared.addresses import parse_token_address

router = APIRouter()


@router.get("/v1/swap-price", response_model=SwapPriceResponse)
def get_swap_price(
    token_address: str,
    use_case_factory: Callable[[str], GetSwapPriceUseCase] = Depends(get_swap_price_use_case_factory),
):
    try:
        address = parse_token_address(token_address)
        result = use_case_factory(address).execute()
    except TokenAddressInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NoPoolFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (PoolStateUnavailableError, QuoteComputationError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return SwapPriceResponse(
        observed_at=format_timestamp(result.observed_at),
        **result.to_record(),
    )
