from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from swap_tracker.api.deps import get_list_observations_use_case
from swap_tracker.api.schemas.swap_price import ObservationsResponse
from swap_tracker.application.dto.swap_price import ListObservationsInput
from swap_tracker.application.use_cases.list_observations import ListObservationsUseCase
from swap_tracker.domain.exceptions import ObservationsInputError

router = APIRouter()


@router.get("/v1/observations", response_model=ObservationsResponse)
def list_observations(
    limit: int | None = None,
    use_case: ListObservationsUseCase = Depends(get_list_observations_use_case),
):
    try:
        result = use_case.execute(ListObservationsInput(limit=limit))
    except ObservationsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ObservationsResponse(total=result.total, data=result.data)
