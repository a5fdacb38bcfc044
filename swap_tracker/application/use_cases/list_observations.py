from __future__ import annotations

from swap_tracker.application.dto.swap_price import ListObservationsInput, ListObservationsOutput
from swap_tracker.application.ports.observation_log_port import ObservationLogPort
from swap_tracker.domain.exceptions import ObservationsInputError


class ListObservationsUseCase:
    def __init__(self, *, observation_log: ObservationLogPort):
        self._observation_log = observation_log

    def execute(self, command: ListObservationsInput) -> ListObservationsOutput:
        if command.limit is not None and command.limit <= 0:
            raise ObservationsInputError("limit must be a positive integer.")
        rows = self._observation_log.read_all(limit=command.limit)
        return ListObservationsOutput(total=len(rows), data=rows)
