"""Schedule option endpoint."""

from fastapi import APIRouter

from classslots.api.dependencies import SlotServiceDep
from classslots.api.models import APIResponse, ScheduleOptionsResponse, options_to_response

router = APIRouter(tags=["options"])


@router.get("/schedule-options", response_model=APIResponse[ScheduleOptionsResponse])
def get_schedule_options(service: SlotServiceDep) -> APIResponse[ScheduleOptionsResponse]:
    """Weekdays and start times that can be offered when adding a slot."""
    return APIResponse(data=options_to_response(service.schedule_options()))
