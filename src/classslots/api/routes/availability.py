"""Availability and admission endpoints for the enrollment UI."""

from fastapi import APIRouter

from classslots.api.dependencies import SlotServiceDep
from classslots.api.models import (
    AdmissionRequest,
    APIResponse,
    AvailabilityResponse,
    SlotResponse,
    availability_to_response,
    slot_to_response,
)

router = APIRouter(prefix="/courses/{course_id}", tags=["availability"])


@router.get("/availability", response_model=APIResponse[AvailabilityResponse])
def get_availability(
    course_id: str, service: SlotServiceDep
) -> APIResponse[AvailabilityResponse]:
    """Course fullness, the slot open for new students and the card badge."""
    availability = service.availability(course_id)
    return APIResponse(data=availability_to_response(availability))


@router.post("/admissions", response_model=APIResponse[SlotResponse])
def check_admission(
    course_id: str, service: SlotServiceDep, admission: AdmissionRequest | None = None
) -> APIResponse[SlotResponse]:
    """Slot a new student would be assigned to. Nothing is written."""
    display_number = admission.display_number if admission is not None else None
    view = service.admit(course_id, display_number)
    return APIResponse(data=slot_to_response(view))
