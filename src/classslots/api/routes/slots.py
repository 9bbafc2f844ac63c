"""Slot list endpoints for the admin UI."""

from fastapi import APIRouter, status

from classslots.api.dependencies import SlotServiceDep
from classslots.api.models import (
    APIResponse,
    SlotCreate,
    SlotReorder,
    SlotResponse,
    slot_to_response,
)

router = APIRouter(prefix="/courses/{course_id}/slots", tags=["slots"])


@router.get("", response_model=APIResponse[list[SlotResponse]])
def list_slots(course_id: str, service: SlotServiceDep) -> APIResponse[list[SlotResponse]]:
    """List a course's slots with enrollment counts."""
    views = service.list_slots(course_id)
    return APIResponse(data=[slot_to_response(v) for v in views])


@router.post(
    "",
    response_model=APIResponse[list[SlotResponse]],
    status_code=status.HTTP_201_CREATED,
)
def add_slot(
    course_id: str, slot: SlotCreate, service: SlotServiceDep
) -> APIResponse[list[SlotResponse]]:
    """Append a slot to the end of the course's list."""
    views = service.add_slot(course_id, slot.day_of_week or "", slot.start_time or "")
    return APIResponse(data=[slot_to_response(v) for v in views])


@router.put("", response_model=APIResponse[list[SlotResponse]])
def reorder_slots(
    course_id: str, order: SlotReorder, service: SlotServiceDep
) -> APIResponse[list[SlotResponse]]:
    """Rearrange the course's slots."""
    views = service.reorder_slots(course_id, order.new_order)
    return APIResponse(data=[slot_to_response(v) for v in views])


@router.delete("", response_model=APIResponse[list[SlotResponse]])
def delete_slot(
    course_id: str, service: SlotServiceDep, index: int | None = None
) -> APIResponse[list[SlotResponse]]:
    """Remove the slot at ``index`` (0-based)."""
    views = service.delete_slot(course_id, index)
    return APIResponse(data=[slot_to_response(v) for v in views])
