"""Build the request bodies sent to the scheduling backend from a draft."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .models import StoreActivity, WorkPlanFormData
from .util import to_iso_string


def _slots(slots) -> list:
    return [{"start": s.start, "end": s.end} for s in slots]


def _store_activity_dto(sa: StoreActivity) -> Dict[str, Any]:
    # activityId carries the StoreActivity id; the backend relies on it.
    dto: Dict[str, Any] = {
        "activityId": sa.id,
        "storeId": sa.store.id,
        "taskName": sa.activity.activityName,
    }
    if sa.supervisor is not None:
        dto["supervisorId"] = sa.supervisor.id
    dto.update(
        {
            "isRepetitive": sa.activity.isRepetitive,
            "repetitions": sa.repetitions,
            "estimatedTimePerTask": sa.activity.estimatedTimePerTask,
            "assignmentMode": sa.assignmentMode,
            "assignedUserIds": [u.id for u in sa.assignedUsers],
            "hasCustomSchedule": sa.hasCustomSchedule,
        }
    )
    # Absent means "no override"; an empty list would be an override.
    if sa.hasCustomSchedule:
        dto["customTimeSlots"] = _slots(sa.customTimeSlots)
    return dto


def to_dto(form: WorkPlanFormData) -> Dict[str, Any]:
    """Flatten a draft into the payload shared by ``preview`` and ``generate``."""

    return {
        "planName": form.planName,
        "description": form.description,
        "deadline": to_iso_string(form.deadline) if form.deadline else None,
        "selectedStoreIds": [s.id for s in form.selectedStores],
        "selectedUserIds": [u.id for u in form.selectedUsers],
        "workDays": list(form.workDays),
        "workTimeSlots": _slots(form.workTimeSlots),
        "storeActivities": [_store_activity_dto(sa) for sa in form.storeActivities],
    }


def to_preview_payload(
    form: WorkPlanFormData, simulated_workers: Optional[int] = None
) -> Dict[str, Any]:
    payload = to_dto(form)
    if simulated_workers:
        payload["simulatedWorkers"] = simulated_workers
    return payload


def to_generate_payload(
    form: WorkPlanFormData,
    save_as_template: bool,
    template_name: Optional[str] = None,
    template_description: Optional[str] = None,
) -> Dict[str, Any]:
    payload = to_dto(form)
    payload["saveAsTemplate"] = save_as_template
    if template_name is not None:
        payload["templateName"] = template_name
    if template_description is not None:
        payload["templateDescription"] = template_description
    return payload
