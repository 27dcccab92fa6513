"""Immutable edits and validation of a work-plan draft.

Every function returns a new :class:`WorkPlanFormData`; the draft passed in
is never modified.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from .models import (
    ASSIGNMENT_MODES,
    AUTOMATIC,
    MANUAL,
    Activity,
    Store,
    StoreActivity,
    TimeSlot,
    User,
    WorkPlanFormData,
    WorkPlanTemplate,
)
from . import util
from .util import parse_datetime

DEFAULT_WORK_DAYS = (1, 2, 3, 4, 5)
DEFAULT_SLOT_START = "08:00"
DEFAULT_SLOT_END = "17:00"


class ValidationError(ValueError):
    """A draft is not ready for the requested step; nothing was sent."""


def new_time_slot(start: str = DEFAULT_SLOT_START, end: str = DEFAULT_SLOT_END) -> TimeSlot:
    return TimeSlot(start=start, end=end, id=str(uuid.uuid4()))


def empty_form() -> WorkPlanFormData:
    return WorkPlanFormData(
        workDays=DEFAULT_WORK_DAYS,
        workTimeSlots=(new_time_slot(),),
    )


SEQUENCE_FIELDS = (
    "selectedStores",
    "selectedUsers",
    "workDays",
    "workTimeSlots",
    "storeActivities",
)


def update_form(form: WorkPlanFormData, **changes) -> WorkPlanFormData:
    for name in SEQUENCE_FIELDS:
        if changes.get(name) is not None:
            changes[name] = tuple(changes[name])
    return replace(form, **changes)


def add_time_slot(form: WorkPlanFormData) -> WorkPlanFormData:
    return replace(form, workTimeSlots=(*form.workTimeSlots, new_time_slot()))


def remove_time_slot(form: WorkPlanFormData, slot_id: str) -> WorkPlanFormData:
    if len(form.workTimeSlots) <= 1:
        raise ValidationError("At least one time slot is required")
    return replace(
        form, workTimeSlots=tuple(s for s in form.workTimeSlots if s.id != slot_id)
    )


def update_time_slot(
    form: WorkPlanFormData,
    slot_id: str,
    *,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> WorkPlanFormData:
    slots = []
    for slot in form.workTimeSlots:
        if slot.id == slot_id:
            slot = replace(slot, start=start or slot.start, end=end or slot.end)
        slots.append(slot)
    return replace(form, workTimeSlots=tuple(slots))


def build_store_activity(
    store: Store,
    activity: Activity,
    *,
    repetitions: Optional[int] = None,
    assignment_mode: str = AUTOMATIC,
    assigned_users: Sequence[User] = (),
    supervisor: Optional[User] = None,
    has_custom_schedule: Optional[bool] = None,
    custom_time_slots: Optional[Sequence[TimeSlot]] = None,
    store_activity_id: Optional[str] = None,
) -> StoreActivity:
    """Assign a copy of ``activity`` to ``store``.

    Repetitions default to the activity's ``defaultRepetitions`` when it is
    repetitive and to 1 otherwise; the custom schedule defaults to the
    activity's own. Custom slots always get fresh ids, so two assignments
    copied from one activity never share a slot id.
    """

    if assignment_mode not in ASSIGNMENT_MODES:
        raise ValueError(f"Unknown assignment mode: {assignment_mode}")
    if repetitions is None:
        repetitions = activity.defaultRepetitions if activity.isRepetitive else 1
    if has_custom_schedule is None:
        has_custom_schedule = activity.hasCustomSchedule
    if custom_time_slots is None:
        custom_time_slots = activity.customTimeSlots
    slots = tuple(
        TimeSlot(start=s.start, end=s.end, id=str(uuid.uuid4()))
        for s in custom_time_slots
    )
    return StoreActivity(
        id=store_activity_id or str(uuid.uuid4()),
        store=store,
        activity=replace(activity, customTimeSlots=slots if has_custom_schedule else ()),
        repetitions=repetitions,
        assignmentMode=assignment_mode,
        assignedUsers=tuple(assigned_users),
        supervisor=supervisor,
        hasCustomSchedule=has_custom_schedule,
        customTimeSlots=slots if has_custom_schedule else (),
    )


def save_store_activity(form: WorkPlanFormData, store_activity: StoreActivity) -> WorkPlanFormData:
    """Add ``store_activity``, or replace the one with the same id."""

    validate_store_activity(store_activity)
    existing = [sa.id for sa in form.storeActivities]
    if store_activity.id in existing:
        activities = tuple(
            store_activity if sa.id == store_activity.id else sa
            for sa in form.storeActivities
        )
    else:
        activities = (*form.storeActivities, store_activity)
    return replace(form, storeActivities=activities)


def remove_store_activity(form: WorkPlanFormData, store_activity_id: str) -> WorkPlanFormData:
    return replace(
        form,
        storeActivities=tuple(
            sa for sa in form.storeActivities if sa.id != store_activity_id
        ),
    )


def activities_for_store(form: WorkPlanFormData, store_id: str) -> List[StoreActivity]:
    return [sa for sa in form.storeActivities if sa.store.id == store_id]


def stores_without_activities(form: WorkPlanFormData) -> List[Store]:
    return [s for s in form.selectedStores if not activities_for_store(form, s.id)]


def total_estimated_minutes(form: WorkPlanFormData) -> int:
    return sum(sa.total_minutes for sa in form.storeActivities)


def apply_template(
    form: WorkPlanFormData,
    template: WorkPlanTemplate,
    stores: Iterable[Store],
    users: Iterable[User],
) -> WorkPlanFormData:
    """Copy a saved template into the draft.

    Only stores and users present in ``stores``/``users`` are selected. The
    result stays freely editable; nothing ties it back to the template.
    """

    data = template.formData
    store_ids = set(data.get("selectedStoreIds") or [])
    user_ids = set(data.get("selectedUserIds") or [])
    deadline = data.get("deadline")
    slots = data.get("workTimeSlots")
    return replace(
        form,
        templateId=template.id,
        planName=data.get("planName") or "",
        description=data.get("description") or "",
        deadline=parse_datetime(deadline) if deadline else None,
        selectedStores=tuple(s for s in stores if s.id in store_ids),
        selectedUsers=tuple(u for u in users if u.id in user_ids),
        workDays=tuple(data.get("workDays") or DEFAULT_WORK_DAYS),
        workTimeSlots=tuple(new_time_slot(s["start"], s["end"]) for s in slots)
        if slots
        else (new_time_slot(),),
    )


def validate_general_info(form: WorkPlanFormData) -> None:
    if not form.planName.strip():
        raise ValidationError("Enter the plan name")
    if not form.description.strip():
        raise ValidationError("Enter a description")
    if not form.deadline:
        raise ValidationError("Select a deadline")
    if util.parse_date(form.deadline) < util.today():
        raise ValidationError("The deadline must not be in the past")
    if not form.selectedStores:
        raise ValidationError("Select at least one store")
    if not form.selectedUsers:
        raise ValidationError("Select at least one user")
    if not form.workDays:
        raise ValidationError("Select at least one work day")
    if not form.workTimeSlots:
        raise ValidationError("Add at least one time slot")


def validate_store_activity(store_activity: StoreActivity) -> None:
    activity = store_activity.activity
    if not activity.activityName.strip():
        raise ValidationError("Enter the activity name")
    if not activity.estimatedTimePerTask or activity.estimatedTimePerTask <= 0:
        raise ValidationError("Enter a valid estimated time")
    if store_activity.repetitions < 1:
        raise ValidationError("Repetitions must be at least 1")
    if store_activity.assignmentMode == MANUAL and not store_activity.assignedUsers:
        raise ValidationError("Assign users in manual mode")
    if store_activity.hasCustomSchedule and not store_activity.customTimeSlots:
        raise ValidationError("A custom schedule needs at least one time slot")


def validate_activity(activity: Activity) -> None:
    """Check an activity template before it is created or edited."""

    if not activity.activityName.strip():
        raise ValidationError("Enter the activity name")
    if not activity.estimatedTimePerTask or activity.estimatedTimePerTask <= 0:
        raise ValidationError("Enter a valid estimated time")
    if activity.defaultRepetitions < 1:
        raise ValidationError("Default repetitions must be at least 1")
    if activity.hasCustomSchedule and not activity.customTimeSlots:
        raise ValidationError("A custom schedule needs at least one time slot")
    if activity.customTimeSlots and not activity.hasCustomSchedule:
        raise ValidationError("Time slots are only allowed with a custom schedule")


def validate_store_activities(form: WorkPlanFormData) -> None:
    missing = stores_without_activities(form)
    if missing:
        names = "\n".join(s.name or s.id for s in missing)
        raise ValidationError(f"These stores need at least 1 activity:\n{names}")
