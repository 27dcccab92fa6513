"""Displayed status of tasks, days and plans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .geo import GEOFENCE_RADIUS_METERS, is_within_geofence
from .models import (
    ACTIVE,
    APPROVED,
    CANCELLED,
    COMPLETED,
    DRAFT,
    IN_PROGRESS,
    PENDING,
    SKIPPED,
)


@dataclass(frozen=True)
class StatusConfig:
    severity: str
    label: str
    icon: str
    pulse: bool = False


ON_SITE = StatusConfig("success", "Working on site", "mdi:briefcase-check", True)

TASK_STATUS_CONFIGS = {
    PENDING: StatusConfig("warning", "Pending", "mdi:clock-outline"),
    IN_PROGRESS: StatusConfig("info", "In transit", "mdi:car", True),
    COMPLETED: StatusConfig("success", "Completed", "mdi:check-circle"),
    SKIPPED: StatusConfig("danger", "Skipped", "mdi:close-circle"),
}

PLAN_STATUS_CONFIGS = {
    DRAFT: StatusConfig("secondary", "Draft", "mdi:file-document-edit"),
    APPROVED: StatusConfig("info", "Approved", "mdi:check-circle"),
    ACTIVE: StatusConfig("success", "Active", "mdi:play-circle"),
    COMPLETED: StatusConfig("success", "Completed", "mdi:check-all"),
    CANCELLED: StatusConfig("danger", "Cancelled", "mdi:close-circle"),
}


def get_task_status_config(
    status: str,
    coords: Optional[Any] = None,
    current_location: Optional[Any] = None,
    radius_meters: float = GEOFENCE_RADIUS_METERS,
) -> StatusConfig:
    """Resolve how a task status is shown.

    An IN_PROGRESS task whose coordinates lie within ``radius_meters`` of the
    worker's current location is shown as on site. The geofence is never
    consulted for any other status. Unknown statuses display as pending.
    """

    if (
        status == IN_PROGRESS
        and coords is not None
        and current_location is not None
        and is_within_geofence(current_location, coords, radius_meters)
    ):
        return ON_SITE
    return TASK_STATUS_CONFIGS.get(status, TASK_STATUS_CONFIGS[PENDING])


def get_plan_status_config(status: str) -> StatusConfig:
    return PLAN_STATUS_CONFIGS.get(status, PLAN_STATUS_CONFIGS[DRAFT])


def get_day_status_color(status: Optional[str]) -> str:
    if status == COMPLETED:
        return "green"
    if status == IN_PROGRESS:
        return "blue"
    return "yellow"
