"""Work-plan, template and activity endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .adapter import adapt_daily_schedule, adapt_user_schedule_detail, adapt_work_task
from .api import APIClient
from .converter import to_generate_payload, to_preview_payload
from .draft import validate_activity
from .models import (
    PLAN_STATUSES,
    TASK_STATUSES,
    Activity,
    DailySchedule,
    UserScheduleDetail,
    UserScheduleListItem,
    WorkPlanFormData,
    WorkPlanListItem,
    WorkPlanTemplate,
    WorkTask,
)


class WorkPlansAPI:
    def __init__(self, client: APIClient) -> None:
        self.client = client

    def preview(
        self, form: WorkPlanFormData, simulated_workers: Optional[int] = None
    ) -> Dict[str, Any]:
        """Ask the scheduler for a dry run; the response is passed through as-is."""

        return self.client.post(
            "/work-plans/preview", to_preview_payload(form, simulated_workers)
        )

    def generate(
        self,
        form: WorkPlanFormData,
        save_as_template: bool,
        template_name: Optional[str] = None,
        template_description: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = to_generate_payload(
            form, save_as_template, template_name, template_description
        )
        return self.client.post("/work-plans", payload)

    def list_work_plans(self, status: Optional[str] = None) -> List[WorkPlanListItem]:
        params = {"status": status} if status else None
        data = self.client.get("/work-plans", params=params)
        return [WorkPlanListItem.from_dict(p) for p in data]

    def get_work_plan(self, plan_id: str) -> Dict[str, Any]:
        return self.client.get(f"/work-plans/{plan_id}")

    def get_user_schedules(self, plan_id: str) -> List[UserScheduleListItem]:
        data = self.client.get(f"/work-plans/{plan_id}/user-schedules")
        return [UserScheduleListItem.from_dict(s) for s in data]

    def get_user_schedule_detail(self, plan_id: str, user_id: str) -> UserScheduleDetail:
        data = self.client.get(f"/work-plans/{plan_id}/user-schedules/{user_id}")
        return adapt_user_schedule_detail(data)

    def get_daily_schedule(self, schedule_id: str) -> DailySchedule:
        return adapt_daily_schedule(self.client.get(f"/daily-schedules/{schedule_id}"))

    def get_work_task(self, task_id: str) -> WorkTask:
        return adapt_work_task(self.client.get(f"/work-tasks/{task_id}"))

    def get_task_assignments(self, task_id: str) -> List[Dict[str, Any]]:
        return self.client.get(f"/work-tasks/{task_id}/assignments")

    def update_task_status(self, plan_id: str, task_id: str, status: str) -> WorkTask:
        if status not in TASK_STATUSES:
            raise ValueError(f"Unknown task status: {status}")
        data = self.client.patch(
            f"/work-plans/{plan_id}/tasks/{task_id}/status", {"status": status}
        )
        return adapt_work_task(data)

    def complete_task(
        self,
        plan_id: str,
        task_id: str,
        actual_duration: int,
        notes: Optional[str] = None,
        photos: Optional[List[str]] = None,
    ) -> WorkTask:
        payload: Dict[str, Any] = {"actualDuration": actual_duration}
        if notes is not None:
            payload["notes"] = notes
        if photos is not None:
            payload["photos"] = photos
        data = self.client.patch(f"/work-plans/{plan_id}/tasks/{task_id}/complete", payload)
        return adapt_work_task(data)

    def update_plan_status(self, plan_id: str, status: str) -> WorkPlanListItem:
        if status not in PLAN_STATUSES:
            raise ValueError(f"Unknown plan status: {status}")
        data = self.client.patch(f"/work-plans/{plan_id}/status", {"status": status})
        return WorkPlanListItem.from_dict(data)

    def delete_plan(self, plan_id: str) -> None:
        self.client.delete(f"/work-plans/{plan_id}")

    def get_monthly_view(
        self, plan_id: str, month: str, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """``month`` is ``YYYY-MM``."""

        params = {"month": month}
        if user_id:
            params["userId"] = user_id
        return self.client.get(f"/work-plans/{plan_id}/monthly-view", params=params)

    def get_progress_dashboard(self, plan_id: str) -> Dict[str, Any]:
        return self.client.get(f"/work-plans/{plan_id}/progress-dashboard")


class TemplatesAPI:
    def __init__(self, client: APIClient) -> None:
        self.client = client

    def list(self) -> List[WorkPlanTemplate]:
        data = self.client.get("/work-plan-templates")
        if not isinstance(data, list):
            return []
        return [WorkPlanTemplate.from_dict(t) for t in data]

    def get(self, template_id: str) -> WorkPlanTemplate:
        return WorkPlanTemplate.from_dict(
            self.client.get(f"/work-plan-templates/{template_id}")
        )

    def delete(self, template_id: str) -> None:
        self.client.delete(f"/work-plan-templates/{template_id}")


def _clean(value: Any) -> Any:
    """Drop ``None``, empty strings and empty lists, recursively."""

    if isinstance(value, dict):
        cleaned = {k: _clean(v) for k, v in value.items()}
        return {k: v for k, v in cleaned.items() if v not in (None, "", [])}
    if isinstance(value, list):
        return [_clean(v) for v in value if v is not None]
    return value


def _activity_payload(activity: Activity) -> Dict[str, Any]:
    payload = activity.to_dict()
    payload.pop("id", None)
    if not activity.hasCustomSchedule:
        payload.pop("customTimeSlots", None)
    return payload


class ActivitiesAPI:
    def __init__(self, client: APIClient) -> None:
        self.client = client

    def list(self) -> List[Activity]:
        return [Activity.from_dict(a) for a in self.client.get("/activities")]

    def create(self, activity: Activity) -> Activity:
        validate_activity(activity)
        data = self.client.post("/activities", _clean(_activity_payload(activity)))
        return Activity.from_dict(data)

    def update(self, activity_id: str, activity: Activity) -> Activity:
        validate_activity(activity)
        data = self.client.put(f"/activities/{activity_id}", _activity_payload(activity))
        return Activity.from_dict(data)

    def delete(self, activity_id: str) -> None:
        self.client.delete(f"/activities/{activity_id}")
