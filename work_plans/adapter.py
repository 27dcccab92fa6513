"""Turn raw scheduler responses into the task/schedule shape used client-side."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from .models import (
    COMPLETED,
    TRAVEL,
    WORK,
    DailySchedule,
    TravelInfo,
    UserScheduleDetail,
    WorkTask,
)


def adapt_work_task(raw: Union[Mapping[str, Any], WorkTask]) -> WorkTask:
    """Copy ``raw`` and add the derived compatibility fields.

    Accepts an already adapted task, in which case the derived fields are
    recomputed to the same values.
    """

    data = dict(raw.to_dict() if isinstance(raw, WorkTask) else raw)
    task_type = data.get("taskType")

    data["arrivalTime"] = data.get("startTime")
    data["departureTime"] = data.get("endTime")
    data["taskMinutes"] = data.get("timePerRepetition") if task_type == WORK else 0
    data["travelMinutes"] = (
        data.get("totalEstimatedMinutes") if task_type == TRAVEL else 0
    )
    data["taskNumber"] = data.get("sequenceOrder")

    travel_info = data.get("travelInfo") or {}
    if isinstance(travel_info, TravelInfo):
        travel_info = travel_info.to_dict()
    geometry = travel_info.get("segmentGeometry")
    if geometry:
        data["segmentGeometry"] = json.dumps(geometry, separators=(",", ":"), ensure_ascii=False)
    else:
        data.pop("segmentGeometry", None)

    return WorkTask.from_dict(data)


def adapt_daily_schedule(raw: Union[Mapping[str, Any], DailySchedule]) -> DailySchedule:
    data = dict(raw.to_dict() if isinstance(raw, DailySchedule) else raw)
    data["tasks"] = [adapt_work_task(t) for t in data.get("tasks") or []]
    return DailySchedule.from_dict(data)


def adapt_user_schedule_detail(raw: Mapping[str, Any]) -> UserScheduleDetail:
    data = dict(raw)
    data["dailySchedules"] = [
        adapt_daily_schedule(s) for s in data.get("dailySchedules") or []
    ]
    return UserScheduleDetail.from_dict(data)


@dataclass
class WorkerProgress:
    completedTasks: int
    totalTasks: int
    progressPercentage: float


def calculate_worker_progress(schedules: Iterable[DailySchedule]) -> WorkerProgress:
    """Share of WORK tasks completed across all days; TRAVEL legs are ignored."""

    completed = 0
    total = 0
    for schedule in schedules:
        for task in schedule.tasks:
            if task.taskType != WORK:
                continue
            total += 1
            if task.status == COMPLETED:
                completed += 1
    percentage = completed / total * 100 if total > 0 else 0
    return WorkerProgress(completed, total, percentage)
