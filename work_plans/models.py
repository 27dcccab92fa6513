"""Data models for work plans, drafts and generated itineraries.

Field names mirror the JSON keys used by the scheduling backend so that
``from_dict``/``to_dict`` stay a thin filter over the wire payloads. Keys a
model does not know about are kept in ``extra`` and written back unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from .geo import decode_line_geometry
from .util import parse_date, parse_datetime, to_iso_string

PENDING = "PENDING"
IN_PROGRESS = "IN_PROGRESS"
COMPLETED = "COMPLETED"
SKIPPED = "SKIPPED"
TASK_STATUSES = (PENDING, IN_PROGRESS, COMPLETED, SKIPPED)

WORK = "WORK"
TRAVEL = "TRAVEL"

AUTOMATIC = "AUTOMATIC"
MANUAL = "MANUAL"
ASSIGNMENT_MODES = (AUTOMATIC, MANUAL)

DRAFT = "DRAFT"
APPROVED = "APPROVED"
ACTIVE = "ACTIVE"
CANCELLED = "CANCELLED"
PLAN_STATUSES = (DRAFT, APPROVED, ACTIVE, COMPLETED, CANCELLED)


def _to_wire(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    if isinstance(value, (datetime, date)):
        return to_iso_string(value)
    return value


def _list_of(cls):
    return lambda items: [
        cls.from_dict(i) if isinstance(i, Mapping) else i for i in items
    ]


def _tuple_of(cls):
    return lambda items: tuple(
        cls.from_dict(i) if isinstance(i, Mapping) else i for i in items
    )


class _Wire:
    """``from_dict``/``to_dict`` shared by the dataclasses below.

    ``_nested`` maps a field name to the converter applied to its raw value.
    """

    _nested: Dict[str, Any] = {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        if isinstance(data, cls):
            return data
        names = {f.name for f in fields(cls)}
        known = {k: v for k, v in data.items() if k in names and k != "extra"}
        for name, convert in cls._nested.items():
            if known.get(name) is not None:
                known[name] = convert(known[name])
        if "extra" in names:
            known["extra"] = {k: v for k, v in data.items() if k not in names}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(getattr(self, "extra", {}))
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is not None:
                data[f.name] = _to_wire(value)
        return data


# -- draft / form side -------------------------------------------------------


@dataclass(frozen=True)
class TimeSlot(_Wire):
    start: str
    end: str
    id: Optional[str] = None  # client-only, never sent to the backend


@dataclass(frozen=True)
class Store(_Wire):
    id: str
    name: str = ""
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class User(_Wire):
    id: str
    username: str = ""
    firstName: str = ""
    lastName: str = ""
    email: str = ""
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def fullName(self) -> str:
        return f"{self.firstName} {self.lastName}".strip() or self.username


@dataclass(frozen=True)
class Activity(_Wire):
    activityName: str
    estimatedTimePerTask: int = 60
    isRepetitive: bool = False
    defaultRepetitions: int = 1
    description: str = ""
    hasCustomSchedule: bool = False
    customTimeSlots: Tuple[TimeSlot, ...] = ()
    authorizedUserIds: Tuple[str, ...] = ()
    id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    _nested = {"customTimeSlots": _tuple_of(TimeSlot), "authorizedUserIds": tuple}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Activity":
        if isinstance(data, cls):
            return data
        data = dict(data)
        authorized = data.pop("authorizedUsers", None)
        if "authorizedUserIds" not in data and authorized:
            data["authorizedUserIds"] = [u["id"] for u in authorized]
        if data.get("description") is None:
            data.pop("description", None)
        return super().from_dict(data)


@dataclass(frozen=True)
class StoreActivity(_Wire):
    id: str
    store: Store
    activity: Activity
    repetitions: int = 1
    assignmentMode: str = AUTOMATIC
    assignedUsers: Tuple[User, ...] = ()
    supervisor: Optional[User] = None
    hasCustomSchedule: bool = False
    customTimeSlots: Tuple[TimeSlot, ...] = ()

    _nested = {
        "store": Store.from_dict,
        "activity": Activity.from_dict,
        "assignedUsers": _tuple_of(User),
        "supervisor": User.from_dict,
        "customTimeSlots": _tuple_of(TimeSlot),
    }

    @property
    def total_minutes(self) -> int:
        return self.activity.estimatedTimePerTask * self.repetitions


@dataclass(frozen=True)
class WorkPlanFormData(_Wire):
    """Draft of a plan being authored in the wizard."""

    planName: str = ""
    description: str = ""
    deadline: Optional[datetime] = None
    selectedStores: Tuple[Store, ...] = ()
    selectedUsers: Tuple[User, ...] = ()
    workDays: Tuple[int, ...] = ()
    workTimeSlots: Tuple[TimeSlot, ...] = ()
    storeActivities: Tuple[StoreActivity, ...] = ()
    templateId: Optional[str] = None

    _nested = {
        "deadline": lambda v: parse_datetime(v) if isinstance(v, str) else v,
        "selectedStores": _tuple_of(Store),
        "selectedUsers": _tuple_of(User),
        "workDays": tuple,
        "workTimeSlots": _tuple_of(TimeSlot),
        "storeActivities": _tuple_of(StoreActivity),
    }


# -- backend responses -------------------------------------------------------


@dataclass
class Coordinates(_Wire):
    lat: float
    lng: float


@dataclass
class TravelInfo(_Wire):
    fromStoreId: Optional[str] = None
    fromStoreName: Optional[str] = None
    toStoreId: Optional[str] = None
    toStoreName: Optional[str] = None
    distanceMeters: Optional[float] = None
    distanceKm: Optional[float] = None
    segmentGeometry: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WorkTask(_Wire):
    """One WORK visit or TRAVEL leg of a daily itinerary.

    ``arrivalTime`` through ``segmentGeometry`` are derived by
    :func:`work_plans.adapter.adapt_work_task` and are not sent by the backend.
    """

    id: str = ""
    taskType: str = WORK
    sequenceOrder: int = 0
    taskName: str = ""
    status: str = PENDING
    dailyScheduleId: Optional[str] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    totalEstimatedMinutes: Optional[float] = None
    store: Optional[Dict[str, Any]] = None
    coordinates: Optional[Coordinates] = None
    totalRepetitions: Optional[int] = None
    completedRepetitions: Optional[int] = None
    pendingRepetitions: Optional[int] = None
    progressPercent: Optional[float] = None
    timePerRepetition: Optional[float] = None
    hasCustomSchedule: Optional[bool] = None
    customTimeSlots: Optional[List[TimeSlot]] = None
    travelInfo: Optional[TravelInfo] = None
    arrivalTime: Optional[str] = None
    departureTime: Optional[str] = None
    taskMinutes: Optional[float] = None
    travelMinutes: Optional[float] = None
    taskNumber: Optional[int] = None
    segmentGeometry: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _nested = {
        "coordinates": Coordinates.from_dict,
        "customTimeSlots": _list_of(TimeSlot),
        "travelInfo": TravelInfo.from_dict,
    }

    @property
    def is_work(self) -> bool:
        return self.taskType == WORK

    def segment_points(self) -> List[Tuple[float, float]]:
        if self.travelInfo and self.travelInfo.segmentGeometry:
            return decode_line_geometry(self.travelInfo.segmentGeometry)
        return decode_line_geometry(self.segmentGeometry)


@dataclass
class DailySchedule(_Wire):
    id: str = ""
    date: str = ""
    dayOfWeek: Optional[int] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    totalWorkMinutes: Optional[float] = None
    totalTravelMinutes: Optional[float] = None
    status: Optional[str] = None
    routeGeometry: Optional[str] = None
    tasks: List[WorkTask] = field(default_factory=list)
    totalTasks: Optional[int] = None
    workTasks: Optional[int] = None
    travelTasks: Optional[int] = None
    storesVisited: Optional[int] = None
    totalDistanceKm: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _nested = {"tasks": _list_of(WorkTask)}

    @property
    def schedule_date(self) -> date:
        return parse_date(self.date)

    def work_task_list(self) -> List[WorkTask]:
        return [t for t in self.tasks if t.is_work]

    def route_points(self) -> List[Tuple[float, float]]:
        return decode_line_geometry(self.routeGeometry)


@dataclass
class ScheduleSummary(_Wire):
    totalDays: Optional[int] = None
    totalActivities: Optional[int] = None
    totalTasks: Optional[int] = None
    totalWorkMinutes: Optional[float] = None
    totalTravelMinutes: Optional[float] = None
    totalDistanceKm: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UserScheduleDetail(_Wire):
    userId: Optional[str] = None
    workPlanId: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    workPlan: Optional[Dict[str, Any]] = None
    summary: Optional[ScheduleSummary] = None
    dailySchedules: List[DailySchedule] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    _nested = {
        "summary": ScheduleSummary.from_dict,
        "dailySchedules": _list_of(DailySchedule),
    }


@dataclass
class WorkPlanListItem(_Wire):
    id: str
    planName: str = ""
    description: Optional[str] = None
    deadline: Optional[str] = None
    status: str = DRAFT
    createdAt: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UserScheduleListItem(_Wire):
    id: Optional[str] = None
    userId: Optional[str] = None
    workPlanId: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    summary: Optional[ScheduleSummary] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _nested = {"summary": ScheduleSummary.from_dict}

    @property
    def user_name(self) -> str:
        user = self.user or {}
        name = f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()
        return name or user.get("username") or self.userId or ""


@dataclass
class WorkPlanTemplate(_Wire):
    id: str
    templateName: str = ""
    templateDescription: Optional[str] = None
    totalActivities: Optional[int] = None
    estimatedDays: Optional[int] = None
    formData: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
