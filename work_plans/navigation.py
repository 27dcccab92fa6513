"""Calendar / daily-detail navigation over one worker's itinerary."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from . import util
from .models import DailySchedule, UserScheduleDetail, WorkTask
from .status import StatusConfig, get_task_status_config

CALENDAR = "CALENDAR"
DAILY_DETAIL = "DAILY_DETAIL"

DEFAULT_MAP_CENTER = (-12.0464, -77.0428)
DAY_ZOOM = 13
TASK_ZOOM = 16


@dataclass
class CalendarDay:
    date: date
    schedule: Optional[DailySchedule]
    inCurrentMonth: bool
    isSelected: bool
    isToday: bool


class ItineraryNavigator:
    """Which day of an itinerary is shown, and where the map points.

    Starts in ``CALENDAR`` with the first scheduled date selected. Days
    without a schedule can never be entered.
    """

    def __init__(
        self, detail: UserScheduleDetail, current_location: Optional[Any] = None
    ) -> None:
        self.detail = detail
        self.current_location = current_location
        self._by_date: Dict[date, DailySchedule] = {}
        for schedule in detail.dailySchedules:
            self._by_date.setdefault(schedule.schedule_date, schedule)

        self.state = CALENDAR
        if detail.dailySchedules:
            self.selected_date = detail.dailySchedules[0].schedule_date
        else:
            self.selected_date = util.today()
        self.current_month = self.selected_date.replace(day=1)
        self.focused_task_id: Optional[str] = None
        self.map_center: Tuple[float, float] = DEFAULT_MAP_CENTER
        self.map_zoom = DAY_ZOOM

    def schedule_for(self, day: date) -> Optional[DailySchedule]:
        return self._by_date.get(day)

    @property
    def selected_schedule(self) -> Optional[DailySchedule]:
        return self.schedule_for(self.selected_date)

    def select_day(self, day: date) -> bool:
        schedule = self.schedule_for(day)
        if schedule is None:
            return False
        self.selected_date = day
        self.current_month = day.replace(day=1)
        self.state = DAILY_DETAIL
        self.focused_task_id = None
        work = schedule.work_task_list()
        if work and work[0].coordinates:
            self.map_center = (work[0].coordinates.lat, work[0].coordinates.lng)
            self.map_zoom = DAY_ZOOM
        return True

    def back(self) -> bool:
        """Return to the calendar; False when already there."""

        if self.state == CALENDAR:
            return False
        self.state = CALENDAR
        self.focused_task_id = None
        return True

    @property
    def has_previous_day(self) -> bool:
        return self.schedule_for(self.selected_date - timedelta(days=1)) is not None

    @property
    def has_next_day(self) -> bool:
        return self.schedule_for(self.selected_date + timedelta(days=1)) is not None

    def previous_day(self) -> bool:
        if self.state != DAILY_DETAIL:
            return False
        return self.select_day(self.selected_date - timedelta(days=1))

    def next_day(self) -> bool:
        if self.state != DAILY_DETAIL:
            return False
        return self.select_day(self.selected_date + timedelta(days=1))

    def focus_task(self, task: WorkTask) -> None:
        if task.coordinates is None:
            return
        self.focused_task_id = task.id
        self.map_center = (task.coordinates.lat, task.coordinates.lng)
        self.map_zoom = TASK_ZOOM

    def previous_month(self) -> date:
        self.current_month = (self.current_month - timedelta(days=1)).replace(day=1)
        return self.current_month

    def next_month(self) -> date:
        _, days = calendar.monthrange(self.current_month.year, self.current_month.month)
        self.current_month = self.current_month + timedelta(days=days)
        return self.current_month

    def month_grid(self) -> List[List[CalendarDay]]:
        """Weeks of the displayed month, Sunday first, padded to full weeks."""

        today = util.today()
        cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
        weeks = []
        for week in cal.monthdatescalendar(self.current_month.year, self.current_month.month):
            weeks.append(
                [
                    CalendarDay(
                        date=day,
                        schedule=self.schedule_for(day),
                        inCurrentMonth=day.month == self.current_month.month,
                        isSelected=day == self.selected_date,
                        isToday=day == today,
                    )
                    for day in week
                ]
            )
        return weeks

    def visible_tasks(self) -> List[WorkTask]:
        schedule = self.selected_schedule
        if self.state != DAILY_DETAIL or schedule is None:
            return []
        return schedule.work_task_list()

    def task_status(self, task: WorkTask) -> StatusConfig:
        return get_task_status_config(task.status, task.coordinates, self.current_location)
