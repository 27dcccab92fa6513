"""Command line interface for work-plan itineraries."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from pathlib import Path
from typing import List

from . import api, util, workplans_api
from .adapter import calculate_worker_progress
from .models import TASK_STATUSES, Coordinates
from .navigation import ItineraryNavigator
from .status import get_plan_status_config
from .storage import DRAFT_PATH, FileDraftStore
from .wizard import WorkPlanWizard


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Work plan itinerary client")
    parser.add_argument("--base-url", default=api.BASE_URL)
    parser.add_argument("--dump-json", action="store_true")
    parser.add_argument(
        "--offline", action="store_true", help="Use saved JSON fixtures"
    )
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    plans = sub.add_parser("plans", help="List work plans")
    plans.add_argument("--status")

    schedules = sub.add_parser("schedules", help="List worker schedules of a plan")
    schedules.add_argument("plan_id")

    itinerary = sub.add_parser("itinerary", help="Show a worker's daily itinerary")
    itinerary.add_argument("plan_id")
    itinerary.add_argument("user_id")
    itinerary.add_argument("--date")
    itinerary.add_argument("--lat", type=float)
    itinerary.add_argument("--lng", type=float)

    task_status = sub.add_parser("task-status", help="Update the status of a task")
    task_status.add_argument("plan_id")
    task_status.add_argument("task_id")
    task_status.add_argument("status", choices=TASK_STATUSES)

    preview = sub.add_parser("preview", help="Preview the saved draft")
    preview.add_argument("--draft", type=Path, default=DRAFT_PATH)
    preview.add_argument("--workers", type=int)

    generate = sub.add_parser("generate", help="Generate a plan from the saved draft")
    generate.add_argument("--draft", type=Path, default=DRAFT_PATH)
    generate.add_argument("--save-as-template", action="store_true")
    return parser.parse_args(argv)


def show_itinerary(plans: workplans_api.WorkPlansAPI, args: argparse.Namespace) -> None:
    detail = plans.get_user_schedule_detail(args.plan_id, args.user_id)
    location = None
    if args.lat is not None and args.lng is not None:
        location = Coordinates(args.lat, args.lng)
    nav = ItineraryNavigator(detail, current_location=location)

    progress = calculate_worker_progress(detail.dailySchedules)
    print(
        f"Progress: {progress.completedTasks}/{progress.totalTasks} "
        f"({progress.progressPercentage:.0f}%)"
    )
    day = date.fromisoformat(args.date) if args.date else nav.selected_date
    if not nav.select_day(day):
        print(f"No activities scheduled for {day}")
        return

    schedule = nav.selected_schedule
    print(
        f"{day:%A %d %B %Y}  {schedule.startTime} - {schedule.endTime}  "
        f"work {util.format_time(schedule.totalWorkMinutes or 0)}, "
        f"travel {util.format_time(schedule.totalTravelMinutes or 0)}"
    )
    for task in nav.visible_tasks():
        config = nav.task_status(task)
        line = (
            f"{task.sequenceOrder:>3}. {task.startTime} - {task.endTime} "
            f"{task.taskName} [{config.label}] {util.format_time(task.timePerRepetition or 0)}"
        )
        if task.totalRepetitions and task.totalRepetitions > 1:
            line += (
                f" {task.completedRepetitions}/{task.totalRepetitions}"
                f" ({task.progressPercent}%)"
            )
        print(line)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    util.configure_logging(args.verbose)

    token = None
    if not args.offline:
        from . import auth

        token = auth.acquire_token()
    client = api.APIClient(
        token, base_url=args.base_url, dump_json=args.dump_json, offline=args.offline
    )
    plans = workplans_api.WorkPlansAPI(client)

    if args.command == "plans":
        for plan in plans.list_work_plans(args.status):
            label = get_plan_status_config(plan.status).label
            print(f"{plan.id}  {plan.planName}  [{label}]  {plan.deadline or ''}")
    elif args.command == "schedules":
        for item in plans.get_user_schedules(args.plan_id):
            summary = item.summary
            activities = summary.totalActivities if summary else 0
            print(f"{item.userId}  {item.user_name}  {activities} activities")
    elif args.command == "itinerary":
        show_itinerary(plans, args)
    elif args.command == "task-status":
        task = plans.update_task_status(args.plan_id, args.task_id, args.status)
        print(f"{task.id}  {task.taskName}  {task.status}")
    else:
        wizard = WorkPlanWizard(FileDraftStore(args.draft), plans)
        if args.command == "preview":
            result = wizard.preview(args.workers)
        else:
            result = wizard.generate(args.save_as_template)
            logging.info("Draft %s cleared", args.draft)
        print(json.dumps(result, indent=2))


if __name__ == "__main__":  # pragma: no cover
    main()
