"""Three-step authoring flow for a new work plan."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from . import draft
from .models import WorkPlanFormData
from .storage import DraftStore
from .workplans_api import WorkPlansAPI

GENERAL_INFO = 0
STORE_ACTIVITIES = 1
PREVIEW = 2
STEPS = ("General information", "Activities per store", "Final review")

PLAN_CREATED = "work-plan-created"


class Observers:
    """Named events with no payload contract beyond what each emitter sends."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        self._subscribers[event].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[event]:
                self._subscribers[event].remove(callback)

        return unsubscribe

    def notify(self, event: str, payload: Any = None) -> None:
        for callback in list(self._subscribers[event]):
            callback(payload)


class WorkPlanWizard:
    """Holds the draft, mirrors it to ``store`` and drives the three steps.

    The snapshot in ``store`` is read once here and then overwritten after
    every change. It is cleared after a successful ``generate`` or an
    explicit ``clear_draft``.
    """

    def __init__(
        self,
        store: DraftStore,
        api: Optional[WorkPlansAPI] = None,
        observers: Optional[Observers] = None,
    ) -> None:
        self.store = store
        self.api = api
        self.observers = observers or Observers()
        self.step = GENERAL_INFO
        self.form = store.load() or draft.empty_form()

    def _set(self, form: WorkPlanFormData) -> WorkPlanFormData:
        self.form = form
        self.store.save(form)
        return form

    def update(self, **changes) -> WorkPlanFormData:
        return self._set(draft.update_form(self.form, **changes))

    def apply(self, edit: Callable[..., WorkPlanFormData], *args, **kwargs) -> WorkPlanFormData:
        """Run one of the ``draft`` edit functions against the current form."""

        return self._set(edit(self.form, *args, **kwargs))

    def go_to(self, step: int) -> None:
        if step not in range(len(STEPS)):
            raise ValueError(f"Unknown step: {step}")
        self.step = step

    def next_step(self) -> int:
        if self.step == GENERAL_INFO:
            draft.validate_general_info(self.form)
        elif self.step == STORE_ACTIVITIES:
            draft.validate_store_activities(self.form)
        else:
            return self.step
        self.step += 1
        return self.step

    def previous_step(self) -> int:
        self.step = max(GENERAL_INFO, self.step - 1)
        return self.step

    def clear_draft(self) -> None:
        self.store.clear()
        self.form = draft.empty_form()
        self.step = GENERAL_INFO

    def _require_api(self) -> WorkPlansAPI:
        if self.api is None:
            raise RuntimeError("No API client configured")
        return self.api

    def preview(self, simulated_workers: Optional[int] = None) -> Dict[str, Any]:
        draft.validate_general_info(self.form)
        draft.validate_store_activities(self.form)
        return self._require_api().preview(self.form, simulated_workers)

    def generate(self, save_as_template: bool = False) -> Dict[str, Any]:
        draft.validate_general_info(self.form)
        draft.validate_store_activities(self.form)
        result = self._require_api().generate(
            self.form,
            save_as_template,
            self.form.planName if save_as_template else None,
            self.form.description if save_as_template else None,
        )
        logging.info("Work plan %r created", (result or {}).get("planName"))
        self.clear_draft()
        self.observers.notify(PLAN_CREATED, result)
        return result
