import json
from datetime import datetime, timezone

import pytest
import requests

from work_plans import draft, models, storage, wizard
from work_plans.draft import ValidationError

STORE = models.Store(id="s1", name="Norte", latitude=-11.49, longitude=-77.2)
ANA = models.User(id="u1", firstName="Ana", lastName="Diaz")
AUDIT = models.Activity(activityName="Shelf audit", estimatedTimePerTask=45)


class FakePlansAPI:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def preview(self, form, simulated_workers=None):
        self.calls.append(("preview", form, simulated_workers))
        return {"workerAssignments": [], "warnings": []}

    def generate(self, form, save_as_template, template_name=None, template_description=None):
        self.calls.append(("generate", form, save_as_template, template_name, template_description))
        if self.error:
            raise self.error
        return {"id": "plan-1", "planName": form.planName}


def fill(wiz):
    wiz.update(
        planName="March",
        description="Visits",
        deadline=datetime(2099, 3, 31, tzinfo=timezone.utc),
        selectedStores=(STORE,),
        selectedUsers=(ANA,),
    )
    wiz.apply(draft.save_store_activity, draft.build_store_activity(STORE, AUDIT, store_activity_id="sa-1"))


def test_file_store_round_trips_deadline(tmp_path):
    store = storage.FileDraftStore(tmp_path / "draft.json")
    assert store.load() is None
    wiz = wizard.WorkPlanWizard(store)
    fill(wiz)

    saved = json.loads((tmp_path / "draft.json").read_text())
    assert saved["deadline"] == "2099-03-31T00:00:00.000Z"
    restored = store.load()
    assert restored == wiz.form
    assert restored.deadline == datetime(2099, 3, 31, tzinfo=timezone.utc)
    assert restored.storeActivities[0].activity.activityName == "Shelf audit"


@pytest.mark.parametrize("text", ["{broken", "null", "[]", "\"x\"", "42"])
def test_corrupt_draft_is_ignored(tmp_path, text):
    path = tmp_path / "draft.json"
    path.write_text(text, encoding="utf-8")
    wiz = wizard.WorkPlanWizard(storage.FileDraftStore(path))
    assert wiz.form.planName == ""
    assert wiz.form.workDays == draft.DEFAULT_WORK_DAYS


def test_every_change_is_persisted():
    store = storage.MemoryDraftStore()
    wiz = wizard.WorkPlanWizard(store)
    wiz.update(planName="One")
    assert store.load().planName == "One"
    wiz.apply(draft.add_time_slot)
    assert len(store.load().workTimeSlots) == 2


def test_wizard_edits_after_list_updates():
    store = storage.MemoryDraftStore()
    wiz = wizard.WorkPlanWizard(store)
    wiz.update(workTimeSlots=[models.TimeSlot(start="07:00", end="12:00", id="am")], storeActivities=[])
    wiz.apply(draft.add_time_slot)
    wiz.apply(draft.save_store_activity, draft.build_store_activity(STORE, AUDIT))
    assert [s.id for s in wiz.form.workTimeSlots][0] == "am"
    assert len(store.load().workTimeSlots) == 2
    assert len(store.load().storeActivities) == 1


def test_draft_is_restored_by_a_new_session():
    store = storage.MemoryDraftStore()
    fill(wizard.WorkPlanWizard(store))
    again = wizard.WorkPlanWizard(store)
    assert again.form.planName == "March"
    assert again.step == wizard.GENERAL_INFO


def test_steps_are_validated():
    wiz = wizard.WorkPlanWizard(storage.MemoryDraftStore())
    with pytest.raises(ValidationError):
        wiz.next_step()
    assert wiz.step == wizard.GENERAL_INFO

    wiz.update(
        planName="March",
        description="Visits",
        deadline=datetime(2099, 3, 31, tzinfo=timezone.utc),
        selectedStores=(STORE,),
        selectedUsers=(ANA,),
    )
    assert wiz.next_step() == wizard.STORE_ACTIVITIES
    with pytest.raises(ValidationError, match="Norte"):
        wiz.next_step()
    wiz.apply(draft.save_store_activity, draft.build_store_activity(STORE, AUDIT))
    assert wiz.next_step() == wizard.PREVIEW
    assert wiz.next_step() == wizard.PREVIEW
    assert wiz.previous_step() == wizard.STORE_ACTIVITIES


def test_invalid_draft_never_reaches_the_api():
    api = FakePlansAPI()
    wiz = wizard.WorkPlanWizard(storage.MemoryDraftStore(), api)
    with pytest.raises(ValidationError):
        wiz.preview()
    with pytest.raises(ValidationError):
        wiz.generate()
    assert api.calls == []


def test_preview_passes_simulated_workers():
    api = FakePlansAPI()
    wiz = wizard.WorkPlanWizard(storage.MemoryDraftStore(), api)
    fill(wiz)
    wiz.preview(3)
    assert api.calls[0][0] == "preview"
    assert api.calls[0][2] == 3


def test_generate_clears_draft_and_notifies():
    store = storage.MemoryDraftStore()
    api = FakePlansAPI()
    wiz = wizard.WorkPlanWizard(store, api)
    fill(wiz)
    wiz.go_to(wizard.PREVIEW)
    created = []
    wiz.observers.subscribe(wizard.PLAN_CREATED, created.append)

    result = wiz.generate(save_as_template=True)

    assert result["planName"] == "March"
    assert api.calls[0][2:] == (True, "March", "Visits")
    assert store.load() is None
    assert wiz.form.planName == ""
    assert wiz.step == wizard.GENERAL_INFO
    assert created == [result]


def test_generate_without_template_sends_no_template_fields():
    api = FakePlansAPI()
    wiz = wizard.WorkPlanWizard(storage.MemoryDraftStore(), api)
    fill(wiz)
    wiz.generate()
    assert api.calls[0][2:] == (False, None, None)


def test_backend_failure_keeps_the_draft():
    store = storage.MemoryDraftStore()
    api = FakePlansAPI(error=requests.HTTPError("500 Server Error"))
    wiz = wizard.WorkPlanWizard(store, api)
    fill(wiz)
    with pytest.raises(requests.HTTPError):
        wiz.generate()
    assert store.load().planName == "March"


def test_clear_draft():
    store = storage.MemoryDraftStore()
    wiz = wizard.WorkPlanWizard(store)
    fill(wiz)
    wiz.go_to(wizard.STORE_ACTIVITIES)
    wiz.clear_draft()
    assert store.load() is None
    assert wiz.step == wizard.GENERAL_INFO
    assert wiz.form.storeActivities == ()


def test_unsubscribe():
    observers = wizard.Observers()
    seen = []
    unsubscribe = observers.subscribe("tenant-created", seen.append)
    observers.notify("tenant-created")
    unsubscribe()
    observers.notify("tenant-created")
    assert seen == [None]


def test_unsubscribe_twice_is_harmless():
    observers = wizard.Observers()
    seen = []
    unsubscribe = observers.subscribe(wizard.PLAN_CREATED, seen.append)
    unsubscribe()
    unsubscribe()
    observers.notify(wizard.PLAN_CREATED, {"id": "p1"})
    assert seen == []
