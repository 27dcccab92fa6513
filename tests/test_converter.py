from datetime import datetime, timezone

from work_plans import converter, models

STORE = models.Store(id="store-1", name="Huaral", latitude=-11.49, longitude=-77.20)
ANA = models.User(id="user-1", firstName="Ana", lastName="Diaz")
LUIS = models.User(id="user-2", firstName="Luis", lastName="Paz")


def make_store_activity(**overrides):
    base = dict(
        id="sa-1",
        store=STORE,
        activity=models.Activity(
            activityName="Shelf audit",
            estimatedTimePerTask=45,
            isRepetitive=True,
            defaultRepetitions=3,
            id="activity-template-9",
        ),
        repetitions=3,
        assignmentMode=models.AUTOMATIC,
    )
    base.update(overrides)
    return models.StoreActivity(**base)


def make_form(**overrides):
    base = dict(
        planName="March visits",
        description="Audit every store",
        deadline=datetime(2099, 3, 31, 5, 0, tzinfo=timezone.utc),
        selectedStores=(STORE,),
        selectedUsers=(ANA, LUIS),
        workDays=(1, 2, 3, 4, 5),
        workTimeSlots=(models.TimeSlot(start="08:00", end="17:00", id="slot-a"),),
        storeActivities=(make_store_activity(),),
    )
    base.update(overrides)
    return models.WorkPlanFormData(**base)


def test_single_store_without_custom_schedule():
    dto = converter.to_dto(make_form())
    assert "customTimeSlots" not in dto["storeActivities"][0]
    assert dto["workTimeSlots"] == [{"start": "08:00", "end": "17:00"}]


def test_top_level_fields():
    dto = converter.to_dto(make_form())
    assert dto["planName"] == "March visits"
    assert dto["description"] == "Audit every store"
    assert dto["deadline"] == "2099-03-31T05:00:00.000Z"
    assert dto["selectedStoreIds"] == ["store-1"]
    assert dto["selectedUserIds"] == ["user-1", "user-2"]
    assert dto["workDays"] == [1, 2, 3, 4, 5]


def test_activity_id_is_the_store_activity_id():
    dto = converter.to_dto(make_form())
    sa = dto["storeActivities"][0]
    assert sa["activityId"] == "sa-1"
    assert sa == {
        "activityId": "sa-1",
        "storeId": "store-1",
        "taskName": "Shelf audit",
        "isRepetitive": True,
        "repetitions": 3,
        "estimatedTimePerTask": 45,
        "assignmentMode": "AUTOMATIC",
        "assignedUserIds": [],
        "hasCustomSchedule": False,
    }


def test_custom_slots_present_only_with_custom_schedule():
    custom = make_store_activity(
        id="sa-2",
        hasCustomSchedule=True,
        customTimeSlots=(models.TimeSlot(start="06:00", end="09:00", id="x"),),
        assignmentMode=models.MANUAL,
        assignedUsers=(LUIS,),
        supervisor=ANA,
    )
    form = make_form(storeActivities=(make_store_activity(), custom))
    plain_dto, custom_dto = converter.to_dto(form)["storeActivities"]
    for sa, dto in zip(form.storeActivities, (plain_dto, custom_dto)):
        assert ("customTimeSlots" in dto) == sa.hasCustomSchedule
    assert custom_dto["customTimeSlots"] == [{"start": "06:00", "end": "09:00"}]
    assert custom_dto["supervisorId"] == "user-1"
    assert custom_dto["assignedUserIds"] == ["user-2"]
    assert "supervisorId" not in plain_dto


def test_custom_schedule_with_no_slots_is_an_empty_override():
    form = make_form(storeActivities=(make_store_activity(hasCustomSchedule=True),))
    assert converter.to_dto(form)["storeActivities"][0]["customTimeSlots"] == []


def test_form_is_not_modified_and_output_is_stable():
    form = make_form()
    before = form.to_dict()
    first = converter.to_dto(form)
    first["selectedStoreIds"].append("other")
    assert converter.to_dto(form) != first
    assert form.to_dict() == before


def test_missing_deadline_is_null():
    assert converter.to_dto(make_form(deadline=None))["deadline"] is None


def test_preview_payload():
    form = make_form()
    assert "simulatedWorkers" not in converter.to_preview_payload(form)
    payload = converter.to_preview_payload(form, 4)
    assert payload["simulatedWorkers"] == 4
    assert payload["storeActivities"] == converter.to_dto(form)["storeActivities"]


def test_generate_payload():
    form = make_form()
    payload = converter.to_generate_payload(form, False)
    assert payload["saveAsTemplate"] is False
    assert "templateName" not in payload
    assert "templateDescription" not in payload

    payload = converter.to_generate_payload(form, True, "March", "Reusable")
    assert payload["templateName"] == "March"
    assert payload["templateDescription"] == "Reusable"
    assert payload["planName"] == "March visits"
