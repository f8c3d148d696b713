from __future__ import annotations

import dataclasses

import pytest

from contractform.models import ClassEntry, ContractEntry, ContractForm


def test_contract_entry_is_immutable() -> None:
    entry = ContractEntry("id-1", "user-42", "{}", 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.owner_id = "someone-else"  # type: ignore[misc]


def test_contract_form_from_web_payload() -> None:
    payload = {
        "semester": "Fall",
        "studyLocation": "On Campus",
        "contractYear": "2016",
        "firstName": "Ada",
        "lastName": "",
        "nNumber": "N00012345",
        "expectedGradYear": "twenty",
        "boxNumber": 42,
        "goals": "  Graduate  ",
        "descriptionsOtherActivities": "Chess club",
        "classes": [
            {
                "courseCode": "12345",
                "courseName": "Algebra",
                "isInternship": True,
                "instructorName": "Dr. Who",
                "sessionName": "A",
            },
            "not-a-class",
        ],
    }

    form = ContractForm.from_mapping(payload)

    assert form.student_id == "N00012345"
    assert form.first_name == "Ada"
    assert form.last_name is None
    assert form.contract_year == 2016
    assert form.expected_grad_year is None
    assert form.box_number == 42
    assert form.goals == "Graduate"
    assert form.other_activities == "Chess club"
    assert form.advisor_name is None
    assert form.classes == [
        ClassEntry(
            course_code="12345",
            course_name="Algebra",
            is_internship=True,
            instructor_name="Dr. Who",
            session_name="A",
        )
    ]


def test_contract_form_defaults() -> None:
    form = ContractForm.from_mapping({})
    assert form == ContractForm()
    assert form.classes == []
