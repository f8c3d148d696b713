"""Records handled by the contract stores."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional

__all__ = ["ContractEntry", "ClassEntry", "ContractForm"]


@dataclass(frozen=True, slots=True)
class ContractEntry:
    """One contract persisted in the keyed store.

    ``contract_data`` is the serialized contract document. Stores keep it
    verbatim and never look inside it.
    """

    contract_id: str
    owner_id: str
    contract_data: str
    last_modified: int


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


@dataclass(slots=True)
class ClassEntry:
    """A course listed on a contract form."""

    course_code: Optional[str] = None
    course_name: Optional[str] = None
    is_internship: bool = False
    instructor_name: Optional[str] = None
    session_name: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ClassEntry":
        return cls(
            course_code=_optional_text(payload.get("courseCode")),
            course_name=_optional_text(payload.get("courseName")),
            is_internship=bool(payload.get("isInternship", False)),
            instructor_name=_optional_text(payload.get("instructorName")),
            session_name=_optional_text(payload.get("sessionName")),
        )


@dataclass(slots=True)
class ContractForm:
    """Typed view of a contract document, as flattened by the SQL store."""

    student_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    semester: Optional[str] = None
    contract_year: Optional[int] = None
    study_location: Optional[str] = None
    expected_grad_year: Optional[int] = None
    box_number: Optional[int] = None
    goals: Optional[str] = None
    certification_criteria: Optional[str] = None
    other_activities: Optional[str] = None
    advisor_name: Optional[str] = None
    classes: List[ClassEntry] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ContractForm":
        """Build a form from the camel-cased document posted by the web form.

        Blank strings become ``None``; numeric fields that do not parse are
        dropped rather than rejected.
        """

        raw_classes = payload.get("classes") or []
        classes = [
            ClassEntry.from_mapping(item)
            for item in raw_classes
            if isinstance(item, Mapping)
        ]
        return cls(
            student_id=_optional_text(payload.get("nNumber")),
            first_name=_optional_text(payload.get("firstName")),
            last_name=_optional_text(payload.get("lastName")),
            semester=_optional_text(payload.get("semester")),
            contract_year=_optional_int(payload.get("contractYear")),
            study_location=_optional_text(payload.get("studyLocation")),
            expected_grad_year=_optional_int(payload.get("expectedGradYear")),
            box_number=_optional_int(payload.get("boxNumber")),
            goals=_optional_text(payload.get("goals")),
            certification_criteria=_optional_text(payload.get("certificationCriteria")),
            other_activities=_optional_text(payload.get("descriptionsOtherActivities")),
            advisor_name=_optional_text(payload.get("advisorName")),
            classes=classes,
        )
