from pydantic import ValidationError
import pytest

from tests.helpers import MISSING_ID, MONDAY
from tutorlink.core.enums import ProficiencyLevel
from tutorlink.schemas.session import SessionCreate, SubjectRef


@pytest.mark.parametrize("raw", ["advanced", "ADVANCED", " Advanced "])
def test_proficiency_level_is_case_insensitive(raw):
    assert SubjectRef(name="Physics", proficiencyLevel=raw).proficiencyLevel == ProficiencyLevel.ADVANCED


def test_unknown_proficiency_level_is_rejected():
    with pytest.raises(ValidationError):
        SubjectRef(name="Physics", proficiencyLevel="guru")


def test_subject_object_collapses_to_name():
    request = SessionCreate(
        tutor_id=MISSING_ID,
        session_date=MONDAY,
        start_time="14:00",
        duration_minutes=60,
        subject={"name": " Organic  Chemistry", "proficiencyLevel": "expert"},
    )
    assert request.subject == "Organic Chemistry"
