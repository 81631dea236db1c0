import logging

from tutorlink.core.enums import SessionStatus
from tutorlink.models import TutoringSession


def test_new_session_defaults_to_pending():
    assert TutoringSession(tutor_id="t", student_id="s").status == SessionStatus.PENDING.value


def test_construction_stays_out_of_info_logs(caplog):
    with caplog.at_level(logging.INFO, logger="tutorlink.models.session"):
        TutoringSession(tutor_id="t", student_id="s")
    assert caplog.records == []
