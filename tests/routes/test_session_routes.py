from datetime import date
from decimal import Decimal

from tests.helpers import MISSING_ID, MONDAY, auth_headers
from tutorlink.core.enums import RoleName, SessionStatus


def _booking(tutor, start="14:00", duration=60, **extra):
    return {
        "tutor_id": tutor.id,
        "session_date": MONDAY.isoformat(),
        "start_time": start,
        "duration_minutes": duration,
        "subject": "Mathematics",
        **extra,
    }


class TestBookSession:
    def test_book_then_conflict_then_back_to_back(self, client, tutor, student_headers):
        first = client.post("/api/v1/sessions", json=_booking(tutor), headers=student_headers)
        assert first.status_code == 201
        body = first.json()
        assert body["status"] == "pending"
        assert body["start_time"] == "14:00"
        assert body["end_time"] == "15:00"
        assert body["price"] == 50.0
        assert body["tutor_name"] == "Tess Tutor"

        clash = client.post("/api/v1/sessions", json=_booking(tutor, start="14:30"), headers=student_headers)
        assert clash.status_code == 409
        assert clash.headers["content-type"].startswith("application/problem+json")
        assert clash.json()["code"] == "SLOT_UNAVAILABLE"

        adjacent = client.post("/api/v1/sessions", json=_booking(tutor, start="15:00"), headers=student_headers)
        assert adjacent.status_code == 201

    def test_slots_reflect_booking(self, client, tutor, student_headers):
        client.post("/api/v1/sessions", json=_booking(tutor), headers=student_headers)
        res = client.get(f"/api/v1/tutors/{tutor.id}/available-slots", params={"date": MONDAY.isoformat()})
        assert res.json()["slots"] == ["15:00", "15:30"]

    def test_outside_availability_is_422(self, client, tutor, student_headers):
        res = client.post("/api/v1/sessions", json=_booking(tutor, start="15:30"), headers=student_headers)
        assert res.status_code == 422
        assert res.json()["code"] == "OUTSIDE_AVAILABILITY"

    def test_unknown_tutor_is_404(self, client, student_headers, tutor):
        payload = _booking(tutor)
        payload["tutor_id"] = MISSING_ID
        res = client.post("/api/v1/sessions", json=payload, headers=student_headers)
        assert res.status_code == 404
        assert res.json()["code"] == "NOT_FOUND_OR_UNVERIFIED"

    def test_tutor_cannot_book(self, client, tutor, tutor_headers):
        res = client.post("/api/v1/sessions", json=_booking(tutor), headers=tutor_headers)
        assert res.status_code == 403
        assert res.json()["code"] == "NOT_AUTHORIZED"

    def test_malformed_payload_is_400(self, client, tutor, student_headers):
        res = client.post(
            "/api/v1/sessions", json=_booking(tutor, start="2pm"), headers=student_headers
        )
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_ERROR"

        res = client.post(
            "/api/v1/sessions", json=_booking(tutor, duration=5), headers=student_headers
        )
        assert res.status_code == 400

        res = client.post(
            "/api/v1/sessions", json=_booking(tutor, unexpected=True), headers=student_headers
        )
        assert res.status_code == 400

    def test_requires_token(self, client, tutor):
        res = client.post("/api/v1/sessions", json=_booking(tutor))
        assert res.status_code == 401
        assert res.json()["code"] == "UNAUTHORIZED"

    def test_rejects_bad_token(self, client, tutor):
        res = client.post(
            "/api/v1/sessions", json=_booking(tutor), headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert res.status_code == 401


class TestLifecycle:
    def test_cancel_pending_then_cancel_again(
        self, client, tutor, student, student_headers, tutor_headers, make_session
    ):
        session = make_session(tutor, student)

        res = client.put(
            f"/api/v1/sessions/{session.id}/status", json={"status": "cancelled"}, headers=student_headers
        )
        assert res.status_code == 200
        assert res.json()["status"] == "cancelled"

        inbox = client.get("/api/v1/notifications", headers=tutor_headers).json()
        assert inbox["unread_count"] == 1
        assert inbox["notifications"][0]["type"] == "session-update"

        again = client.put(
            f"/api/v1/sessions/{session.id}/status", json={"status": "cancelled"}, headers=student_headers
        )
        assert again.status_code == 409
        assert again.json()["code"] == "INVALID_TRANSITION"

    def test_student_cannot_confirm_tutor_can(
        self, client, tutor, student, student_headers, tutor_headers, make_session
    ):
        session = make_session(tutor, student)
        url = f"/api/v1/sessions/{session.id}/status"

        assert client.put(url, json={"status": "confirmed"}, headers=student_headers).status_code == 403
        res = client.put(url, json={"status": "confirmed"}, headers=tutor_headers)
        assert res.status_code == 200
        assert res.json()["confirmed_at"] is not None

    def test_unknown_status_value(self, client, tutor, student, student_headers, make_session):
        session = make_session(tutor, student)
        res = client.put(
            f"/api/v1/sessions/{session.id}/status", json={"status": "archived"}, headers=student_headers
        )
        assert res.status_code == 400


class TestListing:
    def test_list_and_detail(self, client, tutor, student, student_headers, make_user, make_session):
        session = make_session(tutor, student)

        listed = client.get("/api/v1/sessions", headers=student_headers).json()
        assert [s["id"] for s in listed] == [session.id]

        detail = client.get(f"/api/v1/sessions/{session.id}", headers=student_headers)
        assert detail.status_code == 200
        assert detail.json()["student_name"] == "Sam Student"

        stranger = make_user()
        denied = client.get(
            f"/api/v1/sessions/{session.id}", headers=auth_headers(stranger.id, RoleName.STUDENT)
        )
        assert denied.status_code == 403

    def test_missing_session_is_404(self, client, student_headers):
        res = client.get(f"/api/v1/sessions/{MISSING_ID}", headers=student_headers)
        assert res.status_code == 404

    def test_upcoming_filter(self, client, tutor, student, student_headers, make_session):
        make_session(tutor, student, session_date=date(2025, 5, 26), status=SessionStatus.CONFIRMED)
        upcoming = make_session(tutor, student)
        listed = client.get("/api/v1/sessions", params={"upcoming": "true"}, headers=student_headers)
        assert [s["id"] for s in listed.json()] == [upcoming.id]

    def test_my_earnings(self, client, tutor, student, tutor_headers, student_headers, make_session):
        make_session(
            tutor, student, session_date=date(2025, 5, 30), status=SessionStatus.COMPLETED, price=Decimal("50")
        )
        res = client.get("/api/v1/sessions/earnings", headers=tutor_headers)
        assert res.status_code == 200
        assert res.json() == {
            "total_earnings": 50.0,
            "weekly_earnings": 50.0,
            "monthly_earnings": 50.0,
            "completed_sessions": 1,
            "pending_sessions": 0,
            "cancelled_sessions": 0,
        }
        assert client.get("/api/v1/sessions/earnings", headers=student_headers).status_code == 403
