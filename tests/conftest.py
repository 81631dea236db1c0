# tests/conftest.py
"""
Pytest configuration for TutorLink.

Every test gets a fresh in-memory SQLite database, a FixedClock pinned to
Monday 2025-06-02 09:00, and factory fixtures for users, tutors and
sessions. The API client overrides ``get_db`` and ``get_clock`` so routes
share the test's session and clock.
"""

import os

# Set testing mode BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["IS_TESTING"] = "true"
os.environ.pop("REDIS_URL", None)

from datetime import date, time
from decimal import Decimal
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorlink.api.dependencies.database import get_db
from tutorlink.core.clock import FixedClock, get_clock
from tutorlink.core.enums import RoleName, SessionStatus, VerificationStatus
from tutorlink.database import Base
from tutorlink.main import app
from tutorlink.models import TutoringSession, TutorProfile, TutorSubject, User, WeeklyAvailability
from tutorlink.principal import Actor

from tests.helpers import MONDAY, NOW, actor_for, auth_headers


@pytest.fixture(scope="function")
def db() -> Iterator[Session]:
    """Fresh schema per test on a single shared in-memory connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(
        role: RoleName = RoleName.STUDENT,
        name: Optional[str] = None,
        city: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            name=name or f"Test {role.value.title()} {counter['n']}",
            email=f"{role.value}{counter['n']}@example.com",
            role=role.value,
            city=city,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_tutor(db: Session, make_user: Callable[..., User]) -> Callable[..., TutorProfile]:
    def _make(
        windows: Optional[Dict[str, Tuple[str, str]]] = None,
        hourly_rate: Decimal = Decimal("50.00"),
        verification_status: VerificationStatus = VerificationStatus.VERIFIED,
        subjects: Optional[List[str]] = None,
        name: Optional[str] = None,
        city: Optional[str] = None,
    ) -> TutorProfile:
        user = make_user(RoleName.TUTOR, name=name, city=city)
        tutor = TutorProfile(
            user_id=user.id,
            hourly_rate=hourly_rate,
            city=city,
            verification_status=verification_status.value,
        )
        for subject in subjects or ["Mathematics"]:
            tutor.subjects.append(TutorSubject(name=subject))
        for day, (start, end) in (windows or {}).items():
            tutor.availability.append(
                WeeklyAvailability(
                    day_of_week=day,
                    start_time=time.fromisoformat(start),
                    end_time=time.fromisoformat(end),
                )
            )
        db.add(tutor)
        db.commit()
        return tutor

    return _make


@pytest.fixture
def make_session(db: Session) -> Callable[..., TutoringSession]:
    def _make(
        tutor: TutorProfile,
        student: User,
        session_date: date = MONDAY,
        start: str = "14:00",
        duration: int = 60,
        status: SessionStatus = SessionStatus.PENDING,
        price: Decimal = Decimal("50.00"),
        subject: str = "Mathematics",
    ) -> TutoringSession:
        session = TutoringSession(
            tutor_id=tutor.id,
            student_id=student.id,
            session_date=session_date,
            start_time=time.fromisoformat(start),
            duration_minutes=duration,
            status=status.value,
            subject=subject,
            price=price,
        )
        db.add(session)
        db.commit()
        return session

    return _make


# ============================================================================
# COMMON ACTORS
# ============================================================================


@pytest.fixture
def student(make_user: Callable[..., User]) -> User:
    return make_user(RoleName.STUDENT, name="Sam Student")


@pytest.fixture
def admin(make_user: Callable[..., User]) -> User:
    return make_user(RoleName.ADMIN, name="Ada Admin")


@pytest.fixture
def tutor(make_tutor: Callable[..., TutorProfile]) -> TutorProfile:
    """Verified tutor working Mondays 14:00-16:00 at 50/hour."""
    return make_tutor(windows={"monday": ("14:00", "16:00")}, name="Tess Tutor")


@pytest.fixture
def student_actor(student: User) -> Actor:
    return actor_for(student)


@pytest.fixture
def tutor_actor(tutor: TutorProfile) -> Actor:
    return Actor(user_id=tutor.user_id, role=RoleName.TUTOR)


@pytest.fixture
def admin_actor(admin: User) -> Actor:
    return actor_for(admin)


# ============================================================================
# API CLIENT
# ============================================================================


@pytest.fixture
def client(db: Session, clock: FixedClock) -> Iterator[TestClient]:
    def _override_get_db() -> Iterator[Session]:
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def student_headers(student: User) -> Dict[str, str]:
    return auth_headers(student.id, RoleName.STUDENT)


@pytest.fixture
def tutor_headers(tutor: TutorProfile) -> Dict[str, str]:
    return auth_headers(tutor.user_id, RoleName.TUTOR)


@pytest.fixture
def admin_headers(admin: User) -> Dict[str, str]:
    return auth_headers(admin.id, RoleName.ADMIN)
