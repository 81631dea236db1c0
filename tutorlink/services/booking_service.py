# tutorlink/services/booking_service.py
"""
Booking Service for TutorLink

Handles all session-related business logic including:
- Validating and creating booking requests
- Driving the session status lifecycle
- Session listing and detail for participants and admins
- Lifecycle notifications (best-effort, after commit)
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.booking_lock import tutor_booking_lock
from ..core.clock import Clock
from ..core.enums import NotificationType, RelatedModel, SessionStatus
from ..core.exceptions import (
    InvalidTransitionException,
    NoAvailabilityException,
    NotAuthorizedException,
    NotFoundException,
    OutsideAvailabilityException,
    RepositoryException,
    SlotUnavailableException,
    TutorUnavailableException,
)
from ..domain.availability import MINUTES_PER_DAY, day_of, format_hhmm, from_minutes
from ..domain.conflicts import session_interval
from ..domain.lifecycle import Party, plan_transition, resolve_party
from ..models.session import TutoringSession
from ..models.tutor import TutorProfile
from ..principal import Actor
from ..repositories import RepositoryFactory
from ..repositories.session_repository import SessionRepository
from ..schemas.session import SessionCreate
from .base import BaseService
from .conflict_checker import ConflictChecker
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

TRANSITION_MESSAGES = {
    SessionStatus.CONFIRMED: "{actor} has confirmed your session for {subject}",
    SessionStatus.CANCELLED: "{actor} has cancelled the session for {subject}",
    SessionStatus.COMPLETED: "{actor} has marked your session for {subject} as completed",
}


def calculate_price(hourly_rate: object, duration_minutes: int) -> Decimal:
    """Hourly rate prorated to the session length, rounded to cents."""
    rate = Decimal(str(hourly_rate or 0))
    return (rate * Decimal(duration_minutes) / Decimal(60)).quantize(CENTS, rounding=ROUND_HALF_UP)


class BookingService(BaseService):
    """
    Service layer for session booking operations.

    Centralizes the booking validation pipeline and the status lifecycle.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        notification_service: Optional[NotificationService] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        repository: Optional[SessionRepository] = None,
    ):
        super().__init__(db, clock)
        self.notification_service = notification_service or NotificationService(db, self.clock)
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.clock)
        self.repository = repository or RepositoryFactory.create_session_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    # Booking

    @BaseService.measure_operation("create_booking")
    def create_booking(self, actor: Actor, booking_data: SessionCreate) -> TutoringSession:
        """
        Create a pending session after running the validation pipeline.

        Checks, in order: the actor is a student, the tutor exists and is
        verified, the tutor has a window on that weekday, the requested
        interval fits the window, and no active session overlaps it. The
        window and conflict checks and the insert run under the tutor's
        booking lock.

        Raises:
            NotAuthorizedException: Actor is not a student
            TutorUnavailableException: Tutor missing or unverified
            NoAvailabilityException: No window on the requested weekday
            OutsideAvailabilityException: Interval not inside the window
            SlotUnavailableException: Interval overlaps an active session
        """
        self.log_operation(
            "create_booking",
            student_id=actor.user_id,
            tutor_id=booking_data.tutor_id,
            date=str(booking_data.session_date),
            start_time=format_hhmm(booking_data.start_time),
            duration=booking_data.duration_minutes,
        )

        if not actor.is_student:
            raise NotAuthorizedException("Only students can book sessions")
        student = self.user_repository.get_by_id(actor.user_id)
        if student is None:
            raise NotFoundException("Student not found", details={"user_id": actor.user_id})

        tutor = self.tutor_repository.get_verified(booking_data.tutor_id)
        if tutor is None:
            raise TutorUnavailableException(booking_data.tutor_id)

        with tutor_booking_lock(tutor.id):
            self._validate_against_availability(tutor, booking_data)
            self._check_conflicts(tutor, booking_data)
            session = self._create_session_record(actor, tutor, booking_data)

        self.notification_service.notify(
            recipient_id=tutor.user_id,
            notification_type=NotificationType.SESSION_REQUEST,
            message=(
                f"You have a new session request from {student.name} for {session.subject}"
            ),
            sender_id=actor.user_id,
            related_id=session.id,
            related_model=RelatedModel.SESSION,
        )
        return session

    def _validate_against_availability(
        self, tutor: TutorProfile, booking_data: SessionCreate
    ) -> None:
        weekday = day_of(booking_data.session_date)
        window = tutor.window_for(weekday)
        if window is None or not window.is_bookable:
            raise NoAvailabilityException(weekday.value)
        if not window.contains(booking_data.start_time, booking_data.duration_minutes):
            _, end = session_interval(booking_data.start_time, booking_data.duration_minutes)
            end_label = format_hhmm(from_minutes(end)) if end < MINUTES_PER_DAY else "24:00+"
            raise OutsideAvailabilityException(
                f"{format_hhmm(booking_data.start_time)}-{end_label}", window.describe()
            )

    def _check_conflicts(self, tutor: TutorProfile, booking_data: SessionCreate) -> None:
        if self.conflict_checker.check_time_conflicts(
            tutor.id,
            booking_data.session_date,
            booking_data.start_time,
            booking_data.duration_minutes,
        ):
            raise SlotUnavailableException(
                details={
                    "tutor_id": tutor.id,
                    "session_date": str(booking_data.session_date),
                    "start_time": format_hhmm(booking_data.start_time),
                }
            )

    def _create_session_record(
        self, actor: Actor, tutor: TutorProfile, booking_data: SessionCreate
    ) -> TutoringSession:
        try:
            with self.transaction():
                session = self.repository.create(
                    tutor_id=tutor.id,
                    student_id=actor.user_id,
                    session_date=booking_data.session_date,
                    start_time=booking_data.start_time,
                    duration_minutes=booking_data.duration_minutes,
                    status=SessionStatus.PENDING.value,
                    subject=booking_data.subject,
                    session_type=booking_data.session_type.value,
                    price=calculate_price(tutor.hourly_rate, booking_data.duration_minutes),
                    notes=booking_data.notes,
                    location=booking_data.location,
                )
        except RepositoryException as exc:
            # Active-start unique index: another request won the race for this slot
            if isinstance(exc.__cause__, IntegrityError):
                raise SlotUnavailableException(
                    details={"tutor_id": tutor.id, "reason": "concurrent_booking"}
                ) from exc
            raise
        logger.info(f"Session {session.id} requested for tutor {tutor.id}")
        return session

    # Lifecycle

    @BaseService.measure_operation("update_session_status")
    def update_status(
        self, actor: Actor, session_id: str, new_status: SessionStatus
    ) -> TutoringSession:
        """
        Move a session to ``new_status`` if the lifecycle allows it for this actor.

        The status change commits first; the counter-party notification is
        created afterwards and never undoes the change.

        Raises:
            NotFoundException: Session does not exist
            InvalidTransitionException: Pair not allowed from the current status
            NotAuthorizedException: Actor may not request this transition
        """
        session = self.repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", details={"session_id": session_id})

        student_id, tutor_user_id = session.participant_ids()
        party = resolve_party(actor, student_id, tutor_user_id)
        plan = plan_transition(session.status_enum, SessionStatus(new_status), party)

        with self.transaction():
            self._apply_status(session, plan.current, plan.target, actor)

        self.log_operation(
            "update_session_status",
            session_id=session.id,
            actor_id=actor.user_id,
            from_status=plan.current.value,
            to_status=plan.target.value,
        )

        recipient_id = student_id if plan.recipient == Party.STUDENT else tutor_user_id
        if recipient_id:
            self.notification_service.notify(
                recipient_id=recipient_id,
                notification_type=NotificationType.SESSION_UPDATE,
                message=TRANSITION_MESSAGES[plan.target].format(
                    actor=self._display_name(actor), subject=session.subject
                ),
                sender_id=actor.user_id,
                related_id=session.id,
                related_model=RelatedModel.SESSION,
            )
        return session

    def _apply_status(
        self,
        session: TutoringSession,
        current: SessionStatus,
        target: SessionStatus,
        actor: Actor,
    ) -> None:
        """Write the new status only if the row still holds the status the plan was made from."""
        now = self.clock.now()
        changes: Dict[str, Any] = {}
        if target == SessionStatus.CONFIRMED:
            changes["confirmed_at"] = now
        elif target == SessionStatus.COMPLETED:
            changes["completed_at"] = now
        elif target == SessionStatus.CANCELLED:
            changes["cancelled_at"] = now
            changes["cancelled_by_id"] = actor.user_id

        if not self.repository.update_status_if_current(session.id, current, target, **changes):
            latest = self.repository.get_status(session.id) or current.value
            logger.warning(
                f"Session {session.id} moved to {latest} before {target.value} could be applied"
            )
            raise InvalidTransitionException(latest, target.value)

    def _display_name(self, actor: Actor) -> str:
        user = self.user_repository.get_by_id(actor.user_id, load_relationships=False)
        if user is not None:
            return user.name
        return "An administrator" if actor.is_admin else "A participant"

    # Queries

    @BaseService.measure_operation("list_sessions")
    def list_sessions(self, actor: Actor, upcoming_only: bool = False) -> List[TutoringSession]:
        """Sessions visible to the actor, ordered by date and start time."""
        if actor.is_admin:
            sessions = self.repository.get_all_sessions()
        elif actor.is_tutor:
            tutor = self.tutor_repository.get_by_user_id(actor.user_id)
            sessions = self.repository.get_for_tutor(tutor.id) if tutor is not None else []
        else:
            sessions = self.repository.get_for_student(actor.user_id)

        if upcoming_only:
            now: datetime = self.clock.now()
            sessions = [s for s in sessions if s.is_upcoming(now)]
        return sessions

    @BaseService.measure_operation("get_session")
    def get_session(self, actor: Actor, session_id: str) -> TutoringSession:
        session = self.repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", details={"session_id": session_id})
        student_id, tutor_user_id = session.participant_ids()
        if resolve_party(actor, student_id, tutor_user_id) == Party.OUTSIDER:
            raise NotAuthorizedException("Not authorized to view this session")
        return session

    @BaseService.measure_operation("get_booked_times")
    def get_booked_times(self, tutor_id: str) -> List[TutoringSession]:
        """Active sessions of a tutor; callers expose only their timing."""
        tutor = self.tutor_repository.get_by_id(tutor_id, load_relationships=False)
        if tutor is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        return self.repository.get_active_for_tutor(tutor.id)
