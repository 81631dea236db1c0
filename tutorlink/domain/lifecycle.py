# tutorlink/domain/lifecycle.py
"""
Session status lifecycle.

The transition table is the single source of truth for which status
changes exist, who may request each one, and which participant is told
about it. Applying the change and sending the notification is the
booking service's job; this module only decides.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from ..core.enums import SessionStatus
from ..core.exceptions import InvalidTransitionException, NotAuthorizedException
from ..principal import Actor


class Party(str, Enum):
    """How the acting principal relates to a particular session."""

    STUDENT = "student"
    TUTOR = "tutor"
    ADMIN = "admin"
    OUTSIDER = "outsider"


class Recipient(str, Enum):
    STUDENT = "student"
    TUTOR = "tutor"
    OTHER_PARTY = "other_party"


@dataclass(frozen=True)
class TransitionRule:
    allowed: FrozenSet[Party]
    notify: Recipient


@dataclass(frozen=True)
class TransitionPlan:
    current: SessionStatus
    target: SessionStatus
    actor_party: Party
    recipient: Party


TRANSITIONS: Dict[Tuple[SessionStatus, SessionStatus], TransitionRule] = {
    (SessionStatus.PENDING, SessionStatus.CONFIRMED): TransitionRule(
        allowed=frozenset({Party.TUTOR, Party.ADMIN}), notify=Recipient.STUDENT
    ),
    (SessionStatus.PENDING, SessionStatus.CANCELLED): TransitionRule(
        allowed=frozenset({Party.STUDENT, Party.ADMIN}), notify=Recipient.TUTOR
    ),
    (SessionStatus.CONFIRMED, SessionStatus.CANCELLED): TransitionRule(
        allowed=frozenset({Party.STUDENT, Party.TUTOR, Party.ADMIN}),
        notify=Recipient.OTHER_PARTY,
    ),
    (SessionStatus.CONFIRMED, SessionStatus.COMPLETED): TransitionRule(
        allowed=frozenset({Party.TUTOR, Party.ADMIN}), notify=Recipient.STUDENT
    ),
}


def resolve_party(actor: Actor, student_id: str, tutor_user_id: Optional[str]) -> Party:
    """Classify the actor against a session; the role must match the seat they occupy."""
    if actor.is_admin:
        return Party.ADMIN
    if actor.is_student and actor.user_id == student_id:
        return Party.STUDENT
    if actor.is_tutor and tutor_user_id is not None and actor.user_id == tutor_user_id:
        return Party.TUTOR
    return Party.OUTSIDER


def _recipient_for(rule: TransitionRule, actor_party: Party) -> Party:
    if rule.notify == Recipient.STUDENT:
        return Party.STUDENT
    if rule.notify == Recipient.TUTOR:
        return Party.TUTOR
    # Admin acting on a confirmed session informs the tutor
    return Party.STUDENT if actor_party == Party.TUTOR else Party.TUTOR


def plan_transition(
    current: SessionStatus, target: SessionStatus, actor_party: Party
) -> TransitionPlan:
    """
    Decide whether ``actor_party`` may move a session from ``current`` to ``target``.

    Raises:
        InvalidTransitionException: The pair is not in the table, whoever asks
        NotAuthorizedException: The actor is not allowed to request this pair
    """
    rule = TRANSITIONS.get((current, target))
    if rule is None:
        raise InvalidTransitionException(current.value, target.value)
    if actor_party == Party.OUTSIDER:
        raise NotAuthorizedException("Not authorized to update this session")
    if actor_party not in rule.allowed:
        raise NotAuthorizedException(
            f"A {actor_party.value} cannot change a {current.value} session to {target.value}",
            details={"current_status": current.value, "requested_status": target.value},
        )
    return TransitionPlan(
        current=current,
        target=target,
        actor_party=actor_party,
        recipient=_recipient_for(rule, actor_party),
    )


def allowed_targets(current: SessionStatus) -> FrozenSet[SessionStatus]:
    return frozenset(to for (frm, to) in TRANSITIONS if frm == current)
