# tutorlink/domain/earnings.py
"""
Tutor earnings aggregation.

Only completed sessions earn money. Weekly and monthly figures count
completed sessions whose session date falls on or after the window start;
the month window steps back one calendar month with the day clamped to the
shorter month's length (Mar 31 -> Feb 28).
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Protocol

from ..core.enums import SessionStatus


class EarningsRow(Protocol):
    session_date: date
    status: str
    price: object


@dataclass(frozen=True)
class EarningsSummary:
    total_earnings: Decimal
    weekly_earnings: Decimal
    monthly_earnings: Decimal
    completed_sessions: int
    pending_sessions: int
    cancelled_sessions: int


def subtract_month(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _as_decimal(value: object) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def aggregate_earnings(sessions: Iterable[EarningsRow], now: datetime) -> EarningsSummary:
    week_start = (now - timedelta(days=7)).date()
    month_start = subtract_month(now).date()

    total = weekly = monthly = Decimal("0")
    completed = pending = cancelled = 0

    for session in sessions:
        status = SessionStatus(session.status)
        if status == SessionStatus.PENDING:
            pending += 1
        elif status == SessionStatus.CANCELLED:
            cancelled += 1
        elif status == SessionStatus.COMPLETED:
            completed += 1
            price = _as_decimal(session.price)
            total += price
            if session.session_date >= week_start:
                weekly += price
            if session.session_date >= month_start:
                monthly += price

    return EarningsSummary(
        total_earnings=total,
        weekly_earnings=weekly,
        monthly_earnings=monthly,
        completed_sessions=completed,
        pending_sessions=pending,
        cancelled_sessions=cancelled,
    )
