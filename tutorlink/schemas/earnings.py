from pydantic import BaseModel

from ..domain.earnings import EarningsSummary


class EarningsResponse(BaseModel):
    total_earnings: float
    weekly_earnings: float
    monthly_earnings: float
    completed_sessions: int
    pending_sessions: int
    cancelled_sessions: int

    @classmethod
    def from_summary(cls, summary: EarningsSummary) -> "EarningsResponse":
        return cls(
            total_earnings=float(summary.total_earnings),
            weekly_earnings=float(summary.weekly_earnings),
            monthly_earnings=float(summary.monthly_earnings),
            completed_sessions=summary.completed_sessions,
            pending_sessions=summary.pending_sessions,
            cancelled_sessions=summary.cancelled_sessions,
        )
