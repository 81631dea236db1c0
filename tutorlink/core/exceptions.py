# tutorlink/core/exceptions.py
"""
Domain-specific exceptions for TutorLink.

These exceptions carry a stable ``code`` so the frontend can render
field-specific or action-specific messaging, and convert themselves to
HTTPException at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", **kwargs: Any) -> None:
        super().__init__(message, code=code, **kwargs)


class NotFoundException(DomainException):
    """Raised when a referenced tutor, session or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found", **kwargs: Any) -> None:
        super().__init__(message, code="NOT_FOUND", **kwargs)


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotAuthorizedException(DomainException):
    """Raised when the acting principal lacks the role or ownership required."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Not authorized to perform this action", **kwargs: Any):
        super().__init__(message, code="NOT_AUTHORIZED", **kwargs)


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details,
            },
        )


# Booking validation failures


class TutorUnavailableException(DomainException):
    """Raised when the tutor does not exist or is not verified for booking."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, tutor_id: str):
        super().__init__(
            message="Tutor not found or not verified",
            code="NOT_FOUND_OR_UNVERIFIED",
            details={"tutor_id": tutor_id},
        )


class NoAvailabilityException(BusinessRuleException):
    """Raised when the tutor has no availability window on the requested weekday."""

    def __init__(self, day_of_week: str):
        super().__init__(
            message=f"Tutor is not available on {day_of_week.capitalize()}",
            code="NO_AVAILABILITY",
            details={"day_of_week": day_of_week},
        )


class OutsideAvailabilityException(BusinessRuleException):
    """Raised when the requested interval does not fit inside the availability window."""

    def __init__(self, requested: str, window: str):
        super().__init__(
            message=f"Requested time {requested} is outside the tutor's hours ({window})",
            code="OUTSIDE_AVAILABILITY",
            details={"requested": requested, "window": window},
        )


class SlotUnavailableException(ConflictException):
    """Raised when a booking overlaps an active session of the same tutor."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is already booked",
            code="SLOT_UNAVAILABLE",
            details=details or {},
        )


# Lifecycle failures


class InvalidTransitionException(ConflictException):
    """Raised when a status change is not permitted from the current state."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Cannot change session status from {current} to {requested}",
            code="INVALID_TRANSITION",
            details={"current_status": current, "requested_status": requested},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as connection issues,
    query failures, or constraint violations.
    """
