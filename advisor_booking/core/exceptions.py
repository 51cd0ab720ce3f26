# advisor_booking/core/exceptions.py
"""
Domain-specific exceptions for the advisor booking service.

Every error the booking core can report is one of these types. The API
layer converts them to HTTP responses with ``to_http_exception()``; the
background reminder engine catches them per booking and records them.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code or self.__class__.__name__
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
    """Raised when input is malformed (bad identifiers, emails, enums)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "INVALID_INPUT"


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ConflictException(DomainException):
    """Raised when a state precondition conflicts with existing data."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE
    default_code = "BUSINESS_RULE_VIOLATION"


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"


class ForbiddenException(DomainException):
    """Raised when the caller may not perform an action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class ServiceException(DomainException):
    """Raised when a service operation fails unexpectedly."""

    default_code = "SERVICE_ERROR"

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details,
            },
        )


class DatabaseUnavailableException(ServiceException):
    """Raised when the database cannot be reached or a lock wait timed out."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "DATABASE_UNAVAILABLE"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message or "Database temporarily unavailable", **kwargs)


# Booking core exceptions


class SlotNotFoundException(NotFoundException):
    def __init__(self, slot_id: int):
        super().__init__(
            message="Slot not found",
            code="SLOT_NOT_FOUND",
            details={"slot_id": slot_id},
        )


class BookingNotFoundException(NotFoundException):
    def __init__(self, booking_id: int):
        super().__init__(
            message="Booking not found",
            code="BOOKING_NOT_FOUND",
            details={"booking_id": booking_id},
        )


class AdvisorNotFoundException(NotFoundException):
    def __init__(self, advisor_id: int):
        super().__init__(
            message="Advisor not found",
            code="ADVISOR_NOT_FOUND",
            details={"advisor_id": advisor_id},
        )


class SlotUnavailableException(ConflictException):
    """Raised when a booking targets a slot that is not free."""

    def __init__(self, slot_id: int, current_status: str):
        super().__init__(
            message="Slot not available",
            code="SLOT_UNAVAILABLE",
            details={"slot_id": slot_id, "status": current_status},
        )


class SlotConflictException(ConflictException):
    """Raised when another active booking already holds the slot."""

    def __init__(self, slot_id: int, conflicting_booking_id: int):
        super().__init__(
            message="Another active booking already holds this slot",
            code="SLOT_CONFLICT",
            details={
                "slot_id": slot_id,
                "conflicting_booking_id": conflicting_booking_id,
            },
        )


class InvalidTransitionException(BusinessRuleException):
    """Raised for no-op or illegal booking status changes."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_TRANSITION", details=details)


class NotificationFailure(Exception):
    """
    A notification could not be delivered.

    Never propagated to the request that triggered the notification; it is
    logged and recorded as a failed EmailLog row.
    """


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as query failures or
    constraint violations.
    """
