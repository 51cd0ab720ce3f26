"""
Base schemas and the standard response envelopes.

Every endpoint answers ``{success, message?, data?}``; errors answer
``{success: false, error, code, details?}``.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class StandardizedModel(BaseModel):
    """Base model with standardized JSON encoding"""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)


class StrictModel(BaseModel):
    """Request base: forbid extras, validate defaults and assignments."""

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        validate_assignment=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    success: bool = Field(default=True, description="Operation success status")
    message: Optional[str] = Field(default=None, description="Human-readable message")
    data: Optional[T] = Field(default=None, description="Response payload")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str = Field(description="Human-readable error message")
    code: str = Field(description="Stable machine-readable error code")
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "Slot not available",
                "code": "SLOT_UNAVAILABLE",
                "details": {"slot_id": 42, "status": "booked"},
            }
        }
    )


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Build a success envelope."""
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body
