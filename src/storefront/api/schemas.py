"""
Response envelope.

Every response body, success or failure, has the same top-level shape:

    {"success": true, "data": ...}
    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorBody


def ok(data: Any = None) -> Dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data}


def error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return ErrorEnvelope(
        error=ErrorBody(code=code, message=message, details=details or {})
    ).model_dump(mode="json")
