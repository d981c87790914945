"""
Response models for the admin gateway.

Every successful endpoint answers with the same envelope, ``ApiResponse``;
failures use ``ErrorResponse``.
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, SerializeAsAny

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Shared response envelope: a human-readable message plus optional results.

    Results serialize with their runtime type so specialised records keep
    their extra fields.
    """
    message: str = Field(..., description="Outcome of the request")
    results: Optional[List[SerializeAsAny[T]]] = Field(None, description="Returned records")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Optional error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.now, description="Response timestamp")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
