"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Structured success/failure envelope: {success, message, data?}."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(default="", description="Human-readable outcome")
    data: T | None = Field(default=None, description="Payload, when the operation returns one")
