"""Pydantic models for the Document Generator API"""

from .schemas import (
    # Requests
    GenerateRequest,
    # Responses
    ErrorResponse,
    HealthResponse,
    InfoResponse,
)

__all__ = [
    "GenerateRequest",
    "ErrorResponse",
    "HealthResponse",
    "InfoResponse",
]
