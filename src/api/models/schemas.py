"""
Pydantic schemas for the Document Generator API
===============================================
Defines request/response models for all endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from composition import DocumentFields


# Maximum lengths in characters, after trimming
MAX_FIELD_LENGTHS = {
    "name": 100,
    "address": 200,
    "issuer": 100,
}


# =============================================================================
# Request Models
# =============================================================================

class GenerateRequest(BaseModel):
    """Request to render one document"""
    name: str = Field(..., description="Name printed on the document")
    address: str = Field(..., description="Address printed on the document")
    issuer: str = Field(..., description="Issuing organisation")

    @field_validator("name", "address", "issuer", mode="before")
    @classmethod
    def _sanitize(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("name", "address", "issuer")
    @classmethod
    def _validate_length(cls, value: str, info: ValidationInfo) -> str:
        label = info.field_name.capitalize()
        if not value:
            raise ValueError(f"{label} cannot be empty")
        if len(value) > MAX_FIELD_LENGTHS[info.field_name]:
            raise ValueError(f"{label} is too long")
        return value

    def to_fields(self) -> DocumentFields:
        return DocumentFields(name=self.name, address=self.address, issuer=self.issuer)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Body of every failed request"""
    error: str
    success: bool = False


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="healthy|unhealthy")
    assets_loaded: bool
    template_width: Optional[int] = None
    template_height: Optional[int] = None
    watermark_placement: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class InfoResponse(BaseModel):
    """Service info response"""
    service: str = "document-generator"
    version: str
    description: str
    endpoints: List[str]
    fields: List[str]
    placement_strategies: List[str]
