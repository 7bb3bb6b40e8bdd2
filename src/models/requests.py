"""Request body models for the HTTP endpoints."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class AnswerRequest(BaseModel):
    """Body of POST /answer."""
    listingId: int = Field(..., gt=0, strict=True)
    question: str = Field(..., strict=True)

    @field_validator("listingId", mode="before")
    @classmethod
    def integral_float_is_int(cls, value):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @field_validator("question")
    @classmethod
    def question_has_content(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("question must contain at least 2 characters")
        return value


class LeadRequest(BaseModel):
    """Body of POST /lead."""
    model_config = ConfigDict(str_strip_whitespace=True)

    listingId: int = Field(..., gt=0)
    phone: str = Field(..., min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class DocumentRequest(BaseModel):
    """Body of POST /document."""
    listingId: int = Field(..., gt=0)


def invalid_parameter_message(exc: ValidationError) -> str:
    """Describe the first offending field of a validation error."""
    errors = exc.errors()
    field = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else "body"
    return f"Paramètre '{field}' manquant ou invalide"
