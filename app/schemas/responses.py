"""Response schemas."""

from pydantic import BaseModel, Field
from typing import List, Optional

from app.core.constants import QUIZ_LENGTH


class ErrorResponse(BaseModel):
    """Structured error body returned with an HTTP error status."""
    error_type: str
    error: str
    details: List[str] = Field(default_factory=list)
    back: Optional[str] = Field(None, description="Link back to a usable view")


class ProgressEvent(BaseModel):
    """Streamed progress while a quiz is being generated."""
    received: int
    total: int = QUIZ_LENGTH
    progress: float


class SubjectResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str


class PracticeResultResponse(BaseModel):
    """Outcome of checking a module's practice answers."""
    module_id: str
    correct: int
    total: int
    percentage: float
    passed: bool
    progress: int
    action: str


def error_response(exc, back: Optional[str] = None) -> ErrorResponse:
    """Build the error body for a QuizAIException."""
    return ErrorResponse(
        error_type=exc.error_type,
        error=exc.message,
        details=list(exc.details),
        back=back,
    )
