"""
Quiz-related Pydantic schemas and the quiz shape validator.

Validation never raises: ``validate_question`` and ``validate_quiz`` return a
``ValidationResult`` holding either the typed value or every field violation.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from app.core.constants import OPTION_COUNT, QUIZ_LENGTH


class QuizQuestion(BaseModel):
    """Individual multiple-choice question."""
    model_config = ConfigDict(str_strip_whitespace=True)

    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct: int = Field(..., ge=0, le=OPTION_COUNT - 1, description="Index of the correct option")

    @property
    def correct_option(self) -> str:
        return self.options[self.correct]


class Quiz(RootModel[List[QuizQuestion]]):
    """Complete quiz: exactly QUIZ_LENGTH questions."""
    root: List[QuizQuestion] = Field(..., min_length=QUIZ_LENGTH, max_length=QUIZ_LENGTH)

    def __iter__(self):
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> QuizQuestion:
        return self.root[index]


class QuizSnapshot(BaseModel):
    """One element of a generation stream.

    ``quiz`` is only set on the final snapshot, after validation.
    """
    received: int = Field(default=0, ge=0, le=QUIZ_LENGTH)
    quiz: Optional[Quiz] = None

    @property
    def final(self) -> bool:
        return self.quiz is not None

    @property
    def progress(self) -> float:
        return self.received / QUIZ_LENGTH * 100


class QuizGenerationResponse(BaseModel):
    """Response from non-streaming quiz generation."""
    title: str
    questions: List[QuizQuestion]


# ============================================================================
# Validation results
# ============================================================================

class FieldViolation(BaseModel):
    """A single schema violation."""
    location: str
    message: str
    kind: str

    @classmethod
    def from_error(cls, error: dict) -> "FieldViolation":
        loc = ".".join(str(part) for part in error.get("loc", ()))
        return cls(location=loc or "quiz", message=error.get("msg", ""), kind=error.get("type", ""))

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    value: Optional[T] = None
    errors: List[FieldViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]


def _validate(model: Type[T], candidate: Any) -> ValidationResult[T]:
    try:
        return ValidationResult(value=model.model_validate(candidate))
    except ValidationError as exc:
        return ValidationResult(errors=[FieldViolation.from_error(err) for err in exc.errors()])


def validate_question(candidate: Any) -> ValidationResult[QuizQuestion]:
    """Check a candidate value against the question shape."""
    return _validate(QuizQuestion, candidate)


def validate_quiz(candidate: Any) -> ValidationResult[Quiz]:
    """Check a candidate value against the full quiz shape."""
    return _validate(Quiz, candidate)
