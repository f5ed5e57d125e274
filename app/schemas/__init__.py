"""Schemas package."""

from .quiz import (
    FieldViolation,
    Quiz,
    QuizGenerationResponse,
    QuizQuestion,
    QuizSnapshot,
    ValidationResult,
    validate_question,
    validate_quiz,
)
from .requests import GenerateQuizRequest, PracticeAnswersRequest, UploadedFile
from .responses import ErrorResponse, PracticeResultResponse, ProgressEvent, SubjectResponse
from .learning import Example, LearningModule, ModuleContent, ModuleSummary, PracticeQuestion

__all__ = [
    # Quiz
    "FieldViolation",
    "Quiz",
    "QuizGenerationResponse",
    "QuizQuestion",
    "QuizSnapshot",
    "ValidationResult",
    "validate_question",
    "validate_quiz",
    # Requests
    "GenerateQuizRequest",
    "PracticeAnswersRequest",
    "UploadedFile",
    # Responses
    "ErrorResponse",
    "PracticeResultResponse",
    "ProgressEvent",
    "SubjectResponse",
    # Learning
    "Example",
    "LearningModule",
    "ModuleContent",
    "ModuleSummary",
    "PracticeQuestion",
]
