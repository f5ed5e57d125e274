"""
Custom exceptions for Quizz AI.

Every error the service reports to a user derives from QuizAIException and
carries the HTTP status it should be answered with.
"""

from typing import List, Optional


GENERATION_FAILED_MESSAGE = "Failed to generate quiz. Please try again."


class QuizAIException(Exception):
    """Base exception for all Quizz AI errors."""

    error_type: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[List[str]] = None):
        self.message = message
        self.details = details or []
        super().__init__(message)


class InputRejectedError(QuizAIException):
    """Raised when a document or subject is rejected before any network call."""

    error_type = "input_rejected"

    def __init__(self, message: str, status_code: int = 400, details: Optional[List[str]] = None):
        self.status_code = status_code
        super().__init__(message, details)


class GenerationFailedError(QuizAIException):
    """Raised when the provider call fails or its output does not validate."""

    error_type = "generation_failed"
    status_code = 500

    def __init__(self, message: str = GENERATION_FAILED_MESSAGE, details: Optional[List[str]] = None):
        super().__init__(message, details)


class LearningModuleNotFoundError(QuizAIException):
    """Raised when a module id does not match any entry in the content store."""

    error_type = "not_found"
    status_code = 404

    def __init__(self, module_id: str):
        self.module_id = module_id
        super().__init__(f"Module '{module_id}' not found")


class JSONParseError(QuizAIException):
    """Raised when JSON parsing fails."""

    error_type = "json_parse_error"

    def __init__(self, message: str, raw_text: str = None):
        self.raw_text = raw_text
        super().__init__(message)


class PromptTemplateError(QuizAIException):
    """Raised when prompt template loading or formatting fails."""
    pass


class LLMError(QuizAIException):
    """Raised when LLM generation fails."""

    error_type = "llm_error"
