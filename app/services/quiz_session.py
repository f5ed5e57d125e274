"""
Client-side quiz state machine.

A QuizSession owns everything a single quiz view needs: the chosen mode and
input, the current state, and the answers. States form a tagged union:

    Idle -> Submitting -> Streaming -> Ready -> Answering -> Scored -> Idle
"""

import logging
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

from app.core.constants import QUIZ_LENGTH, QuizMode, Subject, get_subject
from app.core.exceptions import GENERATION_FAILED_MESSAGE, InputRejectedError, QuizAIException
from app.schemas.quiz import Quiz
from app.services.quiz_service import (
    DocumentInput,
    QuizInput,
    QuizService,
    SubjectInput,
    check_document,
)

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    STREAMING = "streaming"
    READY = "ready"
    ANSWERING = "answering"
    SCORED = "scored"


@dataclass(frozen=True)
class Idle:
    phase = Phase.IDLE


@dataclass(frozen=True)
class Submitting:
    phase = Phase.SUBMITTING


@dataclass(frozen=True)
class Streaming:
    received: int
    phase = Phase.STREAMING

    @property
    def progress(self) -> float:
        return self.received / QUIZ_LENGTH * 100


@dataclass(frozen=True)
class Ready:
    quiz: Quiz
    phase = Phase.READY


@dataclass(frozen=True)
class Answering:
    quiz: Quiz
    answers: Dict[int, str] = field(default_factory=dict)
    phase = Phase.ANSWERING


@dataclass(frozen=True)
class Scored:
    quiz: Quiz
    answers: Dict[int, str]
    score: int
    phase = Phase.SCORED

    @property
    def total(self) -> int:
        return len(self.quiz)


QuizState = Union[Idle, Submitting, Streaming, Ready, Answering, Scored]


def score_quiz(quiz: Quiz, answers: Mapping[int, str]) -> int:
    """Count answers matching the correct option. Pure and idempotent."""
    return sum(1 for index, question in enumerate(quiz) if answers.get(index) == question.correct_option)


def score_message(score: int, total: int) -> str:
    percentage = score / total * 100 if total else 0
    if percentage >= 80:
        return "🎉 Excellent! You've mastered this topic!"
    if percentage >= 60:
        return "👍 Good job! Keep practicing to improve."
    return "📚 Keep learning! You'll get there."


class QuizSession:
    def __init__(self, service: QuizService, mode: QuizMode = QuizMode.PDF):
        self.service = service
        self.mode = mode
        self.files: List[DocumentInput] = []
        self.subject: Optional[Subject] = None
        self.title: Optional[str] = None
        self.state: QuizState = Idle()
        self.notice: Optional[str] = None
        self._generation = 0

    # -- input ---------------------------------------------------------------

    def set_mode(self, mode: QuizMode) -> None:
        self.mode = QuizMode(mode)

    def select_files(self, files: List[DocumentInput]) -> List[str]:
        """Keep the valid PDFs and return a warning for every rejected file."""
        valid: List[DocumentInput] = []
        warnings: List[str] = []
        for document in files:
            try:
                check_document(document.name, document.mime_type, document.size)
            except InputRejectedError as e:
                warnings.append(f"{e.message} ({document.name})")
                continue
            valid.append(document)

        self.files = valid
        return warnings

    def select_subject(self, subject_id: str) -> Subject:
        subject = get_subject(subject_id)
        if subject is None:
            raise InputRejectedError(f"Unknown subject '{subject_id}'")
        self.subject = subject
        return subject

    @property
    def can_submit(self) -> bool:
        if isinstance(self.state, (Submitting, Streaming)):
            return False
        if self.mode == QuizMode.PDF:
            return len(self.files) > 0
        return self.subject is not None

    def _input(self) -> QuizInput:
        if self.mode == QuizMode.PDF:
            return self.files[0]
        return SubjectInput(self.subject.name)

    def _clear_input(self) -> None:
        self.files = []
        self.subject = None

    # -- generation ----------------------------------------------------------

    async def submit(self) -> Optional[Quiz]:
        """
        Generate a quiz for the current input.

        Returns the quiz once it is Ready, or None when generation failed or
        a newer submission superseded this one.
        """
        if not self.can_submit:
            raise InputRejectedError("Choose a subject or upload a PDF document.")

        self._generation += 1
        generation = self._generation
        quiz_input = self._input()
        self.notice = None
        self.title = None
        self.state = Submitting()

        try:
            async with aclosing(self.service.stream_quiz(quiz_input)) as snapshots:
                # Input checks run on the first pull, before the title call
                snapshot = await anext(snapshots, None)
                if snapshot is not None and generation == self._generation:
                    self.title = await self.service.quiz_title(quiz_input)

                while snapshot is not None:
                    if generation != self._generation:
                        logger.info("Discarding superseded quiz generation")
                        return None
                    if snapshot.final:
                        self.state = Ready(snapshot.quiz)
                        return snapshot.quiz
                    self.state = Streaming(snapshot.received)
                    snapshot = await anext(snapshots, None)
        except QuizAIException as e:
            if generation != self._generation:
                return None
            logger.warning(f"Quiz generation failed: {e}")
            rejected = isinstance(e, InputRejectedError)
            self.notice = e.message if rejected else GENERATION_FAILED_MESSAGE
            self.state = Idle()
            self._clear_input()
            return None

        if generation == self._generation:
            self.notice = GENERATION_FAILED_MESSAGE
            self.state = Idle()
            self._clear_input()
        return None

    @property
    def progress(self) -> float:
        if isinstance(self.state, Streaming):
            return self.state.progress
        if isinstance(self.state, (Ready, Answering, Scored)):
            return 100.0
        return 0.0

    # -- answering -----------------------------------------------------------

    def select_answer(self, index: int, option: str) -> None:
        if isinstance(self.state, Ready):
            self.state = Answering(self.state.quiz)
        if not isinstance(self.state, Answering):
            raise InputRejectedError(f"Cannot answer while {self.state.phase.value}")

        quiz = self.state.quiz
        if not 0 <= index < len(quiz):
            raise InputRejectedError(f"No question at index {index}")
        if option not in quiz[index].options:
            raise InputRejectedError(f"'{option}' is not an option of question {index + 1}")

        answers = dict(self.state.answers)
        answers[index] = option
        self.state = Answering(quiz, answers)

    def finish(self) -> Scored:
        if not isinstance(self.state, Answering) or len(self.state.answers) < len(self.state.quiz):
            raise InputRejectedError("Answer every question before checking your score.")

        quiz, answers = self.state.quiz, self.state.answers
        self.state = Scored(quiz, answers, score_quiz(quiz, answers))
        return self.state

    def reset(self) -> None:
        """Back to Idle, discarding the quiz, the answers and the input."""
        self._generation += 1
        self.state = Idle()
        self.title = None
        self.notice = None
        self._clear_input()
