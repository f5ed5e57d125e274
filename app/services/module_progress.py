"""
Per-module progress through intro -> examples -> practice.

Progress is coarse (0/33/66/100), kept in memory for one session, and only
moves forward unless a module is explicitly reset.
"""

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional

from app.core.constants import COMPLETE_MODULE_LABEL, PASSING_PERCENTAGE, REVIEW_MODULE_LABEL
from app.core.exceptions import InputRejectedError
from app.schemas.learning import LearningModule

logger = logging.getLogger(__name__)


class ModuleStage(IntEnum):
    NOT_STARTED = 0
    INTRODUCED = 33
    EXAMINED = 66
    COMPLETED = 100


class Section(str, Enum):
    INTRO = "intro"
    CONTENT = "content"
    PRACTICE = "practice"


@dataclass(frozen=True)
class PracticeResult:
    correct: int
    total: int

    @property
    def percentage(self) -> float:
        return self.correct / self.total * 100 if self.total else 0.0

    @property
    def passed(self) -> bool:
        return self.percentage >= PASSING_PERCENTAGE

    @property
    def action(self) -> str:
        return COMPLETE_MODULE_LABEL if self.passed else REVIEW_MODULE_LABEL

    @property
    def headline(self) -> str:
        if self.correct == self.total:
            return "Perfect Score!"
        return "Well Done!" if self.passed else "Keep Learning!"


class ModuleProgressTracker:
    """Session-scoped mapping of module id to progress percentage."""

    def __init__(self):
        self._progress: Dict[str, int] = {}

    def get(self, module_id: str) -> int:
        return self._progress.get(module_id, int(ModuleStage.NOT_STARTED))

    def advance(self, module_id: str, stage: ModuleStage) -> int:
        """Raise a module's progress to ``stage``; lower stages are ignored."""
        current = self.get(module_id)
        self._progress[module_id] = max(current, int(stage))
        return self._progress[module_id]

    def reset(self, module_id: str) -> None:
        self._progress[module_id] = int(ModuleStage.NOT_STARTED)

    def open(self, module: LearningModule) -> "ModuleViewer":
        """Enter a module: its progress starts again from zero."""
        self.reset(module.id)
        return ModuleViewer(module, tracker=self)

    def completed_count(self) -> int:
        return sum(1 for value in self._progress.values() if value == ModuleStage.COMPLETED)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._progress)


class ModuleViewer:
    """State owner for one module being studied."""

    def __init__(self, module: LearningModule, tracker: Optional[ModuleProgressTracker] = None):
        self.module = module
        self.tracker = tracker
        self.section = Section.INTRO
        self.stage = ModuleStage.NOT_STARTED
        self.answers: Dict[int, str] = {}
        self.result: Optional[PracticeResult] = None

    @property
    def progress(self) -> int:
        return int(self.stage)

    @property
    def questions(self):
        return self.module.content.practiceQuestions

    def _require(self, section: Section) -> None:
        if self.section != section:
            raise InputRejectedError(f"Not available in the {self.section.value} section")

    def _reach(self, stage: ModuleStage) -> None:
        if stage > self.stage:
            self.stage = stage
        if self.tracker is not None:
            self.tracker.advance(self.module.id, stage)
        logger.debug(f"Module {self.module.id} progress: {self.progress}%")

    def leave_introduction(self) -> None:
        self._require(Section.INTRO)
        self.section = Section.CONTENT
        self._reach(ModuleStage.INTRODUCED)

    def leave_examples(self) -> None:
        self._require(Section.CONTENT)
        self.section = Section.PRACTICE
        self._reach(ModuleStage.EXAMINED)

    def select_answer(self, index: int, option: str) -> bool:
        """Record an answer. Returns False once results are shown."""
        self._require(Section.PRACTICE)
        if self.result is not None:
            return False
        if not 0 <= index < len(self.questions):
            raise InputRejectedError(f"No practice question at index {index}")
        if option not in self.questions[index].options:
            raise InputRejectedError(f"'{option}' is not an option of question {index + 1}")
        self.answers[index] = option
        return True

    @property
    def can_check(self) -> bool:
        return self.section == Section.PRACTICE and len(self.answers) == len(self.questions)

    def check_answers(self) -> PracticeResult:
        if not self.can_check:
            raise InputRejectedError("Answer every practice question before checking.")

        correct = sum(
            1 for index, question in enumerate(self.questions)
            if self.answers.get(index) == question.answer
        )
        self.result = PracticeResult(correct=correct, total=len(self.questions))
        if self.result.passed:
            self._reach(ModuleStage.COMPLETED)
        return self.result
