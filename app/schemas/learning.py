"""
Learning module schemas.
"""

from typing import List
from pydantic import BaseModel, Field, model_validator

from app.core.constants import Difficulty


class Example(BaseModel):
    """A worked scenario and its solution."""
    scenario: str
    explanation: str


class PracticeQuestion(BaseModel):
    """Self-check question; ``answer`` is the text of the correct option."""
    question: str
    options: List[str] = Field(..., min_length=2)
    answer: str
    explanation: str

    @model_validator(mode="after")
    def answer_is_an_option(self) -> "PracticeQuestion":
        if self.answer not in self.options:
            raise ValueError(f"answer {self.answer!r} is not one of the options")
        return self


class ModuleContent(BaseModel):
    introduction: str
    keyPoints: List[str] = Field(default_factory=list)
    examples: List[Example] = Field(default_factory=list)
    practiceQuestions: List[PracticeQuestion] = Field(..., min_length=1)


class ModuleSummary(BaseModel):
    """Module card shown in the module list."""
    id: str
    title: str
    description: str
    icon: str
    difficulty: Difficulty
    estimatedTime: str


class LearningModule(ModuleSummary):
    """Complete pre-authored learning module."""
    content: ModuleContent

    def summary(self) -> ModuleSummary:
        return ModuleSummary(**self.model_dump(exclude={"content"}))
