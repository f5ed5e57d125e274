from typing import Optional

from fastapi import HTTPException

from app.core.llm import LLMClient
from app.services.learning_content import LearningContentStore
from app.services.quiz_service import QuizService


# Global state, filled in by the application lifespan
class AppState:
    llm_client: Optional[LLMClient] = None
    quiz_service: Optional[QuizService] = None
    content_store: Optional[LearningContentStore] = None

state = AppState()


def get_quiz_service() -> QuizService:
    if not state.quiz_service:
        raise HTTPException(status_code=500, detail="Services not initialized")
    return state.quiz_service


def get_learning_store() -> LearningContentStore:
    if not state.content_store:
        raise HTTPException(status_code=500, detail="Services not initialized")
    return state.content_store
