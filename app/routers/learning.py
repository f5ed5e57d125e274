from typing import List

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.deps import get_learning_store
from app.schemas import LearningModule, ModuleSummary, PracticeAnswersRequest, PracticeResultResponse
from app.services.learning_content import LearningContentStore
from app.services.module_progress import ModuleViewer

MODULES_PATH = f"{settings.API_V1_STR}/modules"

router = APIRouter(prefix=MODULES_PATH, tags=["learning"])


@router.get("", response_model=List[ModuleSummary])
async def list_modules(store: LearningContentStore = Depends(get_learning_store)):
    """Module cards in their authored order."""
    return [module.summary() for module in store.list_modules()]


@router.get("/{module_id}", response_model=LearningModule)
async def get_module(module_id: str, store: LearningContentStore = Depends(get_learning_store)):
    return store.get_module(module_id)


@router.post("/{module_id}/practice", response_model=PracticeResultResponse)
async def check_practice(
    module_id: str,
    request: PracticeAnswersRequest,
    store: LearningContentStore = Depends(get_learning_store),
):
    """
    Score a module's practice answers.

    Reaching the practice section puts a module at 66%; a score of at least
    70% completes it.
    """
    viewer = ModuleViewer(store.get_module(module_id))
    viewer.leave_introduction()
    viewer.leave_examples()
    for index, option in request.answers.items():
        viewer.select_answer(index, option)

    result = viewer.check_answers()
    return PracticeResultResponse(
        module_id=module_id,
        correct=result.correct,
        total=result.total,
        percentage=round(result.percentage, 1),
        passed=result.passed,
        progress=viewer.progress,
        action=result.action,
    )
