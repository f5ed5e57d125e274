import logging
from contextlib import aclosing
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.core.config import settings
from app.core.constants import SUBJECTS
from app.core.deps import get_quiz_service
from app.core.exceptions import QuizAIException
from app.schemas import GenerateQuizRequest, ProgressEvent, QuizGenerationResponse, QuizSnapshot, SubjectResponse
from app.schemas.responses import error_response
from app.services.quiz_service import QuizService, quiz_input_from_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quiz"])


def _event(name: str, payload) -> str:
    return f"event: {name}\ndata: {payload.model_dump_json()}\n\n"


def _progress_event(snapshot: QuizSnapshot) -> str:
    return _event("progress", ProgressEvent(received=snapshot.received, progress=snapshot.progress))


@router.post("/api/generate-quiz")
async def generate_quiz_stream(
    request: GenerateQuizRequest,
    service: QuizService = Depends(get_quiz_service),
):
    """
    Stream quiz generation as server-sent events.

    Emits `progress` events while questions arrive, then one `quiz` event with
    the validated questions, or one `error` event if generation fails midway.
    Input and provider errors raised before streaming get a JSON error status.
    """
    quiz_input = quiz_input_from_request(request)
    snapshots = service.stream_quiz(quiz_input)
    try:
        first = await anext(snapshots)
        title = await service.quiz_title(quiz_input)
    except Exception:
        await snapshots.aclose()
        raise

    async def events():
        async with aclosing(snapshots):
            yield _progress_event(first)
            try:
                async for snapshot in snapshots:
                    if snapshot.final:
                        yield _event("quiz", QuizGenerationResponse(title=title, questions=snapshot.quiz.root))
                    else:
                        yield _progress_event(snapshot)
            except QuizAIException as e:
                logger.error(f"Generation Error: {e}")
                yield _event("error", error_response(e))

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.post(f"{settings.API_V1_STR}/quiz/generate", response_model=QuizGenerationResponse)
async def generate_quiz(
    request: GenerateQuizRequest,
    service: QuizService = Depends(get_quiz_service),
):
    """Generate a quiz and return it once validated."""
    quiz_input = quiz_input_from_request(request)
    quiz = await service.generate_quiz(quiz_input)
    title = await service.quiz_title(quiz_input)
    return QuizGenerationResponse(title=title, questions=quiz.root)


@router.get(f"{settings.API_V1_STR}/subjects", response_model=List[SubjectResponse])
async def list_subjects():
    return [
        SubjectResponse(id=s.id, name=s.name, description=s.description, icon=s.icon)
        for s in SUBJECTS
    ]
