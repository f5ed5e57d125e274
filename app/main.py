import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.deps import state
from app.core.exceptions import LearningModuleNotFoundError, QuizAIException
from app.core.llm import LLMClient
from app.core.logging_config import request_id_var, setup_logging
from app.routers.learning import MODULES_PATH, router as learning_router
from app.routers.quiz import router as quiz_router
from app.schemas.responses import error_response
from app.services.learning_content import get_content_store
from app.services.quiz_service import QuizService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(
        settings.ENVIRONMENT,
        settings.LOG_LEVEL,
        Path(settings.LOG_DIR) if settings.LOG_DIR else None,
    )
    logger.info("🚀 Starting Quizz AI API...")
    state.llm_client = LLMClient()
    state.quiz_service = QuizService(llm=state.llm_client)
    state.content_store = get_content_store()

    yield
    # Shutdown
    logger.info("🛑 Shutting down Quizz AI API...")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(QuizAIException)
async def quiz_ai_exception_handler(request: Request, exc: QuizAIException):
    back = MODULES_PATH if isinstance(exc, LearningModuleNotFoundError) else None
    if exc.status_code >= 500:
        logger.error(f"{exc.error_type}: {exc.message} {exc.details}")
    else:
        logger.info(f"{exc.error_type}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc, back=back).model_dump(),
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": settings.APP_VERSION}


app.include_router(quiz_router)
app.include_router(learning_router)
