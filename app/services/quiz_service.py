"""
Quiz generation gateway.

Turns a PDF document or a subject into a validated 4-question quiz by
streaming a JSON array from the hosted model. Partial output only ever
produces progress counts; the quiz itself is released after the complete
array has passed validation.
"""

import asyncio
import base64
import binascii
import logging
import re
from contextlib import aclosing
from dataclasses import dataclass
from pathlib import PurePath
from typing import AsyncIterator, List, Optional, Tuple, Union

from app.core.config import settings
from app.core.constants import MAX_UPLOAD_MB, OPTION_COUNT, PDF_MIME_TYPE, QUIZ_LENGTH, get_subject
from app.core.exceptions import (
    GenerationFailedError,
    InputRejectedError,
    JSONParseError,
    LLMError,
    PromptTemplateError,
)
from app.core.llm import LLMClient, UserContent
from app.core.parsers import QuizOutputParser
from app.core.prompt_manager import PromptManager, get_prompt_manager
from app.schemas.quiz import Quiz, QuizSnapshot, validate_question, validate_quiz
from app.schemas.requests import GenerateQuizRequest, UploadedFile
from app.services.pdf_text import pdf_to_text, sanitize_document_text

logger = logging.getLogger(__name__)

UPLOAD_HINT = f"Please upload a PDF file under {MAX_UPLOAD_MB}MB."
TITLE_MAX_WORDS = 5
DOCUMENT_INSTRUCTION = "Create questions based on this document."


@dataclass(frozen=True)
class DocumentInput:
    document: bytes
    mime_type: str
    name: str = "document.pdf"

    @property
    def size(self) -> int:
        return len(self.document)


@dataclass(frozen=True)
class SubjectInput:
    subject: str


QuizInput = Union[DocumentInput, SubjectInput]


# ============================================================================
# Input checks
# ============================================================================

def check_document(name: str, mime_type: str, size: int, max_bytes: Optional[int] = None) -> None:
    """Reject anything that is not a non-empty PDF within the upload limit."""
    max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES

    if mime_type != PDF_MIME_TYPE:
        raise InputRejectedError(UPLOAD_HINT, status_code=415, details=[f"{name}: unsupported type {mime_type!r}"])
    if size > max_bytes:
        raise InputRejectedError(UPLOAD_HINT, status_code=413, details=[f"{name}: {size} bytes exceeds {max_bytes}"])
    if size == 0:
        raise InputRejectedError(UPLOAD_HINT, details=[f"{name}: file is empty"])


def decode_upload(upload: UploadedFile) -> DocumentInput:
    """Decode a base64 (or data URL) upload into a document input."""
    payload = upload.data
    if payload.startswith("data:"):
        _, _, payload = payload.partition(",")

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputRejectedError("The uploaded file could not be decoded.", details=[upload.name]) from e

    return DocumentInput(document=raw, mime_type=upload.type, name=upload.name)


def resolve_subject(value: str) -> str:
    """Map a catalog subject id to its display name; free text passes through."""
    subject = get_subject(value)
    return subject.name if subject else value


def quiz_input_from_request(request: GenerateQuizRequest) -> QuizInput:
    if request.subject and request.subject.strip():
        return SubjectInput(resolve_subject(request.subject.strip()))
    if request.files:
        return decode_upload(request.files[0])
    raise InputRejectedError("Choose a subject or upload a PDF document.")


def pdf_content_parts(document: DocumentInput) -> List[dict]:
    """Message parts that hand the PDF itself to the model, for documents without selectable text."""
    data = base64.b64encode(document.document).decode("ascii")
    return [
        {"type": "text", "text": DOCUMENT_INSTRUCTION},
        {
            "type": "file",
            "file": {"filename": document.name, "file_data": f"data:{PDF_MIME_TYPE};base64,{data}"},
        },
    ]


def title_from_filename(name: str) -> str:
    stem = PurePath(name or "").stem
    words = re.sub(r"[_\-.]+", " ", stem).split()
    if not words:
        return "Quiz"
    return " ".join(words).title()


# ============================================================================
# Gateway
# ============================================================================

class QuizService:
    def __init__(
        self,
        llm: LLMClient,
        prompt_manager: Optional[PromptManager] = None,
        parser: Optional[QuizOutputParser] = None,
        max_document_chars: Optional[int] = None,
    ):
        self.llm = llm
        self.prompts = prompt_manager or get_prompt_manager()
        self.parser = parser or QuizOutputParser()
        self.max_document_chars = max_document_chars or settings.MAX_DOCUMENT_CHARS

    def check_input(self, quiz_input: QuizInput) -> None:
        if isinstance(quiz_input, DocumentInput):
            check_document(quiz_input.name, quiz_input.mime_type, quiz_input.size)
        elif not quiz_input.subject.strip():
            raise InputRejectedError("Choose a subject or upload a PDF document.")

    async def build_prompt(self, quiz_input: QuizInput) -> Tuple[str, UserContent]:
        """
        Return (system_prompt, user_content) for the input.

        PDF text is extracted in a worker thread. A PDF without selectable
        text (a scan) is sent to the model as an inline file instead.
        """
        common = dict(
            QUESTION_COUNT=QUIZ_LENGTH,
            OPTION_COUNT=OPTION_COUNT,
            FORMAT_INSTRUCTIONS=self.parser.get_format_instructions(),
        )

        if isinstance(quiz_input, SubjectInput):
            system_prompt = self.prompts.load_prompt("quiz_subject", SUBJECT=quiz_input.subject, **common)
            user_prompt = (
                f"Create practical, real-world questions about {quiz_input.subject} "
                "focusing on best practices and common scenarios."
            )
            return system_prompt, user_prompt

        text = await asyncio.to_thread(pdf_to_text, quiz_input.document)
        text = sanitize_document_text(text, self.max_document_chars)
        system_prompt = self.prompts.load_prompt("quiz_document", **common)

        if not text:
            logger.info(f"No selectable text in {quiz_input.name}, sending the PDF itself")
            return system_prompt, pdf_content_parts(quiz_input)

        return system_prompt, f"{DOCUMENT_INSTRUCTION}\n\n<document>\n{text}\n</document>"

    async def stream_quiz(self, quiz_input: QuizInput) -> AsyncIterator[QuizSnapshot]:
        """
        Yield progress snapshots, then exactly one snapshot carrying the validated quiz.

        Raises InputRejectedError before any network call, and
        GenerationFailedError when the provider fails or the output is invalid.
        """
        self.check_input(quiz_input)

        try:
            system_prompt, prompt = await self.build_prompt(quiz_input)
        except PromptTemplateError as e:
            logger.error(f"Prompt construction failed: {e}")
            raise GenerationFailedError() from e

        try:
            deltas = await self.llm.open_stream(prompt, system_prompt)
        except LLMError as e:
            raise GenerationFailedError() from e

        yield QuizSnapshot(received=0)

        buffer = ""
        received = 0
        try:
            async for delta in deltas:
                buffer += delta
                count = self._completed_count(buffer)
                if count > received:
                    received = count
                    yield QuizSnapshot(received=received)
        except LLMError as e:
            raise GenerationFailedError() from e

        quiz = self._finalize(buffer)
        logger.info(f"✅ Quiz generated ({len(buffer)} chars streamed)")
        yield QuizSnapshot(received=QUIZ_LENGTH, quiz=quiz)

    async def generate_quiz(self, quiz_input: QuizInput) -> Quiz:
        async with aclosing(self.stream_quiz(quiz_input)) as snapshots:
            async for snapshot in snapshots:
                if snapshot.final:
                    return snapshot.quiz
        raise GenerationFailedError()

    async def quiz_title(self, quiz_input: QuizInput) -> str:
        if isinstance(quiz_input, SubjectInput):
            return f"{quiz_input.subject} Quiz"

        fallback = title_from_filename(quiz_input.name)
        try:
            prompt = self.prompts.load_prompt("quiz_title", FILE_NAME=quiz_input.name, MAX_WORDS=TITLE_MAX_WORDS)
            raw = await self.llm.generate(prompt, "You write concise titles.")
        except (LLMError, PromptTemplateError) as e:
            logger.warning(f"Title generation failed, using file name: {e}")
            return fallback

        lines = (raw or "").strip().splitlines()
        title = lines[0].strip().strip('"\'') if lines else ""
        return title or fallback

    def _completed_count(self, buffer: str) -> int:
        # Every entry except the last one is followed by another, so it is complete.
        items = self.parser.parse_partial(buffer)
        complete = sum(1 for item in items[:-1] if validate_question(item).ok)
        return min(complete, QUIZ_LENGTH - 1)

    def _finalize(self, buffer: str) -> Quiz:
        try:
            items = self.parser.parse(buffer)
        except JSONParseError as e:
            logger.warning(f"Discarding unparseable quiz output: {e}")
            raise GenerationFailedError(details=[str(e)]) from e

        result = validate_quiz(items)
        if not result.ok:
            logger.warning(f"Discarding invalid quiz output: {result.messages()}")
            raise GenerationFailedError(details=result.messages())
        return result.value
