from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from pathlib import Path

import fitz
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.exceptions import LLMError  # noqa: E402
from app.services.quiz_service import QuizService  # noqa: E402

MB = 1024 * 1024

QUESTIONS = [
    {"question": "Which port does HTTPS use by default?", "options": ["A", "B", "C", "D"], "correct": 1},
    {"question": "What does a firewall filter?", "options": ["A", "B", "C", "D"], "correct": 0},
    {"question": "Which algorithm is asymmetric?", "options": ["A", "B", "C", "D"], "correct": 2},
    {"question": "What is phishing?", "options": ["A", "B", "C", "D"], "correct": 3},
]


def chunked(text: str, size: int = 25) -> list[str]:
    return [text[i:i + size] for i in range(0, len(text), size)]


class FakeLLM:
    """Stands in for LLMClient: replays canned chunks and records calls."""

    def __init__(
        self,
        chunks: list[str] | None = None,
        fail_open: bool = False,
        fail_after: int | None = None,
        title: str = "Cryptography Basics",
        fail_title: bool = False,
    ) -> None:
        self.chunks = chunks if chunks is not None else chunked(json.dumps(QUESTIONS))
        self.fail_open = fail_open
        self.fail_after = fail_after
        self.title = title
        self.fail_title = fail_title
        self.calls: list[tuple[str, str]] = []
        self.title_calls: list[str] = []

    async def open_stream(self, prompt: str, system_prompt: str):
        self.calls.append((prompt, system_prompt))
        if self.fail_open:
            raise LLMError("connection refused")
        return self._deltas()

    async def _deltas(self):
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise LLMError("stream interrupted")
            yield chunk

    async def generate(self, prompt: str, system_prompt: str = "") -> str:
        self.title_calls.append(prompt)
        if self.fail_title:
            raise LLMError("title failed")
        return self.title


def make_pdf(text: str = "Firewalls filter traffic between networks.") -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    if text:
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_locked_pdf(text: str = "Incident response runbook.") -> bytes:
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), text)
    data = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="secret")
    doc.close()
    return data


@pytest.fixture
def questions() -> list[dict]:
    return [dict(q) for q in QUESTIONS]


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def service(fake_llm: FakeLLM) -> QuizService:
    return QuizService(llm=fake_llm)


@pytest.fixture
def client(service: QuizService) -> Iterator:
    from fastapi.testclient import TestClient

    from app.core.deps import get_learning_store, get_quiz_service
    from app.main import app
    from app.services.learning_content import get_content_store

    app.dependency_overrides[get_quiz_service] = lambda: service
    app.dependency_overrides[get_learning_store] = get_content_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
