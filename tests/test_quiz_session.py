import asyncio

import pytest

from app.core.constants import QuizMode
from app.core.exceptions import GenerationFailedError, InputRejectedError
from app.schemas.quiz import QuizSnapshot, validate_quiz
from app.services.quiz_service import DocumentInput, QuizService
from app.services.quiz_session import (
    Answering,
    Idle,
    Ready,
    Scored,
    Streaming,
    QuizSession,
    score_message,
    score_quiz,
)

from conftest import MB, QUESTIONS, FakeLLM, make_locked_pdf, make_pdf

PDF = "application/pdf"


class ScriptedService:
    """Replays snapshots and records the session state seen at each one."""

    def __init__(self, snapshots, on_snapshot=None, error=None):
        self.snapshots = snapshots
        self.on_snapshot = on_snapshot
        self.error = error
        self.seen = []

    async def quiz_title(self, quiz_input):
        return "Scripted Quiz"

    async def stream_quiz(self, quiz_input):
        for snapshot in self.snapshots:
            yield snapshot
            if self.on_snapshot:
                self.on_snapshot(snapshot)
        if self.error:
            raise self.error


def _quiz():
    return validate_quiz(QUESTIONS).value


def _ready_session() -> QuizSession:
    session = QuizSession(QuizService(llm=FakeLLM()), mode=QuizMode.SUBJECT)
    session.select_subject("crypto")
    asyncio.run(session.submit())
    return session


def test_can_submit_depends_on_mode_and_input() -> None:
    session = QuizSession(QuizService(llm=FakeLLM()))
    assert not session.can_submit

    session.select_files([DocumentInput(document=make_pdf(), mime_type=PDF, name="notes.pdf")])
    assert session.can_submit

    session.set_mode(QuizMode.SUBJECT)
    assert not session.can_submit
    session.select_subject("web")
    assert session.can_submit


def test_select_files_keeps_only_valid_pdfs() -> None:
    session = QuizSession(QuizService(llm=FakeLLM()))
    warnings = session.select_files([
        DocumentInput(document=b"\0" * (25 * MB), mime_type=PDF, name="huge.pdf"),
        DocumentInput(document=b"\0" * (5 * MB), mime_type="application/msword", name="notes.doc"),
        DocumentInput(document=b"\0" * (5 * MB), mime_type=PDF, name="ok.pdf"),
    ])
    assert len(warnings) == 2
    assert [f.name for f in session.files] == ["ok.pdf"]


def test_unknown_subject_rejected() -> None:
    session = QuizSession(QuizService(llm=FakeLLM()), mode=QuizMode.SUBJECT)
    with pytest.raises(InputRejectedError):
        session.select_subject("astrology")


def test_submit_streams_then_becomes_ready() -> None:
    session = QuizSession(None, mode=QuizMode.SUBJECT)
    session.select_subject("network")
    states = []
    service = ScriptedService(
        [QuizSnapshot(received=0), QuizSnapshot(received=2), QuizSnapshot(received=4, quiz=_quiz())],
        on_snapshot=lambda _: states.append(session.state),
    )
    session.service = service

    quiz = asyncio.run(session.submit())

    assert isinstance(states[0], Streaming) and states[0].received == 0
    assert isinstance(states[1], Streaming) and states[1].progress == 50
    assert isinstance(session.state, Ready)
    assert session.state.quiz is quiz
    assert session.title == "Scripted Quiz"
    assert session.progress == 100


def test_submit_blocked_while_streaming() -> None:
    session = QuizSession(None, mode=QuizMode.SUBJECT)
    session.select_subject("network")
    blocked = []
    session.service = ScriptedService(
        [QuizSnapshot(received=1), QuizSnapshot(received=4, quiz=_quiz())],
        on_snapshot=lambda _: blocked.append(session.can_submit),
    )
    asyncio.run(session.submit())
    assert blocked[0] is False


def test_generation_failure_returns_to_idle_and_clears_input() -> None:
    session = QuizSession(None, mode=QuizMode.SUBJECT)
    session.select_subject("forensics")
    session.service = ScriptedService([QuizSnapshot(received=0)], error=GenerationFailedError())

    assert asyncio.run(session.submit()) is None
    assert isinstance(session.state, Idle)
    assert session.notice == "Failed to generate quiz. Please try again."
    assert session.subject is None
    assert not session.can_submit


def test_rejected_pdf_makes_no_model_call() -> None:
    llm = FakeLLM()
    session = QuizSession(QuizService(llm=llm))
    session.select_files([DocumentInput(document=b"not really a pdf", mime_type=PDF, name="fake.pdf")])

    assert asyncio.run(session.submit()) is None
    assert llm.title_calls == []
    assert llm.calls == []
    assert session.notice == "The uploaded file is not a readable PDF."
    assert isinstance(session.state, Idle)


def test_locked_pdf_returns_to_idle() -> None:
    llm = FakeLLM()
    session = QuizSession(QuizService(llm=llm))
    session.select_files([DocumentInput(document=make_locked_pdf(), mime_type=PDF, name="locked.pdf")])

    assert asyncio.run(session.submit()) is None
    assert isinstance(session.state, Idle)
    assert "password" in session.notice
    assert session.files == []
    assert llm.title_calls == []


def test_reset_during_stream_discards_result() -> None:
    session = QuizSession(None, mode=QuizMode.SUBJECT)
    session.select_subject("malware")
    session.service = ScriptedService(
        [QuizSnapshot(received=1), QuizSnapshot(received=4, quiz=_quiz())],
        on_snapshot=lambda s: session.reset() if s.received == 1 else None,
    )
    assert asyncio.run(session.submit()) is None
    assert isinstance(session.state, Idle)
    assert session.notice is None


def test_all_b_answers_score_one_of_four() -> None:
    session = _ready_session()
    for index in range(4):
        session.select_answer(index, "B")
    assert isinstance(session.state, Answering)

    result = session.finish()
    assert isinstance(result, Scored)
    assert (result.score, result.total) == (1, 4)
    assert score_quiz(result.quiz, result.answers) == score_quiz(result.quiz, result.answers) == 1
    assert score_message(result.score, result.total).startswith("📚")


def test_finish_requires_every_answer() -> None:
    session = _ready_session()
    session.select_answer(0, "A")
    with pytest.raises(InputRejectedError):
        session.finish()


def test_answer_must_be_an_option() -> None:
    session = _ready_session()
    with pytest.raises(InputRejectedError):
        session.select_answer(0, "E")
    with pytest.raises(InputRejectedError):
        session.select_answer(7, "A")


def test_score_messages() -> None:
    assert score_message(4, 4).startswith("🎉")
    assert score_message(3, 4).startswith("👍")
    assert score_message(2, 4).startswith("📚")


def test_reset_returns_to_idle() -> None:
    session = _ready_session()
    session.reset()
    assert isinstance(session.state, Idle)
    assert session.title is None
    assert session.subject is None
    assert session.progress == 0
