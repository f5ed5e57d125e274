"""
Terminal client for Quizz AI.

Generates a quiz from a subject or a PDF and walks through it, or studies a
learning module section by section.

    python scripts/quiz_cli.py --subject crypto
    python scripts/quiz_cli.py --pdf notes.pdf
    python scripts/quiz_cli.py --learn ai-security
"""

import argparse
import asyncio
import mimetypes
import os
import sys
from pathlib import Path

sys.path.append(os.getcwd())

from app.core.config import settings
from app.core.constants import QuizMode, SUBJECTS
from app.core.llm import LLMClient
from app.core.logging_config import setup_logging
from app.services.learning_content import get_content_store
from app.services.module_progress import ModuleProgressTracker
from app.services.quiz_service import DocumentInput, QuizService
from app.services.quiz_session import QuizSession, score_message

LETTERS = "ABCD"


def _ask_choice(prompt: str, options: list) -> str:
    for i, option in enumerate(options):
        print(f"   {LETTERS[i]}) {option}")
    while True:
        answer = input(f"{prompt} ").strip().upper()
        if len(answer) == 1 and answer in LETTERS[:len(options)]:
            return options[LETTERS.index(answer)]
        print(f"   Please answer one of {', '.join(LETTERS[:len(options)])}")


async def run_quiz(args) -> int:
    session = QuizSession(QuizService(LLMClient()))

    if args.pdf:
        path = Path(args.pdf)
        session.set_mode(QuizMode.PDF)
        mime_type, _ = mimetypes.guess_type(path.name)
        document = DocumentInput(document=path.read_bytes(), mime_type=mime_type or "", name=path.name)
        warnings = session.select_files([document])
        for warning in warnings:
            print(f"⚠️  {warning}")
    else:
        session.set_mode(QuizMode.SUBJECT)
        session.select_subject(args.subject)

    if not session.can_submit:
        return 1

    print("⏳ Creating your quiz...")
    quiz = await session.submit()
    if quiz is None:
        print(f"❌ {session.notice}")
        return 1

    print(f"\n{'=' * 70}\n{session.title}\n{'=' * 70}")
    for index, question in enumerate(quiz):
        print(f"\nQ{index + 1}. {question.question}")
        session.select_answer(index, _ask_choice("Your answer:", question.options))

    result = session.finish()
    print(f"\nYour Score: {result.score} / {result.total}")
    print(score_message(result.score, result.total))
    for index, question in enumerate(quiz):
        mark = "✓" if result.answers.get(index) == question.correct_option else "✗"
        print(f"  {mark} Q{index + 1}: {question.correct_option}")
    return 0


def run_module(args) -> int:
    store = get_content_store()
    module = store.find_module(args.learn)
    if module is None:
        print(f"❌ Module Not Found: '{args.learn}'. Available modules:")
        for m in store.list_modules():
            print(f"   - {m.id}: {m.title}")
        return 1

    tracker = ModuleProgressTracker()
    viewer = tracker.open(module)

    print(f"\n{module.icon} {module.title} ({module.difficulty.value}, {module.estimatedTime})")
    print(f"\nIntroduction\n{module.content.introduction}\n\nKey Points")
    for point in module.content.keyPoints:
        print(f"  ✔ {point}")
    input("\nPress Enter to continue to examples...")
    viewer.leave_introduction()

    for i, example in enumerate(module.content.examples, 1):
        print(f"\nScenario {i}: {example.scenario}\n{example.explanation}")
    input(f"\n[{viewer.progress}%] Press Enter to start practice questions...")
    viewer.leave_examples()

    for index, question in enumerate(viewer.questions):
        print(f"\nQ{index + 1}. {question.question}")
        viewer.select_answer(index, _ask_choice("Your answer:", question.options))

    result = viewer.check_answers()
    print(f"\n{result.headline} You got {result.correct} out of {result.total} questions correct.")
    for index, question in enumerate(viewer.questions):
        verdict = "Correct!" if viewer.answers[index] == question.answer else "Incorrect"
        print(f"  Q{index + 1}: {verdict} {question.explanation}")
    print(f"\n[{tracker.get(module.id)}%] {result.action}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Quizz AI terminal client")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--subject", choices=[s.id for s in SUBJECTS], help="Generate a quiz about a subject")
    group.add_argument("--pdf", help="Generate a quiz from a PDF document")
    group.add_argument("--learn", metavar="MODULE_ID", help="Study a learning module")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    setup_logging(settings.ENVIRONMENT, args.log_level)

    if args.learn:
        return run_module(args)
    return asyncio.run(run_quiz(args))


if __name__ == "__main__":
    sys.exit(main())
