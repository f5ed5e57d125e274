import json

import pytest

from app.core.exceptions import JSONParseError
from app.core.parsers import QuizOutputParser


@pytest.fixture
def parser() -> QuizOutputParser:
    return QuizOutputParser()


def test_parses_plain_array(parser, questions) -> None:
    assert parser.parse(json.dumps(questions)) == questions


def test_parses_markdown_block(parser, questions) -> None:
    text = f"```json\n{json.dumps(questions, indent=2)}\n```"
    assert parser.parse(text) == questions


def test_unwraps_questions_object(parser, questions) -> None:
    assert parser.parse(json.dumps({"questions": questions})) == questions


def test_ignores_surrounding_text_and_trailing_commas(parser) -> None:
    text = 'Here is your quiz: [{"question": "Q", "options": ["a", "b", "c", "d"], "correct": 0,},] Enjoy!'
    assert parser.parse(text) == [{"question": "Q", "options": ["a", "b", "c", "d"], "correct": 0}]


def test_invalid_json_raises(parser) -> None:
    with pytest.raises(JSONParseError):
        parser.parse('[{"question": "Q", "options": ')


def test_object_without_list_raises(parser) -> None:
    with pytest.raises(JSONParseError):
        parser.parse('{"answer": 42}')


def test_partial_buffers(parser, questions) -> None:
    assert parser.parse_partial("") == []
    assert parser.parse_partial("Sure, here") == []
    assert parser.parse_partial("[") == []

    partial = parser.parse_partial('[{"question": "Q1", "options": ["a"')
    assert len(partial) == 1
    assert partial[0]["question"] == "Q1"

    full = json.dumps(questions)
    assert parser.parse_partial("```json\n" + full[: len(full) // 2]) != []
    assert len(parser.parse_partial(full)) == 4
