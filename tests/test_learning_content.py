import pytest
import yaml
from pydantic import ValidationError

from app.core.exceptions import LearningModuleNotFoundError
from app.services.learning_content import LearningContentStore, get_content_store


def test_modules_load_in_authored_order() -> None:
    store = get_content_store()
    assert [m.id for m in store.list_modules()] == ["ai-security", "ai-privacy-lab", "ai-security-testing"]
    assert len(store) == 3


def test_every_practice_answer_is_an_option() -> None:
    for module in get_content_store().list_modules():
        assert module.content.practiceQuestions
        for question in module.content.practiceQuestions:
            assert question.answer in question.options


def test_lookup() -> None:
    store = get_content_store()
    assert store.find_module("ai-privacy-lab").difficulty.value == "Advanced"
    assert store.find_module("nonexistent-id") is None
    with pytest.raises(LearningModuleNotFoundError) as exc:
        store.get_module("nonexistent-id")
    assert exc.value.status_code == 404


def test_summary_omits_content() -> None:
    summary = get_content_store().get_module("ai-security").summary()
    assert summary.id == "ai-security"
    assert not hasattr(summary, "content")


def _module(module_id: str, answer: str = "Yes") -> dict:
    return {
        "id": module_id,
        "title": "Test Module",
        "description": "A module",
        "icon": "🧪",
        "difficulty": "Beginner",
        "estimatedTime": "5 mins",
        "content": {
            "introduction": "Intro",
            "keyPoints": ["One"],
            "examples": [{"scenario": "S", "explanation": "E"}],
            "practiceQuestions": [
                {"question": "Q?", "options": ["Yes", "No"], "answer": answer, "explanation": "Because."}
            ],
        },
    }


def test_from_yaml(tmp_path) -> None:
    path = tmp_path / "modules.yaml"
    path.write_text(yaml.safe_dump({"modules": [_module("one"), _module("two")]}), encoding="utf-8")
    store = LearningContentStore.from_yaml(path)
    assert [m.id for m in store.list_modules()] == ["one", "two"]


def test_duplicate_ids_rejected(tmp_path) -> None:
    path = tmp_path / "modules.yaml"
    path.write_text(yaml.safe_dump({"modules": [_module("one"), _module("one")]}), encoding="utf-8")
    with pytest.raises(ValueError):
        LearningContentStore.from_yaml(path)


def test_answer_outside_options_rejected(tmp_path) -> None:
    path = tmp_path / "modules.yaml"
    path.write_text(yaml.safe_dump({"modules": [_module("one", answer="Maybe")]}), encoding="utf-8")
    with pytest.raises(ValidationError):
        LearningContentStore.from_yaml(path)
