"""
Prompt templates for quiz generation.

Templates live in app/prompts/<name>.txt and use {{VARIABLE}} placeholders.
Rendering is strict: a placeholder left without a value is an error, so a
half-filled prompt never reaches the model.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from app.core.exceptions import PromptTemplateError

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


class PromptManager:
    """
    Loads quiz prompt templates and fills their placeholders.

    Example:
        manager = PromptManager()
        prompt = manager.load_prompt("quiz_subject", SUBJECT="Cryptography", QUESTION_COUNT=4)
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = Path(prompts_dir) if prompts_dir else PROMPTS_DIR
        self._templates: Dict[str, str] = {}

    def load_prompt(self, name: str, **variables) -> str:
        template = self._template(name)

        missing = sorted(set(PLACEHOLDER_RE.findall(template)) - set(variables))
        if missing:
            raise PromptTemplateError(f"Template '{name}' is missing values for {missing}")

        return PLACEHOLDER_RE.sub(lambda m: str(variables[m.group(1)]), template)

    def _template(self, name: str) -> str:
        if name not in self._templates:
            path = self.prompts_dir / f"{name}.txt"
            try:
                self._templates[name] = path.read_text(encoding="utf-8")
            except OSError as e:
                raise PromptTemplateError(
                    f"Cannot read prompt template '{name}' (available: {self.list_templates()})"
                ) from e
            logger.debug(f"Loaded prompt template: {name}")
        return self._templates[name]

    def list_templates(self) -> List[str]:
        return sorted(p.stem for p in self.prompts_dir.glob("*.txt"))


_prompt_manager: Optional[PromptManager] = None


def get_prompt_manager() -> PromptManager:
    """Shared PromptManager for the app."""
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
    return _prompt_manager
