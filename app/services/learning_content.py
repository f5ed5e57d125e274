"""
Read-only store of the pre-authored learning modules.

Modules are loaded once from app/content/learning_modules.yaml and never
change at runtime.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from app.core.exceptions import LearningModuleNotFoundError
from app.schemas.learning import LearningModule

logger = logging.getLogger(__name__)

CONTENT_FILE = Path(__file__).resolve().parent.parent / "content" / "learning_modules.yaml"


class LearningContentStore:
    """Ordered, immutable table of learning modules."""

    def __init__(self, modules: List[LearningModule]):
        self._modules = tuple(modules)
        self._by_id: Dict[str, LearningModule] = {}
        for module in self._modules:
            if module.id in self._by_id:
                raise ValueError(f"Duplicate module id: {module.id}")
            self._by_id[module.id] = module

    @classmethod
    def from_yaml(cls, path: Path = CONTENT_FILE) -> "LearningContentStore":
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}

        try:
            modules = [LearningModule.model_validate(item) for item in raw.get("modules", [])]
        except ValidationError as e:
            logger.error(f"Invalid learning content in {path}: {e}")
            raise

        logger.info(f"📚 Loaded {len(modules)} learning modules from {path.name}")
        return cls(modules)

    def list_modules(self) -> List[LearningModule]:
        return list(self._modules)

    def find_module(self, module_id: str) -> Optional[LearningModule]:
        return self._by_id.get(module_id)

    def get_module(self, module_id: str) -> LearningModule:
        module = self.find_module(module_id)
        if module is None:
            raise LearningModuleNotFoundError(module_id)
        return module

    def __len__(self) -> int:
        return len(self._modules)


# Global instance
_store: Optional[LearningContentStore] = None


def get_content_store() -> LearningContentStore:
    """Get the global content store, loading it on first use."""
    global _store
    if _store is None:
        _store = LearningContentStore.from_yaml()
    return _store
