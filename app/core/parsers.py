# parsers.py
"""
Output parser for quiz generation responses.

Handles both the final model output and the partial buffers seen while the
response is still streaming.
"""

import json
import re
import logging
from typing import Any, Dict, List

from langchain_core.output_parsers import BaseOutputParser
from langchain_core.utils.json import parse_partial_json

from app.core.exceptions import JSONParseError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'```(?:json)?\s*(.*?)\s*```', re.DOTALL)
_WRAPPER_KEYS = ("questions", "quiz", "items")


class QuizOutputParser(BaseOutputParser):
    """
    Parser for quiz JSON arrays.

    Features:
    - Extracts JSON from markdown code blocks
    - Unwraps objects like {"questions": [...]}
    - Fixes trailing commas
    - Parses incomplete buffers for progress reporting
    """

    def parse(self, text: str) -> List[Dict[str, Any]]:
        """Parse the complete LLM output into a list of question objects."""
        cleaned = self._clean_text(text)
        json_str = self._extract_json(cleaned)
        fixed_json = self._fix_common_issues(json_str)

        try:
            data = json.loads(fixed_json)
        except json.JSONDecodeError as e:
            logger.error(f"JSON parse error: {e}")
            logger.debug(f"Failed JSON: {text[:500]}")
            raise JSONParseError(f"Invalid JSON format: {e}", raw_text=text) from e

        items = self._normalize_structure(data)
        if items is None:
            raise JSONParseError("Expected a JSON array of questions", raw_text=text)

        logger.debug(f"✅ Parsed quiz JSON ({len(json_str)} chars, {len(items)} items)")
        return items

    def parse_partial(self, text: str) -> List[Any]:
        """Best-effort parse of an incomplete buffer. Returns [] when nothing parses yet."""
        cleaned = self._clean_text(text)
        cleaned = re.sub(r'^```(?:json)?', '', cleaned).rstrip('`').strip()

        start = self._first_container(cleaned)
        if start < 0:
            return []

        data = parse_partial_json(cleaned[start:])
        if data is None:
            return []

        return self._normalize_structure(data) or []

    def _clean_text(self, text: str) -> str:
        text = (text or "").strip()
        if text.startswith('\ufeff'):
            text = text[1:]
        return text

    def _first_container(self, text: str) -> int:
        positions = [pos for pos in (text.find('['), text.find('{')) if pos >= 0]
        return min(positions) if positions else -1

    def _extract_json(self, text: str) -> str:
        """Extract JSON from markdown or plain text."""
        fence = _FENCE_RE.search(text)
        if fence:
            logger.debug("Extracted from markdown")
            text = fence.group(1)

        start = self._first_container(text)
        if start < 0:
            return text

        closer = ']' if text[start] == '[' else '}'
        end = text.rfind(closer)
        if end < start:
            return text[start:]
        return text[start:end + 1]

    def _fix_common_issues(self, json_str: str) -> str:
        # Trailing commas before a closing bracket
        return re.sub(r',(\s*[}\]])', r'\1', json_str)

    def _normalize_structure(self, data: Any):
        """Return the question list, unwrapping a single wrapper object if needed."""
        if isinstance(data, list):
            return data

        if isinstance(data, dict):
            for key in _WRAPPER_KEYS:
                if isinstance(data.get(key), list):
                    return data[key]
            for value in data.values():
                if isinstance(value, list):
                    return value

        return None

    def get_format_instructions(self) -> str:
        return """Return a JSON array of objects with the following structure:
[
  {"question": "...", "options": ["A) ...", "B) ...", "C) ...", "D) ..."], "correct": 0}
]

CRITICAL: Include ONLY the JSON array. No explanations or conversational text."""

    @property
    def _type(self) -> str:
        return "quiz_json"
