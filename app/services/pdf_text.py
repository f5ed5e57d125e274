"""
PDF text extraction for document quizzes.
"""

import logging
import re

import fitz  # PyMuPDF

from app.core.exceptions import InputRejectedError

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"(<\|.*?\|>)|(\b(role|system|developer|assistant|user)\s*:)", re.I | re.S)


def pdf_to_text(pdf_bytes: bytes) -> str:
    """Extract selectable text from a PDF (no OCR). Scanned pages yield ""."""
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        logger.warning(f"Unreadable PDF: {e}")
        raise InputRejectedError("The uploaded file is not a readable PDF.", status_code=415) from e

    try:
        if doc.needs_pass:
            raise InputRejectedError("The PDF is password protected. Please upload an unlocked copy.", status_code=415)
        chunks = [page.get_text("text") for page in doc]
    except (RuntimeError, ValueError) as e:
        logger.warning(f"Unreadable PDF content: {e}")
        raise InputRejectedError("The uploaded file is not a readable PDF.", status_code=415) from e
    finally:
        doc.close()

    text = "\n".join(chunks).strip()
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def sanitize_document_text(text: str, max_chars: int) -> str:
    """Remove role/control-token patterns and cap the length."""
    t = (text or "").strip()
    t = _CONTROL_RE.sub("", t)
    return t[:max_chars].strip()
