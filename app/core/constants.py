"""
Centralized constants and enums for Quizz AI.

Single source of truth for quiz shape, upload limits, difficulty levels and
the subject catalog offered in subject mode.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


# ============================================================================
# Quiz Shape
# ============================================================================

QUIZ_LENGTH = 4
OPTION_COUNT = 4

PDF_MIME_TYPE = "application/pdf"
MAX_UPLOAD_MB = 20


# ============================================================================
# Quiz Mode
# ============================================================================

class QuizMode(str, Enum):
    """Where the quiz questions come from."""
    PDF = "pdf"
    SUBJECT = "subject"


# ============================================================================
# Module Difficulty
# ============================================================================

class Difficulty(str, Enum):
    """Difficulty of a learning module."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


def get_difficulties() -> List[str]:
    """Get all difficulty values."""
    return [level.value for level in Difficulty]


# ============================================================================
# Module Practice
# ============================================================================

PASSING_PERCENTAGE = 70
COMPLETE_MODULE_LABEL = "Complete Module"
REVIEW_MODULE_LABEL = "Review Module"


# ============================================================================
# Subject Catalog
# ============================================================================

@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    description: str
    icon: str


SUBJECTS: List[Subject] = [
    Subject("network", "Network Security", "Firewalls, protocols, and network defense", "🌐"),
    Subject("crypto", "Cryptography", "Encryption, hashing, and secure communications", "🔐"),
    Subject("web", "Web Security", "XSS, CSRF, and secure web development", "🔒"),
    Subject("malware", "Malware Analysis", "Virus, trojans, and malware detection", "🦠"),
    Subject("forensics", "Digital Forensics", "Evidence collection and analysis", "🔍"),
    Subject("compliance", "Security Compliance", "Standards, regulations, and frameworks", "📋"),
]


def get_subject(subject_id: str) -> Optional[Subject]:
    """Look up a catalog subject by id."""
    for subject in SUBJECTS:
        if subject.id == subject_id:
            return subject
    return None


def get_subject_ids() -> List[str]:
    return [subject.id for subject in SUBJECTS]


def get_subject_descriptions() -> Dict[str, str]:
    """Get human-readable descriptions for each subject."""
    return {subject.id: subject.description for subject in SUBJECTS}
