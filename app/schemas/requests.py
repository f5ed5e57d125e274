"""Request schemas."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class UploadedFile(BaseModel):
    """A file picked in the browser, encoded for transport."""
    name: str = Field(..., description="Original file name")
    type: str = Field(..., description="MIME type reported by the browser")
    data: str = Field(..., description="Base64 payload, optionally as a data URL")


class GenerateQuizRequest(BaseModel):
    """Quiz generation request: either uploaded files or a subject name."""
    files: Optional[List[UploadedFile]] = Field(
        None, description="Uploaded documents; only the first one is used"
    )
    subject: Optional[str] = Field(
        None, max_length=200, description="Subject name, takes precedence over files"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "subject": "Network Security"
            }
        }


class PracticeAnswersRequest(BaseModel):
    """Selected option per practice question index."""
    answers: Dict[int, str] = Field(default_factory=dict)
