from __future__ import annotations
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

class ProjectRequest(BaseModel):
    """Intake payload sent by the form. Every field has a default; nothing is validated here."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    topic: str = ""
    subject: str = "Биология"
    grade: str = "9"
    page_count: int = Field(5, alias="pageCount")
    difficulty: int = 3
    has_practical: bool = Field(False, alias="hasPractical")
    has_hypothesis: bool = Field(True, alias="hasHypothesis")
    source_count: int = Field(5, alias="sourceCount")
    student_name: str = Field("", alias="studentName")
    school: str = ""
    teacher: str = ""
    city: str = ""
    year: str = Field(default_factory=lambda: str(date.today().year))

    @field_validator("topic", "subject", "grade", "student_name", "school", "teacher", "city", "year", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value

class GenerateResponse(BaseModel):
    jobId: str

class StatusResponse(BaseModel):
    status: str
    progress: int
    message: str
    error: Optional[str] = None
