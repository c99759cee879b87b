from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Recommendation = Literal["HIRE", "REVIEW", "REJECT"]
EvaluationType = Literal["mood", "trust", "risk", "final", "comprehensive"]
VoiceSource = Literal["transcribed", "simulated", "client"]

RECOMMENDATIONS: tuple[str, ...] = ("HIRE", "REVIEW", "REJECT")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResumeAnalysis(CamelModel):
    skills_score: float = Field(ge=0, le=100)
    experience_score: float = Field(ge=0, le=100)
    qualifications_score: float = Field(ge=0, le=100)
    overall_score: float = Field(ge=0, le=100)
    strengths: list[str] = Field(default_factory=list, max_length=5)
    weaknesses: list[str] = Field(default_factory=list, max_length=3)
    summary: str = ""


class EmotionAnalysis(CamelModel):
    emotion: str
    confidence: float = Field(ge=0, le=1)
    mood_score: float = Field(ge=0, le=100)
    description: str = ""


class VoiceAnalysis(CamelModel):
    emotion: str
    confidence: float = Field(ge=0, le=1)
    tone: str
    trustworthiness: float = Field(ge=0, le=100)
    source: VoiceSource | None = None


class ComprehensiveAssessment(CamelModel):
    mood_score: float = Field(ge=0, le=100)
    mood_text: str
    trust_score: float = Field(ge=0, le=100)
    risk_score: float = Field(ge=0, le=100)
    recommendation: Recommendation
    reason: str


class CandidateSubmission(CamelModel):
    """Text fields of the assessment form."""

    full_name: str = Field(min_length=1)
    email: str
    position: str = Field(min_length=1)
    experience: str = Field(min_length=1)
    evaluation_type: EvaluationType

    @field_validator("full_name", "position", "experience", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _validate_email(cls, value: object) -> str:
        text = value.strip() if isinstance(value, str) else ""
        if not _EMAIL_RE.match(text):
            raise ValueError("Valid email is required")
        return text


class NewAssessment(CamelModel):
    """A completed assessment that has not been stored yet."""

    full_name: str
    email: str
    position: str
    experience: str
    evaluation_type: EvaluationType
    resume_filename: str | None = None
    image_filename: str | None = None
    audio_filename: str | None = None
    resume_content: str | None = None
    emotion_data: str | None = None
    voice_sentiment: str | None = None
    mood_score: float
    mood_text: str
    trust_score: float
    risk_score: float
    recommendation: Recommendation
    reason: str


class StoredAssessment(NewAssessment):
    id: int
    created_at: datetime


class AppConfig(CamelModel):
    id: int = 1
    app_name: str = "AURASCAN"
    accent_color: str = "#00FFFF"
    hire_label: str = "HIRE"
    review_label: str = "REVIEW"
    reject_label: str = "REJECT"


class AppConfigUpdate(CamelModel):
    app_name: str | None = Field(default=None, min_length=1, max_length=120)
    accent_color: str | None = Field(default=None, pattern=r"^#[0-9A-Fa-f]{3}([0-9A-Fa-f]{3})?$")
    hire_label: str | None = Field(default=None, min_length=1, max_length=40)
    review_label: str | None = Field(default=None, min_length=1, max_length=40)
    reject_label: str | None = Field(default=None, min_length=1, max_length=40)
