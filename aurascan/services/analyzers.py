"""Resume, image and voice analyzers plus the final assessment aggregator.

Each analyzer makes exactly one provider call and always returns values
inside the documented bounds: whatever the model sends back is clamped, and
missing or non-numeric fields are replaced with fixed defaults. Any failure
of the call itself is logged and re-raised as a single AnalysisError.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, TypeVar

from aurascan.ai.types import ScoringProvider
from aurascan.core.config import settings
from aurascan.core.scoring_config import get_scoring_value
from aurascan.schemas.assessment import (
    RECOMMENDATIONS,
    ComprehensiveAssessment,
    EmotionAnalysis,
    ResumeAnalysis,
    VoiceAnalysis,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RESUME_SCORE = 50.0
DEFAULT_CONFIDENCE = 0.7
DEFAULT_MOOD_SCORE = 70.0
DEFAULT_TRUSTWORTHINESS = 70.0
DEFAULT_TRUST_SCORE = 70.0
DEFAULT_RISK_SCORE = 30.0
FALLBACK_RECOMMENDATION = "REVIEW"

SIMULATED_TRANSCRIPT = (
    "I am excited about this opportunity and look forward to contributing to your team."
)


class AnalysisError(RuntimeError):
    def __init__(self, message: str, *, kind: str):
        super().__init__(message)
        self.kind = kind


def clamp_score(value: Any, low: float, high: float, default: float) -> float:
    """Force value into [low, high]; non-numeric or missing values become default."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        # Integers too large for a float still carry a sign.
        return high if value > 0 else low
    if math.isnan(number):
        return default
    return max(low, min(high, number))


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _text_list(value: Any, limit: int, default: list[str]) -> list[str]:
    if not isinstance(value, list):
        return list(default)
    items = [str(item).strip() for item in value if item is not None and str(item).strip()]
    return items[:limit]


def _recommendation(value: Any) -> str:
    if isinstance(value, str) and value in RECOMMENDATIONS:
        return value
    return FALLBACK_RECOMMENDATION


async def _bounded(call: Awaitable[T], timeout_s: float | None) -> T:
    return await asyncio.wait_for(call, timeout=timeout_s or settings.analysis_timeout_s)


def normalize_resume_payload(result: dict[str, Any]) -> ResumeAnalysis:
    max_strengths = int(get_scoring_value("resume.max_strengths", 5))
    max_weaknesses = int(get_scoring_value("resume.max_weaknesses", 3))
    return ResumeAnalysis(
        skills_score=clamp_score(result.get("skillsScore"), 0, 100, DEFAULT_RESUME_SCORE),
        experience_score=clamp_score(result.get("experienceScore"), 0, 100, DEFAULT_RESUME_SCORE),
        qualifications_score=clamp_score(result.get("qualificationsScore"), 0, 100, DEFAULT_RESUME_SCORE),
        overall_score=clamp_score(result.get("overallScore"), 0, 100, DEFAULT_RESUME_SCORE),
        strengths=_text_list(result.get("strengths"), min(max_strengths, 5), ["Professional background"]),
        weaknesses=_text_list(result.get("weaknesses"), min(max_weaknesses, 3), ["Areas for growth"]),
        summary=_text(result.get("summary"), "Professional candidate with relevant background."),
    )


def normalize_emotion_payload(result: dict[str, Any]) -> EmotionAnalysis:
    return EmotionAnalysis(
        emotion=_text(result.get("emotion"), "neutral"),
        confidence=clamp_score(result.get("confidence"), 0, 1, DEFAULT_CONFIDENCE),
        mood_score=clamp_score(result.get("moodScore"), 0, 100, DEFAULT_MOOD_SCORE),
        description=_text(result.get("description"), "Professional appearance with neutral demeanor."),
    )


def normalize_voice_payload(result: dict[str, Any], source: str | None = None) -> VoiceAnalysis:
    return VoiceAnalysis(
        emotion=_text(result.get("emotion"), "neutral"),
        confidence=clamp_score(result.get("confidence"), 0, 1, DEFAULT_CONFIDENCE),
        tone=_text(result.get("tone"), "professional"),
        trustworthiness=clamp_score(result.get("trustworthiness"), 0, 100, DEFAULT_TRUSTWORTHINESS),
        source=source,
    )


def normalize_assessment_payload(result: dict[str, Any], emotion: EmotionAnalysis) -> ComprehensiveAssessment:
    # Mood falls back to the image analysis, not to a fixed constant.
    return ComprehensiveAssessment(
        mood_score=clamp_score(result.get("moodScore"), 0, 100, emotion.mood_score),
        mood_text=_text(result.get("moodText"), emotion.emotion),
        trust_score=clamp_score(result.get("trustScore"), 0, 100, DEFAULT_TRUST_SCORE),
        risk_score=clamp_score(result.get("riskScore"), 0, 100, DEFAULT_RISK_SCORE),
        recommendation=_recommendation(result.get("recommendation")),
        reason=_text(result.get("reason"), "Comprehensive assessment completed based on available data."),
    )


def _ensure_object(result: Any, kind: str) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise TypeError(f"{kind} provider returned {type(result).__name__}, expected an object")
    return result


async def analyze_resume(
    provider: ScoringProvider,
    resume_text: str,
    position: str,
    experience: str,
    *,
    timeout_s: float | None = None,
) -> ResumeAnalysis:
    try:
        result = await _bounded(provider.score_resume(resume_text, position, experience), timeout_s)
        return normalize_resume_payload(_ensure_object(result, "resume"))
    except Exception as exc:
        logger.warning("resume_analysis_failed resume_chars=%s: %r", len(resume_text), exc)
        raise AnalysisError("Failed to analyze resume with AI", kind="resume") from exc


async def analyze_image(
    provider: ScoringProvider,
    image_base64: str,
    mime_type: str = "image/jpeg",
    *,
    timeout_s: float | None = None,
) -> EmotionAnalysis:
    try:
        result = await _bounded(provider.score_image(image_base64, mime_type), timeout_s)
        return normalize_emotion_payload(_ensure_object(result, "image"))
    except Exception as exc:
        logger.warning("image_analysis_failed mime=%s b64_chars=%s: %r", mime_type, len(image_base64), exc)
        raise AnalysisError("Failed to analyze image with AI", kind="image") from exc


async def analyze_voice(
    provider: ScoringProvider,
    transcript: str,
    source: str | None = None,
    *,
    timeout_s: float | None = None,
) -> VoiceAnalysis:
    try:
        result = await _bounded(provider.score_voice(transcript), timeout_s)
        return normalize_voice_payload(_ensure_object(result, "voice"), source=source)
    except Exception as exc:
        logger.warning("voice_analysis_failed source=%s transcript_chars=%s: %r", source, len(transcript), exc)
        raise AnalysisError("Failed to analyze voice with AI", kind="voice") from exc


async def transcribe_audio(
    provider: ScoringProvider,
    content: bytes,
    filename: str,
    *,
    timeout_s: float | None = None,
) -> str:
    try:
        return await _bounded(provider.transcribe(content, filename), timeout_s)
    except Exception as exc:
        logger.warning("voice_transcription_failed file=%s bytes=%s: %r", filename, len(content), exc)
        raise AnalysisError("Failed to analyze voice with AI", kind="voice") from exc


async def generate_comprehensive_assessment(
    provider: ScoringProvider,
    resume: ResumeAnalysis,
    emotion: EmotionAnalysis,
    voice: VoiceAnalysis | None,
    candidate_name: str,
    position: str,
    *,
    timeout_s: float | None = None,
) -> ComprehensiveAssessment:
    try:
        result = await _bounded(
            provider.score_candidate(resume, emotion, voice, candidate_name, position),
            timeout_s,
        )
        return normalize_assessment_payload(_ensure_object(result, "assessment"), emotion)
    except Exception as exc:
        logger.warning("comprehensive_assessment_failed has_voice=%s: %r", voice is not None, exc)
        raise AnalysisError("Failed to generate comprehensive assessment", kind="assessment") from exc
