from __future__ import annotations

import asyncio
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Sequence

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from aurascan.ai.types import ScoringProvider
from aurascan.core.assessment_store import AssessmentStore
from aurascan.parsing.pdf import extract_pdf_text
from aurascan.schemas.assessment import (
    CandidateSubmission,
    NewAssessment,
    StoredAssessment,
    VoiceAnalysis,
)
from aurascan.services.analyzers import (
    SIMULATED_TRANSCRIPT,
    analyze_image,
    analyze_resume,
    analyze_voice,
    generate_comprehensive_assessment,
    normalize_voice_payload,
    transcribe_audio,
)
from aurascan.services.file_security import (
    check_upload_size,
    validate_audio_upload,
    validate_image_upload,
    validate_resume_upload,
)

logger = logging.getLogger(__name__)

FIELD_MESSAGES = {
    "full_name": "Full name is required",
    "email": "Valid email is required",
    "position": "Position is required",
    "experience": "Experience level is required",
    "evaluation_type": "Evaluation type must be one of: mood, trust, risk, final, comprehensive",
}


class InvalidSubmissionError(ValueError):
    pass


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str | None
    content: bytes


def validate_submission(fields: dict[str, Any]) -> CandidateSubmission:
    try:
        return CandidateSubmission.model_validate(fields)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else ""
        for name, message in FIELD_MESSAGES.items():
            if field in {name, to_camel(name)}:
                raise InvalidSubmissionError(message) from exc
        raise InvalidSubmissionError(str(first.get("msg") or "Invalid submission")) from exc


def parse_voice_sentiment(raw: str | None) -> VoiceAnalysis | None:
    """Normalise a client-supplied voice sentiment JSON string, if any."""
    if raw is None or not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidSubmissionError("voiceSentiment must be valid JSON") from exc
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise InvalidSubmissionError("voiceSentiment must be a JSON object")
    return normalize_voice_payload(payload, source="client")


def check_uploads(
    *,
    resume: UploadedFile,
    image: UploadedFile,
    audio: UploadedFile | None,
    max_upload_bytes: int,
) -> str:
    """Reject bad uploads before any analysis call. Returns the detected image MIME type."""
    try:
        check_upload_size(label="Resume", content=resume.content, max_bytes=max_upload_bytes)
        validate_resume_upload(content_type=resume.content_type, content=resume.content)
        check_upload_size(label="Image", content=image.content, max_bytes=max_upload_bytes)
        image_mime = validate_image_upload(content_type=image.content_type, content=image.content)
        if audio is not None:
            check_upload_size(label="Audio", content=audio.content, max_bytes=max_upload_bytes)
            validate_audio_upload(content_type=audio.content_type, content=audio.content)
    except ValueError as exc:
        raise InvalidSubmissionError(str(exc)) from exc
    return image_mime


async def _gather_all(calls: Sequence[Awaitable[Any]]) -> list[Any]:
    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def _voice_analysis(
    provider: ScoringProvider,
    audio: UploadedFile | None,
    client_voice: VoiceAnalysis | None,
    mode: str,
) -> VoiceAnalysis | None:
    if audio is None or mode == "disabled":
        return client_voice
    if mode == "transcribe":
        transcript = await transcribe_audio(provider, audio.content, audio.filename)
        return await analyze_voice(provider, transcript, source="transcribed")
    return await analyze_voice(provider, SIMULATED_TRANSCRIPT, source="simulated")


async def run_assessment(
    *,
    provider: ScoringProvider,
    store: AssessmentStore,
    submission: CandidateSubmission,
    resume: UploadedFile,
    image: UploadedFile,
    audio: UploadedFile | None = None,
    voice_sentiment: str | None = None,
    voice_mode: str = "transcribe",
    max_upload_bytes: int = 10 * 1024 * 1024,
) -> StoredAssessment:
    image_mime = check_uploads(resume=resume, image=image, audio=audio, max_upload_bytes=max_upload_bytes)
    client_voice = parse_voice_sentiment(voice_sentiment)

    resume_text = await asyncio.to_thread(extract_pdf_text, resume.content)
    image_base64 = base64.b64encode(image.content).decode("ascii")

    logger.info(
        "assessment_started position=%s evaluation_type=%s has_audio=%s has_client_voice=%s",
        submission.position,
        submission.evaluation_type,
        audio is not None,
        client_voice is not None,
    )
    resume_analysis, emotion_analysis, voice_analysis = await _gather_all(
        [
            analyze_resume(provider, resume_text, submission.position, submission.experience),
            analyze_image(provider, image_base64, image_mime),
            _voice_analysis(provider, audio, client_voice, voice_mode),
        ]
    )

    verdict = await generate_comprehensive_assessment(
        provider,
        resume_analysis,
        emotion_analysis,
        voice_analysis,
        submission.full_name,
        submission.position,
    )

    record = NewAssessment(
        **submission.model_dump(),
        resume_filename=resume.filename,
        image_filename=image.filename,
        audio_filename=audio.filename if audio is not None else None,
        resume_content=resume_text,
        emotion_data=emotion_analysis.model_dump_json(by_alias=True),
        voice_sentiment=(
            voice_analysis.model_dump_json(by_alias=True, exclude_none=True) if voice_analysis else None
        ),
        **verdict.model_dump(),
    )
    stored = store.create(record)
    logger.info(
        "assessment_completed id=%s recommendation=%s has_voice=%s",
        stored.id,
        stored.recommendation,
        voice_analysis is not None,
    )
    return stored
