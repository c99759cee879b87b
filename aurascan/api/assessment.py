import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status

from aurascan.api.deps import get_provider, get_store
from aurascan.core.assessment_store import MAX_ASSESSMENT_ID, AssessmentStore, StorageError
from aurascan.core.config import settings
from aurascan.core.rate_limit import rate_limit
from aurascan.parsing.pdf import ResumeExtractionError
from aurascan.schemas.assessment import StoredAssessment
from aurascan.services.analyzers import AnalysisError
from aurascan.services.assessment_service import (
    InvalidSubmissionError,
    UploadedFile,
    run_assessment,
    validate_submission,
)
from aurascan.services.file_security import safe_filename

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_upload(upload: UploadFile | None, fallback_name: str) -> UploadedFile | None:
    if upload is None:
        return None
    # One byte past the limit is enough to detect an oversized file.
    content = await upload.read(settings.max_upload_bytes + 1)
    return UploadedFile(
        filename=safe_filename(upload.filename, fallback_name),
        content_type=upload.content_type,
        content=content,
    )


def _parse_assessment_id(raw: str) -> int | None:
    if not raw.isascii() or not raw.isdecimal():
        return None
    assessment_id = int(raw)
    if not 0 < assessment_id <= MAX_ASSESSMENT_ID:
        return None
    return assessment_id


@router.post("/assessment", response_model=StoredAssessment)
@rate_limit(settings.assessment_rate_limit)
async def create_assessment(
    request: Request,
    full_name: str | None = Form(default=None, alias="fullName"),
    email: str | None = Form(default=None),
    position: str | None = Form(default=None),
    experience: str | None = Form(default=None),
    evaluation_type: str | None = Form(default=None, alias="evaluationType"),
    voice_sentiment: str | None = Form(default=None, alias="voiceSentiment"),
    resume: UploadFile | None = File(default=None),
    image: UploadFile | None = File(default=None),
    audio: UploadFile | None = File(default=None),
    store: AssessmentStore = Depends(get_store),
):
    uploads = [item for item in (resume, image, audio) if item is not None]
    try:
        submission = validate_submission(
            {
                "fullName": full_name,
                "email": email,
                "position": position,
                "experience": experience,
                "evaluationType": evaluation_type,
            }
        )
        if resume is None or image is None:
            raise InvalidSubmissionError("Both resume and image files are required")

        resume_file = await _read_upload(resume, "resume.pdf")
        image_file = await _read_upload(image, "photo")
        audio_file = await _read_upload(audio, "voice.webm")

        return await run_assessment(
            provider=get_provider(request),
            store=store,
            submission=submission,
            resume=resume_file,
            image=image_file,
            audio=audio_file,
            voice_sentiment=voice_sentiment,
            voice_mode=settings.voice_transcription_mode,
            max_upload_bytes=settings.max_upload_bytes,
        )
    except (InvalidSubmissionError, ResumeExtractionError) as exc:
        logger.info("assessment_rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AnalysisError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    finally:
        for upload in uploads:
            await upload.close()


@router.get("/assessment/{assessment_id}", response_model=StoredAssessment)
async def get_assessment(assessment_id: str, store: AssessmentStore = Depends(get_store)):
    record = None
    parsed_id = _parse_assessment_id(assessment_id)
    if parsed_id is not None:
        record = store.get(parsed_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")
    return record


@router.get("/assessments", response_model=list[StoredAssessment])
async def list_assessments(
    limit: int = Query(default=50, ge=1, le=200),
    store: AssessmentStore = Depends(get_store),
):
    return store.list_recent(limit)
