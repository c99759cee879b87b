from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from aurascan.ai.factory import get_scoring_provider
from aurascan.ai.types import ScoringProvider
from aurascan.core.assessment_store import AssessmentStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> AssessmentStore:
    return request.app.state.store


def get_provider(request: Request) -> ScoringProvider:
    provider = getattr(request.app.state, "scoring_provider", None)
    if provider is not None:
        return provider
    try:
        provider = get_scoring_provider()
    except (RuntimeError, ValueError) as exc:
        logger.error("scoring_provider_unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI analysis is not configured on this server.",
        ) from exc
    request.app.state.scoring_provider = provider
    return provider
