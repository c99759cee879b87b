import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from aurascan.api.deps import get_store
from aurascan.core.assessment_store import AssessmentStore, StorageError
from aurascan.core.rate_limit import rate_limit
from aurascan.schemas.assessment import AppConfig, AppConfigUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/config", response_model=AppConfig)
async def get_config(store: AssessmentStore = Depends(get_store)):
    return store.get_config()


@router.post("/config", response_model=AppConfig)
@rate_limit()
async def update_config(
    request: Request,
    payload: AppConfigUpdate,
    store: AssessmentStore = Depends(get_store),
):
    changes = payload.model_dump(exclude_unset=True)
    try:
        config = store.update_config(changes)
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update configuration",
        ) from exc
    logger.info("app_config_updated fields=%s", sorted(changes))
    return config
