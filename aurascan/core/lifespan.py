from contextlib import asynccontextmanager
import logging

from aurascan.core.config import settings
from aurascan.core.scoring_config import get_scoring_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    get_scoring_config()
    logger.info(
        "aurascan_started store=%s voice_mode=%s",
        settings.assessment_store,
        settings.voice_transcription_mode,
    )
    yield
    store = getattr(app.state, "store", None)
    if store is not None:
        store.close()
    logger.info("aurascan_stopped")
