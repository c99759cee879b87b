from aurascan.ai.config import load_ai_config
from aurascan.ai.types import ScoringProvider

from aurascan.ai.providers.openai_provider import OpenAIScoringProvider


def get_scoring_provider() -> ScoringProvider:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIScoringProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            transcribe_model=cfg.transcribe_model,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
