import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    transcribe_model: str
    timeout_s: float
    max_retries: int


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o").strip()
    transcribe_model = (os.getenv("OPENAI_TRANSCRIBE_MODEL") or "whisper-1").strip()
    timeout_s = float(os.getenv("OPENAI_TIMEOUT_S", "30"))
    max_retries = int(os.getenv("OPENAI_MAX_RETRIES", "2"))
    return AIConfig(
        provider=provider,
        model=model,
        transcribe_model=transcribe_model,
        timeout_s=timeout_s,
        max_retries=max_retries,
    )
