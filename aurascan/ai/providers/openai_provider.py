from __future__ import annotations

import json
import logging
import os
import time
from io import BytesIO
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI

from aurascan.ai.prompts import (
    build_assessment_messages,
    build_image_messages,
    build_resume_messages,
    build_voice_messages,
)
from aurascan.ai.types import ChatMessage, messages_payload
from aurascan.core.scoring_config import get_scoring_value
from aurascan.schemas.assessment import EmotionAnalysis, ResumeAnalysis, VoiceAnalysis

logger = logging.getLogger(__name__)


class ProviderResponseError(RuntimeError):
    pass


class OpenAIScoringProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        transcribe_model: str = "whisper-1",
    ):
        self._model = model
        self._transcribe_model = transcribe_model
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def _complete_json(self, messages: Sequence[ChatMessage], *, kind: str) -> dict[str, Any]:
        started = time.perf_counter()
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages_payload(messages),
            temperature=float(get_scoring_value(f"analysis.{kind}.temperature", 0.3)),
            max_tokens=int(get_scoring_value(f"analysis.{kind}.max_tokens", 800)),
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else ""
        latency_ms = int((time.perf_counter() - started) * 1000)
        if not content:
            raise ProviderResponseError(f"Empty {kind} response from model")

        parsed = json.loads(content)
        if not isinstance(parsed, dict):
            raise ProviderResponseError(f"Expected a JSON object for {kind} analysis")
        logger.info("llm_json_completed kind=%s model=%s latency_ms=%s", kind, self._model, latency_ms)
        return parsed

    async def score_resume(self, resume_text: str, position: str, experience: str) -> dict[str, Any]:
        return await self._complete_json(
            build_resume_messages(resume_text, position, experience),
            kind="resume",
        )

    async def score_image(self, image_base64: str, mime_type: str) -> dict[str, Any]:
        return await self._complete_json(build_image_messages(image_base64, mime_type), kind="image")

    async def score_voice(self, transcript: str) -> dict[str, Any]:
        return await self._complete_json(build_voice_messages(transcript), kind="voice")

    async def score_candidate(
        self,
        resume: ResumeAnalysis,
        emotion: EmotionAnalysis,
        voice: VoiceAnalysis | None,
        candidate_name: str,
        position: str,
    ) -> dict[str, Any]:
        return await self._complete_json(
            build_assessment_messages(resume, emotion, voice, candidate_name, position),
            kind="assessment",
        )

    async def transcribe(self, content: bytes, filename: str) -> str:
        file_obj = BytesIO(content)
        file_obj.name = filename
        response = await self._client.audio.transcriptions.create(
            model=self._transcribe_model,
            file=file_obj,
        )
        text = getattr(response, "text", None)
        if not text:
            raise ProviderResponseError("Empty transcription response")
        return str(text).strip()
