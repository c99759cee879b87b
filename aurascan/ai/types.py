from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Protocol, Sequence

if TYPE_CHECKING:
    from aurascan.schemas.assessment import EmotionAnalysis, ResumeAnalysis, VoiceAnalysis


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str
    image_url: str | None = None


class ScoringProvider(Protocol):
    """One raw-JSON scoring call per analysis kind.

    Implementations return the decoded JSON object as-is; bounding and
    defaulting of the values is done by the analyzers.
    """

    async def score_resume(self, resume_text: str, position: str, experience: str) -> dict[str, Any]: ...

    async def score_image(self, image_base64: str, mime_type: str) -> dict[str, Any]: ...

    async def score_voice(self, transcript: str) -> dict[str, Any]: ...

    async def score_candidate(
        self,
        resume: ResumeAnalysis,
        emotion: EmotionAnalysis,
        voice: VoiceAnalysis | None,
        candidate_name: str,
        position: str,
    ) -> dict[str, Any]: ...

    async def transcribe(self, content: bytes, filename: str) -> str: ...


def messages_payload(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    payload: list[dict[str, Any]] = []
    for message in messages:
        if message.image_url:
            payload.append(
                {
                    "role": message.role,
                    "content": [
                        {"type": "text", "text": message.content},
                        {"type": "image_url", "image_url": {"url": message.image_url}},
                    ],
                }
            )
        else:
            payload.append({"role": message.role, "content": message.content})
    return payload
