from __future__ import annotations

from typing import Any

PDF_MAGIC = b"%PDF-"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
GIF_MAGICS = (b"GIF87a", b"GIF89a")
BMP_MAGIC = b"BM"
RIFF_MAGIC = b"RIFF"
WEBP_MAGIC = b"WEBP"
WAVE_MAGIC = b"WAVE"
EBML_MAGIC = b"\x1a\x45\xdf\xa3"
OGG_MAGIC = b"OggS"
FLAC_MAGIC = b"fLaC"
ID3_MAGIC = b"ID3"

IMAGE_EXTENSION_HINTS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/bmp": "bmp",
}


class UploadRejected(ValueError):
    pass


def _safe_str(value: Any, max_len: int = 255) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    return text[:max_len]


def normalize_content_type(content_type: str | None) -> str:
    return _safe_str((content_type or "").split(";")[0], 120).lower()


def safe_filename(filename: str | None, fallback: str) -> str:
    name = _safe_str(filename, 255).replace("\\", "/").split("/")[-1]
    return name or fallback


def _looks_like_mp4_family(content: bytes) -> bool:
    return len(content) >= 12 and content[4:8] == b"ftyp"


def _looks_like_mp3_frame(content: bytes) -> bool:
    return len(content) >= 2 and content[0] == 0xFF and (content[1] & 0xE0) == 0xE0


def detect_image_type(content: bytes) -> str | None:
    if content.startswith(PNG_MAGIC):
        return "image/png"
    if content.startswith(JPEG_MAGIC):
        return "image/jpeg"
    if any(content.startswith(magic) for magic in GIF_MAGICS):
        return "image/gif"
    if len(content) >= 12 and content.startswith(RIFF_MAGIC) and content[8:12] == WEBP_MAGIC:
        return "image/webp"
    if content.startswith(BMP_MAGIC):
        return "image/bmp"
    return None


def _is_audio_payload(content: bytes) -> bool:
    if content.startswith(EBML_MAGIC) or content.startswith(OGG_MAGIC) or content.startswith(FLAC_MAGIC):
        return True
    if content.startswith(ID3_MAGIC) or _looks_like_mp3_frame(content):
        return True
    if len(content) >= 12 and content.startswith(RIFF_MAGIC) and content[8:12] == WAVE_MAGIC:
        return True
    return _looks_like_mp4_family(content)


def validate_resume_upload(*, content_type: str | None, content: bytes) -> None:
    if normalize_content_type(content_type) != "application/pdf":
        raise UploadRejected("Resume must be a PDF file")
    if not content.startswith(PDF_MAGIC):
        raise UploadRejected("Resume must be a PDF file")


def validate_image_upload(*, content_type: str | None, content: bytes) -> str:
    """Check an uploaded photo and return the MIME type detected from its bytes."""
    if not normalize_content_type(content_type).startswith("image/"):
        raise UploadRejected("Image must be a valid image file")
    detected = detect_image_type(content)
    if detected is None:
        raise UploadRejected("Image must be a valid image file")
    return detected


def validate_audio_upload(*, content_type: str | None, content: bytes) -> None:
    normalized = normalize_content_type(content_type)
    if not (normalized.startswith("audio/") or "webm" in normalized):
        raise UploadRejected("Audio must be a valid audio file")
    if not _is_audio_payload(content):
        raise UploadRejected("Audio must be a valid audio file")


def check_upload_size(*, label: str, content: bytes, max_bytes: int) -> None:
    if not content:
        raise UploadRejected(f"{label} file is empty")
    if len(content) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise UploadRejected(f"{label} file must be smaller than {limit_mb:g} MB")
