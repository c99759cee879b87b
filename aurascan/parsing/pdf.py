from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader

logger = logging.getLogger(__name__)


class ResumeExtractionError(ValueError):
    pass


def extract_pdf_text(content: bytes) -> str:
    """Return the plain text of a PDF held in memory.

    Pages without extractable text are skipped. Raises ResumeExtractionError
    when the bytes cannot be parsed or no page yields any text.
    """
    try:
        reader = PdfReader(BytesIO(content))
        page_count = len(reader.pages)
        page_chunks: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text.strip())
    except Exception as exc:
        logger.warning("resume_pdf_parse_failed bytes=%s: %s", len(content), exc)
        raise ResumeExtractionError("Failed to extract resume content") from exc

    text = "\n\n".join(page_chunks)
    if not text.strip():
        logger.warning("resume_pdf_empty pages=%s", page_count)
        raise ResumeExtractionError("Failed to extract resume content")

    logger.info("resume_pdf_extracted pages=%s chars=%s", page_count, len(text))
    return text
