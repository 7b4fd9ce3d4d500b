from __future__ import annotations

import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from jdmatch.core.errors import DocumentExtractionError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("pdf", "docx", "txt")


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def unsupported_file_type(extension: str) -> DocumentExtractionError:
    return DocumentExtractionError(
        f"Unsupported file type '.{extension}'. Supported types: .pdf, .docx, .txt",
        code="unsupported_file_type",
    )


def _parse_txt(content: bytes) -> tuple[str, list[str]]:
    return content.decode("utf-8", errors="replace"), []


def _parse_pdf(content: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []

    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
            else:
                warnings.append(f"Page {index} has no extractable text.")
    except Exception as exc:
        raise DocumentExtractionError(f"PDF parsing failed: {exc}", code="unparseable_document") from exc
    return "\n".join(text_parts), warnings


def _parse_docx(content: bytes) -> tuple[str, list[str]]:
    try:
        document = Document(BytesIO(content))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    except Exception as exc:
        raise DocumentExtractionError(f"DOCX parsing failed: {exc}", code="unparseable_document") from exc
    return "\n".join(paragraphs), []


def extract_resume_text(content: bytes, filename: str) -> str:
    """Return the plain text of an uploaded resume (.pdf, .docx or .txt)."""
    extension = file_extension(filename)
    if extension == "txt":
        text, warnings = _parse_txt(content)
    elif extension == "pdf":
        text, warnings = _parse_pdf(content)
    elif extension == "docx":
        text, warnings = _parse_docx(content)
    else:
        raise unsupported_file_type(extension)

    if not text.strip():
        raise DocumentExtractionError("No extractable text found in the resume.", code="empty_document")
    if warnings:
        logger.info("document_parse_warnings file=%s warnings=%s", filename, warnings)
    return text
