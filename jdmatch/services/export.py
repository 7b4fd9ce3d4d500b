from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from jdmatch.core.config import settings

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "refined-resume.pdf"

# Standard PDF font; only covers Latin-1. EXPORT_FONT_PATH selects a TrueType font instead.
FONT_NAME = "Helvetica"
FONT_SIZE = 10
MARGIN = 20 * mm
LEADING = 5 * mm
TEXT_GRAY = (50 / 255, 50 / 255, 50 / 255)


def resolve_font(font_path: str | None = None) -> str:
    """Register the TrueType font at ``font_path`` and return its name."""
    path = settings.export_font_path if font_path is None else font_path
    if not path:
        return FONT_NAME

    name = f"Export-{Path(path).stem}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, path))
    except (OSError, TTFError) as exc:
        logger.warning("export_font_unavailable path=%s: %s", path, exc)
        return FONT_NAME
    return name


def _split_long_word(word: str, max_width: float, font_name: str) -> list[str]:
    pieces: list[str] = []
    current = ""
    for char in word:
        if current and stringWidth(current + char, font_name, FONT_SIZE) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_line(line: str, max_width: float, font_name: str = FONT_NAME) -> list[str]:
    words = line.split()
    if not words:
        return [""]

    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if stringWidth(candidate, font_name, FONT_SIZE) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        if stringWidth(word, font_name, FONT_SIZE) <= max_width:
            current = word
            continue
        *full, current = _split_long_word(word, max_width, font_name)
        lines.extend(full)
    lines.append(current)
    return lines


def layout_pages(
    text: str,
    page_size: tuple[float, float] = A4,
    font_name: str = FONT_NAME,
) -> list[list[str]]:
    """Wrap ``text`` to the printable width and split it into pages of lines."""
    width, height = page_size
    max_width = width - MARGIN * 2
    lines_per_page = max(1, int((height - MARGIN * 2) // LEADING))

    wrapped: list[str] = []
    for raw_line in text.splitlines():
        wrapped.extend(wrap_line(raw_line, max_width, font_name))

    pages = [wrapped[i : i + lines_per_page] for i in range(0, len(wrapped), lines_per_page)]
    return pages or [[]]


def render_resume_pdf(
    text: str,
    page_size: tuple[float, float] = A4,
    font_path: str | None = None,
) -> bytes:
    font_name = resolve_font(font_path)
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=page_size)
    pdf.setTitle("Refined Resume")
    _, height = page_size

    for page_lines in layout_pages(text, page_size, font_name):
        pdf.setFont(font_name, FONT_SIZE)
        pdf.setFillColorRGB(*TEXT_GRAY)
        y = height - MARGIN
        for line in page_lines:
            if line:
                pdf.drawString(MARGIN, y, line)
            y -= LEADING
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()
