"""Rasterize a held report into a single image.

Public class: `ReportRenderer`

Example:
    surface = ReportRenderer().render(session.state)
    pdf_bytes = ReportExporter().export(surface)

The canvas is a fixed width; its height grows with the amount of text. The
default Pillow font only covers Latin script, so set `font_path` to a
TrueType font with the needed glyphs for Indic report languages.
"""
from __future__ import annotations

import io
import logging
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from models.languages import get_language
from services.report.report_session import ReportState

LOGGER = logging.getLogger(__name__)

SEVERITY_LEVELS = {"low": 25, "moderate": 50, "high": 75, "critical": 100}
SEVERITY_COLORS = {
    "low": (34, 139, 84),
    "moderate": (217, 140, 28),
    "high": (200, 50, 50),
    "critical": (160, 20, 20),
}
SECTIONS: Tuple[Tuple[str, str], ...] = (
    ("Symptoms", "symptoms"),
    ("Causes", "causes"),
    ("Treatment", "treatment"),
    ("Prevention", "prevention"),
    ("Affected Parts", "affected_parts"),
)

TEXT_COLOR = (33, 37, 41)
MUTED_COLOR = (108, 117, 125)
TRACK_COLOR = (226, 230, 234)
CONFIDENCE_COLOR = (34, 139, 84)


class ReportRenderer:
    """Draw the report for a `ReportState` onto a white RGB canvas.

    Args:
        width: Canvas width in pixels.
        font_path: Optional TrueType font file; the Pillow default font is used otherwise.
        max_image_height: Upper bound for the embedded plant photo.
    """

    def __init__(self, width: int = 1200, font_path: Optional[str] = None, max_image_height: int = 480):
        self.width = width
        self.margin = 48
        self.max_image_height = max_image_height
        self.font_path = font_path
        self.title_font = self._font(40)
        self.heading_font = self._font(28)
        self.body_font = self._font(22)

    def _font(self, size: int):
        if self.font_path:
            return ImageFont.truetype(self.font_path, size)
        return ImageFont.load_default(size=size)

    @property
    def content_width(self) -> int:
        return self.width - 2 * self.margin

    def render(self, state: ReportState) -> Image.Image:
        """Return the rasterized report for `state`.

        Raises:
            ValueError: If the held image bytes cannot be decoded.
        """
        if self.font_path is None and state.language != "en":
            LOGGER.warning(
                "Rendering a %s report without REPORT_FONT_PATH; non-Latin text will show as missing glyphs.",
                state.language,
            )
        photo = self._load_photo(state.image.data)
        ops, height = self._layout(state, photo)

        canvas = Image.new("RGB", (self.width, height), (255, 255, 255))
        draw = ImageDraw.Draw(canvas)
        for op in ops:
            kind = op[0]
            if kind == "image":
                _, y, img = op
                canvas.paste(img, (self.margin + (self.content_width - img.width) // 2, y))
            elif kind == "text":
                _, y, text, font, fill = op
                draw.text((self.margin, y), text, font=font, fill=fill)
            elif kind == "bar":
                _, y, fraction, color = op
                self._draw_bar(draw, y, fraction, color)
        return canvas

    def _load_photo(self, data: bytes) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as src:
                photo = src.convert("RGB")
        except Exception as exc:
            raise ValueError("Source image is not a supported image format") from exc
        photo.thumbnail((self.content_width, self.max_image_height), Image.LANCZOS)
        return photo

    def _layout(self, state: ReportState, photo: Image.Image) -> Tuple[List[tuple], int]:
        """Compute draw operations top to bottom and the resulting canvas height."""
        record = state.record
        language = get_language(state.language)
        ops: List[tuple] = []
        y = self.margin

        ops.append(("image", y, photo))
        y += photo.height + 32

        y = self._add_lines(ops, y, [record.disease_name], self.title_font, TEXT_COLOR)
        y = self._add_lines(ops, y, [record.scientific_name], self.body_font, MUTED_COLOR)
        y = self._add_lines(
            ops, y, [f"Report language: {language.native_name} ({language.name})"], self.body_font, MUTED_COLOR
        )
        y += 16

        y = self._add_lines(ops, y, [f"Confidence: {record.confidence}%"], self.heading_font, TEXT_COLOR)
        ops.append(("bar", y, record.confidence / 100.0, CONFIDENCE_COLOR))
        y += 36

        y = self._add_lines(ops, y, [f"Severity: {record.severity}"], self.heading_font, TEXT_COLOR)
        ops.append(("bar", y, SEVERITY_LEVELS[record.severity] / 100.0, SEVERITY_COLORS[record.severity]))
        y += 36

        y = self._add_lines(ops, y, [f"Spread rate: {record.spread_rate}"], self.heading_font, TEXT_COLOR)
        y += 16

        y = self._add_lines(ops, y, ["Description"], self.heading_font, TEXT_COLOR)
        y = self._add_lines(ops, y, self._wrap(record.description, self.body_font), self.body_font, TEXT_COLOR)
        y += 16

        for title, field in SECTIONS:
            items: Sequence[str] = getattr(record, field)
            y = self._add_lines(ops, y, [title], self.heading_font, TEXT_COLOR)
            for item in items:
                y = self._add_lines(ops, y, self._wrap(f"- {item}", self.body_font), self.body_font, TEXT_COLOR)
            y += 16

        return ops, y + self.margin

    def _add_lines(self, ops: List[tuple], y: int, lines: Sequence[str], font, fill) -> int:
        line_height = self._line_height(font)
        for line in lines:
            ops.append(("text", y, line, font, fill))
            y += line_height
        return y

    @staticmethod
    def _line_height(font) -> int:
        left, top, right, bottom = font.getbbox("Ag")
        return int((bottom - top) * 1.5) + 2

    def _wrap(self, text: str, font) -> List[str]:
        """Greedy word wrap to the content width."""
        lines: List[str] = []
        for paragraph in text.splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}".strip()
                if current and font.getlength(candidate) > self.content_width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def _draw_bar(self, draw: ImageDraw.ImageDraw, y: int, fraction: float, color) -> None:
        x0, x1 = self.margin, self.margin + self.content_width
        draw.rectangle((x0, y, x1, y + 16), fill=TRACK_COLOR)
        filled = x0 + int((x1 - x0) * max(0.0, min(fraction, 1.0)))
        if filled > x0:
            draw.rectangle((x0, y, filled, y + 16), fill=color)
