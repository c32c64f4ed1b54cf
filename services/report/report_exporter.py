"""PDF export of a rendered report.

The rendered surface is placed on one A4 portrait page, scaled to fit the
space below a 10 mm top offset and centred horizontally.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from fpdf import FPDF
from PIL import Image

from services.report.report_renderer import ReportRenderer
from services.report.report_session import ReportSession

LOGGER = logging.getLogger(__name__)


class ReportExportError(RuntimeError):
    """Raised when the report cannot be captured or written as a PDF."""


@dataclass(frozen=True)
class Placement:
    """Position and size of the surface on the page, in millimetres."""

    x: float
    y: float
    width: float
    height: float


class ReportExporter:
    """Assemble a rendered report surface into PDF bytes."""

    PAGE_FORMAT = "A4"
    TOP_OFFSET_MM = 10.0

    def __init__(self) -> None:
        probe = FPDF(orientation="P", unit="mm", format=self.PAGE_FORMAT)
        self.page_width = probe.w
        self.page_height = probe.h

    def place(self, surface_width: int, surface_height: int) -> Placement:
        """Return where a surface of the given pixel size lands on the page."""
        if surface_width <= 0 or surface_height <= 0:
            raise ReportExportError("Rendered report is empty.")
        usable_height = self.page_height - self.TOP_OFFSET_MM
        ratio = min(self.page_width / surface_width, usable_height / surface_height)
        width = surface_width * ratio
        height = surface_height * ratio
        return Placement(x=(self.page_width - width) / 2, y=self.TOP_OFFSET_MM, width=width, height=height)

    def export(self, surface: Image.Image) -> bytes:
        """Return a one-page PDF containing `surface`.

        Raises:
            ReportExportError: If the surface is empty or the PDF cannot be written.
        """
        placement = self.place(surface.width, surface.height)
        try:
            pdf = FPDF(orientation="P", unit="mm", format=self.PAGE_FORMAT)
            pdf.set_auto_page_break(False)
            pdf.add_page()
            pdf.image(surface, x=placement.x, y=placement.y, w=placement.width, h=placement.height)
            return bytes(pdf.output())
        except Exception as exc:
            raise ReportExportError(f"Failed to write PDF report: {exc}") from exc


def report_filename() -> str:
    """Return the download filename for a report exported now."""
    return f"plant-disease-report-{int(time.time() * 1000)}.pdf"


async def export_session(session: ReportSession, renderer: ReportRenderer, exporter: ReportExporter) -> bytes:
    """Render and export the report currently held by `session`.

    The session is read once; a re-analysis that completes while the export
    runs does not change the exported content.

    Raises:
        ReportExportError: If rendering or PDF generation fails.
    """
    state = session.state
    try:
        surface = await asyncio.to_thread(renderer.render, state)
    except Exception as exc:
        LOGGER.error("Report capture failed: %s", exc)
        raise ReportExportError(f"Failed to capture report: {exc}") from exc
    return await asyncio.to_thread(exporter.export, surface)
