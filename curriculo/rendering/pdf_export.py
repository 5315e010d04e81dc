"""
PDF export of a paginated Document.

Each page is rendered on its own in a fresh browser context at A4 pixel
size, left to settle, and printed as a single PDF page. The per-page
PDFs are merged in order into one file.
"""

import asyncio
import re
from io import BytesIO
from typing import List, Optional

from PyPDF2 import PdfReader, PdfWriter

from curriculo.common.config import Config
from curriculo.common.error_handling import ExportInProgressError
from curriculo.common.logger import get_run_logger
from curriculo.common.types import ResumeData
from curriculo.pagination.paginator import Paginator
from curriculo.pagination.types import A4, PageData, PageGeometry
from curriculo.rendering.browser import BrowserProvider
from curriculo.rendering.preview import render_page_html

DEFAULT_FILENAME = "curriculo.pdf"


def export_filename(document: ResumeData) -> str:
    """
    Download name for a Document: the person's name with whitespace
    replaced by underscores, or "curriculo.pdf" when there is no name.

    Example:
        >>> export_filename(ResumeData(personal_info={"name": "Ana Maria Silva"}))
        "Ana_Maria_Silva.pdf"
    """
    cleaned = re.sub(r"\s", "_", document.personal_info.name or "")
    if not cleaned:
        return DEFAULT_FILENAME
    return f"{cleaned}.pdf"


def merge_pdf_pages(page_pdfs: List[bytes]) -> bytes:
    """Concatenate single-page PDFs into one document."""
    writer = PdfWriter()
    for pdf_bytes in page_pdfs:
        for page in PdfReader(BytesIO(pdf_bytes)).pages:
            writer.add_page(page)
    output = BytesIO()
    writer.write(output)
    return output.getvalue()


class PdfExporter:
    """
    Renders paginated pages to a multi-page A4 PDF.

    Only one export runs at a time per exporter; a second request while
    one is in progress raises ExportInProgressError.
    """

    def __init__(
        self,
        browsers: BrowserProvider,
        paginator: Paginator,
        geometry: PageGeometry = A4,
        settle_ms: Optional[int] = None,
    ):
        self.browsers = browsers
        self.paginator = paginator
        self.geometry = geometry
        self.settle_ms = Config.EXPORT_SETTLE_MS if settle_ms is None else settle_ms
        self._processing = False
        self._export_count = 0

    @property
    def is_processing(self) -> bool:
        return self._processing

    async def export(self, document: ResumeData, pages: Optional[List[PageData]] = None) -> bytes:
        """
        Produce the PDF for a Document.

        Args:
            document: Document to export
            pages: Pre-computed pages; paginated here when omitted

        Returns:
            PDF bytes with one A4 page per PageData

        Raises:
            ExportInProgressError: If another export is running
        """
        if self._processing:
            raise ExportInProgressError()
        self._processing = True
        self._export_count += 1
        run_label = f"export-{self._export_count}"

        log = get_run_logger(__name__, run_label, component="export")
        try:
            if pages is None:
                pages = await self.paginator.paginate(document, run_id=run_label, demo_mode=False)
            log.info(f"Exporting {len(pages)} page(s)")

            page_pdfs = await self._render_pages(pages)
            pdf_bytes = merge_pdf_pages(page_pdfs)
            log.info(f"Export complete ({len(pdf_bytes)} bytes)")
            return pdf_bytes
        finally:
            self._processing = False

    async def _render_pages(self, pages: List[PageData]) -> List[bytes]:
        browser = await self.browsers.get_browser()
        context = await browser.new_context(
            viewport={"width": self.geometry.page_width, "height": self.geometry.page_height},
        )
        try:
            page = await context.new_page()
            page_pdfs = []
            for index, page_data in enumerate(pages):
                html = render_page_html(page_data, is_first_page=index == 0, demo_mode=False)
                await page.set_content(html, wait_until="load")
                # Let fonts and images settle before printing
                await asyncio.sleep(self.settle_ms / 1000)
                page_pdfs.append(await page.pdf(
                    width=f"{self.geometry.page_width}px",
                    height=f"{self.geometry.page_height}px",
                    print_background=True,
                    margin={"top": "0px", "right": "0px", "bottom": "0px", "left": "0px"},
                    page_ranges="1",
                ))
            return page_pdfs
        finally:
            await context.close()
