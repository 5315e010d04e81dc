"""
Measurement Surface: renders a Document off-screen and reports its geometry.

Every measurement run gets its own browser context at the A4 pixel width,
so concurrent runs never share a layout. The full Document is rendered
unpaginated, fonts and images are awaited (bounded by a timeout), and a
single script reads back the pixel geometry the block extractor needs.
"""

import asyncio
import logging
from typing import Optional

from curriculo.common.config import Config
from curriculo.common.error_handling import ExtractionFailure, MeasurementTimeout
from curriculo.common.types import ResumeData
from curriculo.pagination.types import A4, GeometrySnapshot, PageData, PageGeometry
from curriculo.rendering.browser import BrowserProvider
from curriculo.rendering.preview import render_page_html

logger = logging.getLogger(__name__)


# Resolves once web fonts are ready and every image has loaded or failed
WAIT_FOR_ASSETS_SCRIPT = """
async () => {
    if (document.fonts && document.fonts.ready) {
        await document.fonts.ready;
    }
    const images = Array.from(document.querySelectorAll('img'));
    await Promise.all(images.map(img => img.complete ? Promise.resolve() : new Promise(resolve => {
        img.onload = resolve;
        img.onerror = resolve;
    })));
    return true;
}
"""

# Reads the geometry consumed by GeometrySnapshot.from_dict.
# Full height = offsetHeight + top margin + bottom margin.
GEOMETRY_SCRIPT = """
() => {
    const root = document.querySelector('#resume-preview');
    if (!root) {
        return null;
    }
    const marginTop = (el) => parseFloat(getComputedStyle(el).marginTop) || 0;
    const fullHeight = (el) => {
        if (!el) {
            return null;
        }
        const style = getComputedStyle(el);
        return el.offsetHeight + (parseFloat(style.marginTop) || 0) + (parseFloat(style.marginBottom) || 0);
    };

    const main = root.querySelector('main');
    const sections = main ? Array.from(main.children).map((section) => {
        const title = section.querySelector('.section-title');
        const items = Array.from(section.querySelectorAll('#resume-experience-list > .experience-item')).map((item) => ({
            marginTop: marginTop(item),
            headerHeight: fullHeight(item.querySelector(':scope > .experience-header')),
            descriptionHeight: fullHeight(item.querySelector(':scope > .experience-description')),
        }));
        return {
            id: section.id || '',
            marginTop: marginTop(section),
            offsetHeight: section.offsetHeight,
            title: title ? { fullHeight: fullHeight(title), offsetHeight: title.offsetHeight } : null,
            contentHeight: fullHeight(section.querySelector('#resume-summary')),
            items: items,
        };
    }) : [];

    return {
        scrollHeight: root.scrollHeight,
        headerHeight: fullHeight(root.querySelector('header')) || 0,
        mainMarginTop: main ? marginTop(main) : null,
        sections: sections,
    };
}
"""


class MeasurementSurface:
    """Off-screen layout surface backed by headless Chromium."""

    def __init__(
        self,
        browsers: BrowserProvider,
        geometry: PageGeometry = A4,
        timeout_ms: Optional[int] = None,
    ):
        self.browsers = browsers
        self.geometry = geometry
        self.timeout_ms = Config.MEASUREMENT_TIMEOUT_MS if timeout_ms is None else timeout_ms

    async def measure(self, document: ResumeData, demo_mode: bool = False) -> GeometrySnapshot:
        """
        Render the whole Document and read back its geometry.

        Args:
            document: Document to measure
            demo_mode: Render without empty-section placeholders

        Returns:
            GeometrySnapshot of the unpaginated render

        Raises:
            MeasurementTimeout: If content did not settle within timeout_ms
            ExtractionFailure: If the render has no preview root
        """
        html = render_page_html(
            PageData.from_document(document),
            is_first_page=True,
            demo_mode=demo_mode,
            is_measurement=True,
        )

        browser = await self.browsers.get_browser()
        context = await browser.new_context(
            viewport={"width": self.geometry.page_width, "height": self.geometry.page_height},
        )
        try:
            page = await context.new_page()
            try:
                await asyncio.wait_for(self._load(page, html), timeout=self.timeout_ms / 1000)
            except asyncio.TimeoutError:
                raise MeasurementTimeout(self.timeout_ms)

            raw = await page.evaluate(GEOMETRY_SCRIPT)
            if raw is None:
                raise ExtractionFailure("Rendered document has no preview root")

            snapshot = GeometrySnapshot.from_dict(raw)
            logger.debug(
                f"Measured scrollHeight={snapshot.scroll_height} "
                f"header={snapshot.header_height} sections={len(snapshot.sections)}"
            )
            return snapshot
        finally:
            await context.close()

    async def _load(self, page, html: str) -> None:
        await page.set_content(html, wait_until="domcontentloaded")
        await page.evaluate(WAIT_FOR_ASSETS_SCRIPT)
