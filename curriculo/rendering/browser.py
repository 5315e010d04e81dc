"""
Shared headless Chromium for measurement and PDF export.

Launching Chromium costs far more than a measurement pass, so one browser
is started lazily and kept for the life of the process. Callers open their
own context/page per run and close it when done.
"""

import asyncio
import logging
from typing import Optional

from playwright.async_api import Browser, Playwright, async_playwright

from curriculo.common.config import Config

logger = logging.getLogger(__name__)


class BrowserProvider:
    """Lazily launched, process-wide Chromium instance."""

    def __init__(self, headless: Optional[bool] = None):
        self.headless = Config.PLAYWRIGHT_HEADLESS if headless is None else headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def get_browser(self) -> Browser:
        """Return the shared browser, launching it on first use."""
        async with self._lock:
            if self.is_running:
                return self._browser

            if self._playwright is None:
                self._playwright = await async_playwright().start()

            logger.info(f"Launching Chromium (headless={self.headless})")
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            return self._browser

    async def close(self) -> None:
        """Shut down the browser and the Playwright driver."""
        async with self._lock:
            if self._browser is not None:
                try:
                    await self._browser.close()
                except Exception as e:
                    logger.warning(f"Error closing browser: {e}")
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
            logger.info("Chromium shut down")
