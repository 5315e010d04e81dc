"""
Pagination pipeline: measure -> extract -> pack, with a debounced scheduler.

Paginator runs one pass and never fails: any error in measurement,
extraction or packing falls back to a single page holding the whole
Document, so the caller always has something to show.

PaginationScheduler sits in front of the Paginator for interactive
editing. Submissions inside the debounce window collapse into one run,
and a run's result is only published if no newer submission has been
made since it started (last submitted wins).
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional, Set

from curriculo.common.config import Config
from curriculo.common.error_handling import PaginationError
from curriculo.common.logger import RunId, get_run_logger
from curriculo.common.types import ResumeData
from curriculo.pagination.extractor import BlockExtractor
from curriculo.pagination.packer import PagePacker
from curriculo.pagination.types import A4, PageData, PageGeometry

logger = logging.getLogger(__name__)

ResultCallback = Callable[[List[PageData]], Any]


class Paginator:
    """Turns a Document into an ordered list of pages."""

    def __init__(
        self,
        surface,
        extractor: Optional[BlockExtractor] = None,
        packer: Optional[PagePacker] = None,
        geometry: PageGeometry = A4,
    ):
        """
        Args:
            surface: Measurement surface exposing
                async measure(document, demo_mode) -> GeometrySnapshot
            extractor: Block extractor (default BlockExtractor())
            packer: Page packer (default PagePacker(geometry))
            geometry: Page dimensions
        """
        self.surface = surface
        self.extractor = extractor or BlockExtractor()
        self.geometry = geometry
        self.packer = packer or PagePacker(geometry)

    async def paginate(
        self,
        document: ResumeData,
        run_id: Optional[RunId] = None,
        demo_mode: bool = False,
    ) -> List[PageData]:
        """
        Paginate a Document.

        Args:
            document: Document to paginate
            run_id: Identifier used to tag log lines of this run
            demo_mode: Measure without empty-section placeholders

        Returns:
            Pages in order; a single whole-Document page when the content
            fits one page or when anything goes wrong
        """
        log = get_run_logger(__name__, run_id if run_id is not None else "once", component="paginate")

        try:
            snapshot = await self.surface.measure(document, demo_mode=demo_mode)

            if snapshot.scroll_height <= self.geometry.page_height:
                log.debug(f"Content fits one page (scrollHeight={snapshot.scroll_height})")
                return [PageData.from_document(document)]

            blocks = self.extractor.extract(snapshot, document)
            pages = self.packer.pack(document, blocks, snapshot.first_page_offset)
            if not pages:
                log.warning("Packing produced no pages; using single page")
                return [PageData.from_document(document)]

            log.info(f"Paginated {len(blocks)} blocks into {len(pages)} page(s)")
            return pages

        except PaginationError as e:
            log.warning(f"Pagination failed, showing single page: {e}")
            return [PageData.from_document(document)]
        except Exception as e:
            log.exception(f"Unexpected pagination error, showing single page: {e}")
            return [PageData.from_document(document)]


class PaginationScheduler:
    """
    Debounced, last-submitted-wins front end for a Paginator.

    Usage:
        scheduler = PaginationScheduler(paginator, on_result=publish)
        scheduler.submit(document)   # on every edit
        await scheduler.wait_idle()  # e.g. before shutdown
    """

    def __init__(
        self,
        paginator: Paginator,
        delay_ms: Optional[int] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        self.paginator = paginator
        self.delay_ms = Config.PAGINATION_DEBOUNCE_MS if delay_ms is None else delay_ms
        self.on_result = on_result

        self.pages: List[PageData] = []
        self.completed_run_id = 0

        self._run_counter = 0
        self._timer: Optional[asyncio.Task] = None
        self._runs: Set[asyncio.Task] = set()

    @property
    def latest_run_id(self) -> int:
        """Identifier of the most recent submission."""
        return self._run_counter

    def submit(self, document: ResumeData, demo_mode: bool = False) -> int:
        """
        Schedule a pagination pass after the debounce delay.

        A submission made while the previous one is still waiting replaces
        it. Must be called from a running event loop.

        Returns:
            The run identifier assigned to this submission
        """
        self._run_counter += 1
        run_id = self._run_counter
        self._cancel_timer()
        self._timer = asyncio.create_task(self._debounce(run_id, document, demo_mode))
        return run_id

    async def paginate_now(self, document: ResumeData, demo_mode: bool = False) -> List[PageData]:
        """Run immediately, superseding any pending or in-flight run."""
        self._run_counter += 1
        run_id = self._run_counter
        self._cancel_timer()
        pages = await self.paginator.paginate(document, run_id=run_id, demo_mode=demo_mode)
        await self._publish(run_id, pages)
        return pages

    async def wait_idle(self) -> None:
        """Wait until no run is pending or in flight."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        while self._runs:
            await asyncio.gather(*list(self._runs), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending and in-flight runs."""
        self._cancel_timer()
        for task in list(self._runs):
            task.cancel()
        if self._runs:
            await asyncio.gather(*list(self._runs), return_exceptions=True)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()

    async def _debounce(self, run_id: int, document: ResumeData, demo_mode: bool) -> None:
        await asyncio.sleep(self.delay_ms / 1000)
        # Once started, a run is never cancelled by newer submissions; its
        # result is discarded instead
        task = asyncio.create_task(self._run(run_id, document, demo_mode))
        self._runs.add(task)
        task.add_done_callback(self._run_finished)

    def _run_finished(self, task: asyncio.Task) -> None:
        self._runs.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            # Typically the result callback failing after its client went away
            logger.error(f"Pagination run failed to publish: {error!r}")

    async def _run(self, run_id: int, document: ResumeData, demo_mode: bool) -> None:
        pages = await self.paginator.paginate(document, run_id=run_id, demo_mode=demo_mode)
        await self._publish(run_id, pages)

    async def _publish(self, run_id: int, pages: List[PageData]) -> None:
        log = get_run_logger(__name__, run_id, component="scheduler")
        if run_id != self._run_counter:
            log.debug(f"Discarding result superseded by run {self._run_counter}")
            return

        self.pages = pages
        self.completed_run_id = run_id
        if self.on_result is not None:
            result = self.on_result(pages)
            if inspect.isawaitable(result):
                await result
