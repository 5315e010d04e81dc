"""
Page Packer: greedy single-pass flow of measured blocks into A4 pages.

Algorithm (no backtracking):
- Title look-ahead: a section title starts a new page when it would not fit
  together with the start of its first content block.
- A block that fits is appended whole.
- A splittable block that does not fit is cut when at least
  min_split_height pixels remain; the two halves carry continuation
  metadata ({offset, totalHeight, visibleHeight?}).
- Anything else moves wholly to a new page.

personalInfo belongs to page 1 only; style is copied onto every page.
A block taller than a whole page is split once, so its tail may overflow
the continuation page.
"""

import logging
from typing import List, Optional

from curriculo.common.types import ResumeData
from curriculo.pagination.types import (
    A4,
    Block,
    ContinuationInfo,
    PageData,
    PageGeometry,
)

logger = logging.getLogger(__name__)


class PagePacker:
    """Packs an ordered block sequence into PageData pages."""

    def __init__(self, geometry: PageGeometry = A4):
        self.geometry = geometry

    def pack(
        self,
        document: ResumeData,
        blocks: List[Block],
        first_page_offset: float,
    ) -> List[PageData]:
        """
        Distribute blocks over pages.

        Args:
            document: Source Document (for page 1 seed and style)
            blocks: Blocks in Document order
            first_page_offset: Height used on page 1 by the header block and
                the content container's top margin

        Returns:
            Non-empty pages in order
        """
        return _PackingRun(self.geometry, document).run(blocks, first_page_offset)


class _PackingRun:
    """Mutable state of one packing pass."""

    def __init__(self, geometry: PageGeometry, document: ResumeData):
        self.geometry = geometry
        self.limit = geometry.content_height_limit
        self.document = document
        self.pages: List[PageData] = []
        self.current_page = PageData(personal_info=document.personal_info, style=document.style)
        self.current_height = 0.0

    def run(self, blocks: List[Block], first_page_offset: float) -> List[PageData]:
        self.current_height = first_page_offset

        for index, block in enumerate(blocks):
            next_block = blocks[index + 1] if index + 1 < len(blocks) else None
            self._place(block, next_block)

        if self.current_page.populated_fields() != ["style"]:
            self.pages.append(self.current_page)

        pages = [page for page in self.pages if page.has_content()]
        dropped = len(self.pages) - len(pages)
        if dropped:
            logger.debug(f"Pruned {dropped} page(s) without content")
        return pages

    def _place(self, block: Block, next_block: Optional[Block]) -> None:
        if block.is_title and self._title_would_orphan(block, next_block):
            self._start_new_page()

        if self.current_height + block.full_height <= self.limit:
            self._add_to_page(self.current_page, block)
            self.current_height += block.full_height
            return

        space_for_content = self.limit - self.current_height - block.margin_top

        if block.is_splittable and space_for_content >= self.geometry.min_split_height:
            self._split(block, space_for_content)
        else:
            self._start_new_page()
            self._add_to_page(self.current_page, block)
            self.current_height += block.full_height

    def _title_would_orphan(self, title: Block, next_block: Optional[Block]) -> bool:
        """True if the title cannot share this page with its first content."""
        if next_block is None or next_block.is_title or next_block.section != title.section:
            return False

        next_share = (
            self.geometry.min_split_height if next_block.is_splittable else next_block.height
        )
        space_needed = title.full_height + next_block.margin_top + next_share
        return self.current_height + space_needed > self.limit

    def _split(self, block: Block, visible_height: float) -> None:
        self._add_to_page(self.current_page, block)
        self.current_page.set_continuation(block.id, ContinuationInfo(
            offset=0,
            total_height=block.height,
            visible_height=visible_height,
        ))

        self._start_new_page()

        self._add_to_page(self.current_page, block)
        self.current_page.set_continuation(block.id, ContinuationInfo(
            offset=visible_height,
            total_height=block.height,
        ))
        self.current_height += block.height - visible_height

    def _start_new_page(self) -> None:
        self.pages.append(self.current_page)
        self.current_page = PageData(style=self.document.style)
        self.current_height = self.geometry.continuation_top_margin

    def _add_to_page(self, page: PageData, block: Block) -> None:
        if block.is_title:
            return

        field_name = block.section.value
        if block.id == field_name:
            # Whole-field block: the summary text or an entire section list
            value = block.data if not block.section.is_list else list(block.data)
            setattr(page, field_name, value)
            return

        items = getattr(page, field_name)
        if items is None:
            items = []
            setattr(page, field_name, items)
        if not any(item.id == block.data.id for item in items):
            items.append(block.data)
