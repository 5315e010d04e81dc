"""
Block Extractor: turns measured geometry into an ordered block sequence.

Walks the sections of one full-document render in rendering order and emits:
- a TitleBlock per visible section title
- a SplittableBlock for the summary paragraph
- per experience, an AtomicBlock header and (when described) a
  SplittableBlock description
- a single AtomicBlock for every other section body (education, courses,
  languages, skills); those sections never split mid-section
"""

import logging
from typing import Any, List, Optional

from curriculo.common.error_handling import ExtractionFailure
from curriculo.common.types import ResumeData
from curriculo.pagination.types import (
    SECTION_IDS,
    AtomicBlock,
    Block,
    GeometrySnapshot,
    Section,
    SectionGeometry,
    SplittableBlock,
    TitleBlock,
)

logger = logging.getLogger(__name__)


def header_block_id(item_id: str) -> str:
    """Identifier of an experience's header sub-block."""
    return f"{item_id}-header"


class BlockExtractor:
    """Builds layout blocks from a GeometrySnapshot and its source Document."""

    def extract(self, snapshot: GeometrySnapshot, document: ResumeData) -> List[Block]:
        """
        Produce the ordered block sequence for one pagination pass.

        Args:
            snapshot: Geometry of the full, unpaginated render
            document: The Document that was rendered

        Returns:
            Blocks in Document order

        Raises:
            ExtractionFailure: If the render has no main content container
        """
        if snapshot.main_margin_top is None:
            raise ExtractionFailure("Rendered document has no main content container")

        blocks: List[Block] = []
        for section_geometry in snapshot.sections:
            section = SECTION_IDS.get(section_geometry.element_id)
            if section is None:
                logger.debug(f"Ignoring unknown section element '{section_geometry.element_id}'")
                continue

            data = getattr(document, section.value)
            if not data:
                # Empty sections must not reserve space on the page
                continue

            blocks.extend(self._section_blocks(section, section_geometry, document, data))

        logger.debug(f"Extracted {len(blocks)} blocks from {len(snapshot.sections)} sections")
        return blocks

    def _section_blocks(
        self,
        section: Section,
        geometry: SectionGeometry,
        document: ResumeData,
        data: Any,
    ) -> List[Block]:
        blocks: List[Block] = []

        if geometry.title_height is not None:
            blocks.append(TitleBlock(
                id=f"{section.value}-title",
                section=section,
                height=geometry.title_height,
                margin_top=geometry.margin_top,
            ))

        if section is Section.SUMMARY:
            if geometry.content_height is not None:
                blocks.append(SplittableBlock(
                    id=Section.SUMMARY.value,
                    section=section,
                    height=geometry.content_height,
                    margin_top=0.0,
                    data=document.summary,
                ))
        elif section is Section.EXPERIENCES:
            blocks.extend(self._experience_blocks(geometry, document))
        else:
            blocks.append(AtomicBlock(
                id=section.value,
                section=section,
                height=geometry.offset_height - geometry.title_offset_height,
                margin_top=0.0,
                data=data,
            ))

        return blocks

    def _experience_blocks(self, geometry: SectionGeometry, document: ResumeData) -> List[Block]:
        blocks: List[Block] = []
        for index, experience in enumerate(document.experiences):
            item_geometry = geometry.items[index] if index < len(geometry.items) else None
            if item_geometry is None:
                # Fewer rendered entries than Document items
                logger.warning(f"No rendered entry for experience '{experience.id}'")
                continue

            header_height = _as_height(item_geometry.header_height)
            if header_height is not None:
                blocks.append(AtomicBlock(
                    id=header_block_id(experience.id),
                    section=Section.EXPERIENCES,
                    height=header_height,
                    margin_top=item_geometry.margin_top,
                    data=experience,
                ))

            description_height = _as_height(item_geometry.description_height)
            if experience.description and description_height is not None:
                blocks.append(SplittableBlock(
                    id=experience.id,
                    section=Section.EXPERIENCES,
                    height=description_height,
                    margin_top=0.0,
                    data=experience,
                ))
        return blocks


def _as_height(value: Optional[Any]) -> Optional[float]:
    return float(value) if value is not None else None
