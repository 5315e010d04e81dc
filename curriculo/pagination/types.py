"""
Data types for the pagination engine.

These types represent the intermediate and final outputs of a pagination pass:
- PageGeometry: Fixed A4 page dimensions (pixels at 96 dpi)
- Section: Document field a section renders
- GeometrySnapshot: Pixel geometry reported by the measurement surface
- TitleBlock / SplittableBlock / AtomicBlock: Measured layout blocks
- ContinuationInfo: Clip/offset of a block split across a page boundary
- PageData: The partial Document assigned to one physical page
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from curriculo.common.types import (
    CamelModel,
    Course,
    Education,
    Experience,
    Language,
    PersonalInfo,
    ResumeData,
    Style,
)


# A4 at 96 dpi. These values are part of the rendering contract with the
# browser client and the PDF export; do not tune them.
A4_PIXEL_HEIGHT = 1123
A4_PIXEL_WIDTH = 794
BOTTOM_MARGIN = 56
CONTINUATION_TOP_MARGIN = 56
MIN_SPLIT_HEIGHT = 50


@dataclass(frozen=True)
class PageGeometry:
    """Page dimensions used by the packer."""

    page_height: int = A4_PIXEL_HEIGHT
    page_width: int = A4_PIXEL_WIDTH
    bottom_margin: int = BOTTOM_MARGIN
    continuation_top_margin: int = CONTINUATION_TOP_MARGIN
    min_split_height: int = MIN_SPLIT_HEIGHT

    @property
    def content_height_limit(self) -> int:
        """Height available to content on every page."""
        return self.page_height - self.bottom_margin


A4 = PageGeometry()


class Section(str, Enum):
    """Document fields that render as a section, in rendering order."""

    SUMMARY = "summary"
    EXPERIENCES = "experiences"
    EDUCATION = "education"
    COURSES = "courses"
    LANGUAGES = "languages"
    SKILLS = "skills"

    @property
    def is_list(self) -> bool:
        return self is not Section.SUMMARY


# Rendered section element id -> Document field
SECTION_IDS: Dict[str, Section] = {
    "summary-section": Section.SUMMARY,
    "experience-section": Section.EXPERIENCES,
    "education-section": Section.EDUCATION,
    "courses-section": Section.COURSES,
    "languages-section": Section.LANGUAGES,
    "skills-section": Section.SKILLS,
}


# ============================================================================
# Measured geometry
# ============================================================================

@dataclass
class ExperienceItemGeometry:
    """Geometry of one rendered experience entry."""

    margin_top: float = 0.0
    header_height: Optional[float] = None       # Full box height of the title/company/date row
    description_height: Optional[float] = None  # Full box height of the description paragraph


@dataclass
class SectionGeometry:
    """Geometry of one top-level section element."""

    element_id: str
    margin_top: float = 0.0
    offset_height: float = 0.0                  # Border box height of the whole section
    title_height: Optional[float] = None        # Full box height of the section title, None if absent
    title_offset_height: float = 0.0            # Border box height of the section title
    content_height: Optional[float] = None      # Full box height of the summary paragraph
    items: List[ExperienceItemGeometry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SectionGeometry":
        title = raw.get("title") or None
        return cls(
            element_id=raw.get("id") or "",
            margin_top=float(raw.get("marginTop") or 0.0),
            offset_height=float(raw.get("offsetHeight") or 0.0),
            title_height=float(title["fullHeight"]) if title else None,
            title_offset_height=float(title["offsetHeight"]) if title else 0.0,
            content_height=(
                float(raw["contentHeight"]) if raw.get("contentHeight") is not None else None
            ),
            items=[
                ExperienceItemGeometry(
                    margin_top=float(item.get("marginTop") or 0.0),
                    header_height=item.get("headerHeight"),
                    description_height=item.get("descriptionHeight"),
                )
                for item in raw.get("items") or []
            ],
        )


@dataclass
class GeometrySnapshot:
    """
    Pixel geometry of one full-document render.

    Produced by the measurement surface, consumed by the block extractor
    and the packer. main_margin_top is None when the render has no main
    content container.
    """

    scroll_height: float
    header_height: float = 0.0
    main_margin_top: Optional[float] = None
    sections: List[SectionGeometry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GeometrySnapshot":
        main_margin = raw.get("mainMarginTop")
        return cls(
            scroll_height=float(raw.get("scrollHeight") or 0.0),
            header_height=float(raw.get("headerHeight") or 0.0),
            main_margin_top=float(main_margin) if main_margin is not None else None,
            sections=[SectionGeometry.from_dict(s) for s in raw.get("sections") or []],
        )

    @property
    def first_page_offset(self) -> float:
        """Height consumed on page 1 before the first section starts."""
        # The main container margin is read as a whole pixel count
        return self.header_height + int(self.main_margin_top or 0)


# ============================================================================
# Blocks
# ============================================================================

@dataclass(frozen=True)
class _BlockBase:
    id: str
    section: Section
    height: float           # Content height including own vertical margins
    margin_top: float       # Spacing above the block (section or item margin)

    is_title: ClassVar[bool] = False
    is_splittable: ClassVar[bool] = False

    @property
    def full_height(self) -> float:
        return self.height + self.margin_top


@dataclass(frozen=True)
class TitleBlock(_BlockBase):
    """Section title. Layout-only: never copied into a page."""

    is_title: ClassVar[bool] = True


@dataclass(frozen=True)
class SplittableBlock(_BlockBase):
    """Free-flowing text that may be cut at any vertical offset."""

    data: Any = None

    is_splittable: ClassVar[bool] = True


@dataclass(frozen=True)
class AtomicBlock(_BlockBase):
    """Content that must move to a page as a whole."""

    data: Any = None


Block = Union[TitleBlock, SplittableBlock, AtomicBlock]


# ============================================================================
# Page documents
# ============================================================================

class ContinuationInfo(CamelModel):
    """
    Vertical slice of a split block shown on one page.

    The first page of a split carries visible_height; the continuation page
    omits it, meaning "from offset to the end".
    """

    offset: float
    total_height: float
    visible_height: Optional[float] = None


class PageData(CamelModel):
    """The partial Document assigned to one physical page."""

    personal_info: Optional[PersonalInfo] = None
    summary: Optional[str] = None
    experiences: Optional[List[Experience]] = None
    education: Optional[List[Education]] = None
    courses: Optional[List[Course]] = None
    languages: Optional[List[Language]] = None
    skills: Optional[List[str]] = None
    style: Optional[Style] = None
    continuation: Optional[Dict[str, ContinuationInfo]] = None

    METADATA_FIELDS: ClassVar[tuple] = ("style", "continuation")

    @classmethod
    def from_document(cls, document: ResumeData) -> "PageData":
        """Whole Document as a single page."""
        return cls(**{name: getattr(document, name) for name in ResumeData.model_fields})

    def populated_fields(self) -> List[str]:
        """Names of the fields that were assigned on this page."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]

    def has_content(self) -> bool:
        """True if the page carries at least one non-empty Document field."""
        for name in self.populated_fields():
            if name in self.METADATA_FIELDS:
                continue
            value = getattr(self, name)
            if isinstance(value, list) and not value:
                continue
            return True
        return False

    def set_continuation(self, block_id: str, info: ContinuationInfo) -> None:
        if self.continuation is None:
            self.continuation = {}
        self.continuation[block_id] = info

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict with unassigned fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
