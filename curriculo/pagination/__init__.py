"""
Pagination engine.

Splits a resume Document into A4 pages:

1. MeasurementSurface - Render the whole Document off-screen, read geometry
2. BlockExtractor - Turn geometry into title / splittable / atomic blocks
3. PagePacker - Greedy single-pass packing into PageData pages
4. Paginator / PaginationScheduler - Fail-soft pipeline with debounce

Rendering of split blocks follows curriculo.pagination.continuation.
"""

from curriculo.pagination.types import (
    A4,
    A4_PIXEL_HEIGHT,
    A4_PIXEL_WIDTH,
    AtomicBlock,
    Block,
    ContinuationInfo,
    GeometrySnapshot,
    PageData,
    PageGeometry,
    Section,
    SplittableBlock,
    TitleBlock,
)
from curriculo.pagination.extractor import BlockExtractor
from curriculo.pagination.packer import PagePacker
from curriculo.pagination.paginator import PaginationScheduler, Paginator

__all__ = [
    "A4",
    "A4_PIXEL_HEIGHT",
    "A4_PIXEL_WIDTH",
    "AtomicBlock",
    "Block",
    "ContinuationInfo",
    "GeometrySnapshot",
    "PageData",
    "PageGeometry",
    "Section",
    "SplittableBlock",
    "TitleBlock",
    "BlockExtractor",
    "PagePacker",
    "PaginationScheduler",
    "Paginator",
]
