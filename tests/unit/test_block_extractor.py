"""
Unit tests for the block extractor.

The geometry dicts mirror what the measurement script returns from the
browser (camelCase keys, full heights including margins).
"""

import pytest

from curriculo.common.error_handling import ExtractionFailure, PaginationError
from curriculo.common.types import ResumeData
from curriculo.pagination.extractor import BlockExtractor, header_block_id
from curriculo.pagination.types import (
    AtomicBlock,
    GeometrySnapshot,
    Section,
    SplittableBlock,
    TitleBlock,
)


def section(element_id, margin_top=16, offset_height=200, title=(38, 30), content_height=None, items=None):
    return {
        "id": element_id,
        "marginTop": margin_top,
        "offsetHeight": offset_height,
        "title": {"fullHeight": title[0], "offsetHeight": title[1]} if title else None,
        "contentHeight": content_height,
        "items": items or [],
    }


@pytest.fixture
def document():
    return ResumeData.model_validate({
        "summary": "Resumo profissional.",
        "experiences": [
            {"id": "1", "jobTitle": "Dev Pleno", "description": "Portal do cliente."},
            {"id": "2", "jobTitle": "Dev Júnior", "description": ""},
        ],
        "education": [{"id": "e1", "degree": "ADS"}],
    })


@pytest.fixture
def snapshot():
    return GeometrySnapshot.from_dict({
        "scrollHeight": 2000,
        "headerHeight": 150,
        "mainMarginTop": 16,
        "sections": [
            section("summary-section", margin_top=0, offset_height=400, content_height=360),
            section("experience-section", offset_height=500, items=[
                {"marginTop": 0, "headerHeight": 44, "descriptionHeight": 120},
                {"marginTop": 16, "headerHeight": 44, "descriptionHeight": None},
            ]),
            section("education-section", offset_height=130),
            section("foo-section"),
            section("courses-section", offset_height=90),
        ],
    })


class TestExtract:
    """Tests for BlockExtractor.extract()."""

    def test_block_order_follows_document(self, snapshot, document):
        """Test blocks come out in rendering order with stable ids."""
        blocks = BlockExtractor().extract(snapshot, document)

        assert [b.id for b in blocks] == [
            "summary-title",
            "summary",
            "experiences-title",
            "1-header",
            "1",
            "2-header",
            "education-title",
            "education",
        ]

    def test_block_kinds(self, snapshot, document):
        """Test title, splittable and atomic classification."""
        blocks = {b.id: b for b in BlockExtractor().extract(snapshot, document)}

        assert isinstance(blocks["summary-title"], TitleBlock)
        assert isinstance(blocks["summary"], SplittableBlock)
        assert isinstance(blocks["1-header"], AtomicBlock)
        assert isinstance(blocks["1"], SplittableBlock)
        assert isinstance(blocks["education"], AtomicBlock)

    def test_heights_and_margins(self, snapshot, document):
        """Test heights are taken from the matching geometry."""
        blocks = {b.id: b for b in BlockExtractor().extract(snapshot, document)}

        assert blocks["summary-title"].height == 38
        assert blocks["summary-title"].margin_top == 0
        assert blocks["summary"].height == 360
        assert blocks["experiences-title"].margin_top == 16
        assert blocks["2-header"].margin_top == 16
        assert blocks["1"].height == 120
        # Whole section minus its title's border box
        assert blocks["education"].height == 100

    def test_block_data_points_at_document(self, snapshot, document):
        """Test blocks carry the Document values the packer copies."""
        blocks = {b.id: b for b in BlockExtractor().extract(snapshot, document)}

        assert blocks["summary"].data == "Resumo profissional."
        assert blocks["1-header"].data.id == "1"
        assert blocks["education"].data == document.education
        assert blocks["education"].section is Section.EDUCATION

    def test_empty_sections_are_skipped(self, snapshot, document):
        """Test a rendered section with no Document data reserves no space."""
        blocks = BlockExtractor().extract(snapshot, document)

        assert not any(b.section is Section.COURSES for b in blocks)

    def test_missing_title_emits_no_title_block(self, document):
        """Test a section rendered without a title still yields its content."""
        snapshot = GeometrySnapshot.from_dict({
            "scrollHeight": 1500,
            "headerHeight": 100,
            "mainMarginTop": 16,
            "sections": [section("summary-section", title=None, content_height=200)],
        })

        blocks = BlockExtractor().extract(snapshot, document)

        assert [b.id for b in blocks] == ["summary"]

    def test_fewer_rendered_items_than_document(self, document):
        """Test experiences without a rendered entry are skipped."""
        snapshot = GeometrySnapshot.from_dict({
            "scrollHeight": 1500,
            "headerHeight": 100,
            "mainMarginTop": 16,
            "sections": [section("experience-section", items=[
                {"marginTop": 0, "headerHeight": 44, "descriptionHeight": 80},
            ])],
        })

        blocks = BlockExtractor().extract(snapshot, document)

        assert [b.id for b in blocks] == ["experiences-title", "1-header", "1"]

    def test_missing_main_container_raises(self, document):
        """Test ExtractionFailure when the render has no main container."""
        snapshot = GeometrySnapshot.from_dict({"scrollHeight": 1500, "headerHeight": 100})

        with pytest.raises(ExtractionFailure):
            BlockExtractor().extract(snapshot, document)

    def test_extraction_failure_is_pagination_error(self):
        """Test the failure belongs to the fail-soft taxonomy."""
        assert issubclass(ExtractionFailure, PaginationError)


class TestSnapshot:
    """Tests for GeometrySnapshot parsing."""

    def test_first_page_offset(self, snapshot):
        """Test header height plus the main container margin."""
        assert snapshot.first_page_offset == 166

    def test_first_page_offset_truncates_margin(self):
        """Test the main container margin is read as whole pixels."""
        snapshot = GeometrySnapshot.from_dict({
            "scrollHeight": 1500,
            "headerHeight": 120.5,
            "mainMarginTop": 16.7,
        })

        assert snapshot.first_page_offset == 136.5

    def test_header_block_id(self):
        """Test experience header ids are derived from the item id."""
        assert header_block_id("42") == "42-header"
