"""
Unit tests for page HTML rendering.
"""

import pytest

from curriculo.common.types import ResumeData
from curriculo.pagination.types import ContinuationInfo, PageData
from curriculo.rendering.preview import (
    PLACEHOLDERS,
    render_page_html,
    render_pages_html,
)


@pytest.fixture
def first_page(sample_document):
    return PageData.from_document(sample_document)


class TestFirstPage:
    """Tests for the first page / whole-Document render."""

    def test_renders_header_and_sections(self, first_page):
        html = render_page_html(first_page)

        assert 'id="resume-name">Ana Maria Silva<' in html
        assert 'id="resume-job-title">Desenvolvedora Front-End<' in html
        for element_id in (
            "summary-section",
            "experience-section",
            "education-section",
            "courses-section",
            "languages-section",
            "skills-section",
        ):
            assert f'id="{element_id}"' in html

    def test_first_page_titles_have_no_continued_suffix(self, first_page):
        assert "(continuação)" not in render_page_html(first_page)

    def test_experience_structure_matches_measurement_contract(self, first_page):
        """Test the classes the measurement script reads are emitted."""
        html = render_page_html(first_page)

        assert 'id="resume-experience-list"' in html
        assert 'class="experience-item" data-item-id="exp-1"' in html
        assert 'class="experience-header item-row"' in html
        assert 'class="experience-description with-gap"' in html
        assert 'id="resume-summary"' in html

    def test_theme_color_applied(self, sample_document):
        sample_document.style.color = "#ff0000"

        html = render_page_html(PageData.from_document(sample_document))

        assert "--theme-color: #ff0000;" in html

    def test_template_class_applied(self, sample_document):
        sample_document.style.template = "template-classic"

        html = render_page_html(PageData.from_document(sample_document))

        assert 'class="resume-preview template-classic' in html

    def test_text_is_escaped(self, sample_document):
        """Test user text cannot inject markup."""
        sample_document.personal_info.name = "<script>alert(1)</script>"

        html = render_page_html(PageData.from_document(sample_document))

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_description_line_breaks_preserved(self, sample_document):
        sample_document.experiences[0].description = "Linha um\nLinha dois"

        html = render_page_html(PageData.from_document(sample_document))

        assert "Linha um<br />Linha dois" in html

    def test_whatsapp_link_for_valid_phone(self, first_page):
        html = render_page_html(first_page)

        assert 'id="whatsapp-qr-code-container"' in html
        assert "https://wa.me/5511987654321" in html

    def test_whatsapp_hidden_when_disabled(self, sample_document):
        sample_document.style.show_qr_code = False

        html = render_page_html(PageData.from_document(sample_document))

        assert 'id="whatsapp-qr-code-container"' not in html

    def test_no_driver_license_is_hidden(self, sample_document):
        sample_document.personal_info.cnh = "Não possuo"
        assert "resume-cnh-container" not in render_page_html(PageData.from_document(sample_document))

        sample_document.personal_info.cnh = "AB"
        assert "CNH: AB" in render_page_html(PageData.from_document(sample_document))

    def test_measurement_render_is_not_clipped(self, first_page):
        """Test the measurement render omits the fixed-height page class."""
        assert 'class="resume-preview template-modern"' in render_page_html(first_page, is_measurement=True)
        assert 'class="resume-preview template-modern resume-preview-paginated"' in render_page_html(first_page)


class TestPlaceholders:
    """Tests for empty-section placeholders."""

    def test_empty_document_shows_placeholders(self):
        html = render_page_html(PageData.from_document(ResumeData()))

        assert "Seu Nome" in html
        assert "Cargo Desejado" in html
        for text in PLACEHOLDERS.values():
            assert text in html

    def test_demo_mode_hides_placeholders(self):
        html = render_page_html(PageData.from_document(ResumeData()), demo_mode=True)

        assert "Seu Nome" not in html
        assert 'id="summary-section"' not in html
        for text in PLACEHOLDERS.values():
            assert text not in html


class TestContinuationPages:
    """Tests for pages after the first."""

    def test_continued_section_title_and_clip(self, sample_document):
        page = PageData(
            summary=sample_document.summary,
            style=sample_document.style,
            continuation={"summary": ContinuationInfo(offset=887, total_height=1300)},
        )

        html = render_page_html(page, is_first_page=False)

        assert "Resumo Profissional (continuação)" in html
        assert "top: -887px" in html
        assert 'id="resume-name"' not in html
        assert "padding-top: 56px" in html

    def test_later_pages_show_only_assigned_sections(self, sample_document):
        page = PageData(skills=sample_document.skills, style=sample_document.style)

        html = render_page_html(page, is_first_page=False)

        assert 'id="skills-section"' in html
        assert 'id="summary-section"' not in html
        for text in PLACEHOLDERS.values():
            assert text not in html

    def test_continued_experience_hides_its_header(self, sample_document):
        """Test the tail of a split description renders without its header row."""
        experience = sample_document.experiences[0]
        page = PageData(
            experiences=[experience],
            style=sample_document.style,
            continuation={experience.id: ContinuationInfo(offset=97, total_height=300)},
        )

        html = render_page_html(page, is_first_page=False)

        assert experience.job_title not in html
        assert "experience-description with-gap" not in html
        assert "top: -97px" in html

    def test_render_pages_html_marks_first_page(self, sample_document):
        pages = [
            PageData.from_document(sample_document),
            PageData(skills=["Git"], style=sample_document.style),
        ]

        rendered = render_pages_html(pages)

        assert len(rendered) == 2
        assert 'id="resume-name"' in rendered[0]
        assert 'id="resume-name"' not in rendered[1]
        assert "Habilidades e Competências (continuação)" in rendered[1]
