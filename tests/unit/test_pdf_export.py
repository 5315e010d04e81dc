"""
Unit tests for multi-page PDF export.
"""

from io import BytesIO

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from PyPDF2 import PdfReader, PdfWriter

from curriculo.common.error_handling import ExportInProgressError
from curriculo.common.types import ResumeData
from curriculo.pagination.types import PageData
from curriculo.rendering.pdf_export import PdfExporter, export_filename, merge_pdf_pages


def blank_pdf(width=595, height=842) -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=width, height=height)
    output = BytesIO()
    writer.write(output)
    return output.getvalue()


@pytest.fixture
def page():
    mock_page = MagicMock()
    mock_page.set_content = AsyncMock()
    mock_page.pdf = AsyncMock(side_effect=lambda **kwargs: blank_pdf())
    return mock_page


@pytest.fixture
def browsers(page):
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()
    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    provider = MagicMock()
    provider.get_browser = AsyncMock(return_value=browser)
    return provider


@pytest.fixture
def paginator(sample_document):
    mock_paginator = MagicMock()
    mock_paginator.paginate = AsyncMock(return_value=[
        PageData.from_document(sample_document),
        PageData(skills=["Git"], style=sample_document.style),
    ])
    return mock_paginator


class TestExportFilename:
    """Tests for export_filename()."""

    def test_whitespace_becomes_underscores(self):
        document = ResumeData.model_validate({"personalInfo": {"name": "Ana Maria Silva"}})
        assert export_filename(document) == "Ana_Maria_Silva.pdf"

    def test_missing_name_uses_default(self):
        assert export_filename(ResumeData()) == "curriculo.pdf"


class TestMergePdfPages:
    """Tests for merge_pdf_pages()."""

    def test_pages_merged_in_order(self):
        merged = merge_pdf_pages([blank_pdf(width=100), blank_pdf(width=200), blank_pdf(width=300)])

        reader = PdfReader(BytesIO(merged))
        assert len(reader.pages) == 3
        assert [float(p.mediabox.width) for p in reader.pages] == [100, 200, 300]


class TestPdfExporter:
    """Tests for PdfExporter.export()."""

    @pytest.mark.asyncio
    async def test_one_pdf_page_per_page(self, browsers, paginator, page, sample_document):
        exporter = PdfExporter(browsers, paginator, settle_ms=0)

        pdf_bytes = await exporter.export(sample_document)

        assert len(PdfReader(BytesIO(pdf_bytes)).pages) == 2
        assert page.pdf.await_count == 2
        paginator.paginate.assert_awaited_once_with(sample_document, run_id="export-1", demo_mode=False)

    @pytest.mark.asyncio
    async def test_pages_printed_at_a4_pixels(self, browsers, paginator, page, sample_document):
        exporter = PdfExporter(browsers, paginator, settle_ms=0)

        await exporter.export(sample_document)

        kwargs = page.pdf.await_args.kwargs
        assert kwargs["width"] == "794px"
        assert kwargs["height"] == "1123px"
        assert kwargs["print_background"] is True
        assert kwargs["page_ranges"] == "1"

    @pytest.mark.asyncio
    async def test_first_page_gets_header(self, browsers, paginator, page, sample_document):
        exporter = PdfExporter(browsers, paginator, settle_ms=0)

        await exporter.export(sample_document)

        first_html = page.set_content.await_args_list[0].args[0]
        second_html = page.set_content.await_args_list[1].args[0]
        assert 'id="resume-name"' in first_html
        assert 'id="resume-name"' not in second_html

    @pytest.mark.asyncio
    async def test_precomputed_pages_skip_pagination(self, browsers, paginator, sample_document):
        exporter = PdfExporter(browsers, paginator, settle_ms=0)

        await exporter.export(sample_document, pages=[PageData.from_document(sample_document)])

        paginator.paginate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_export_rejected(self, browsers, paginator, sample_document):
        """Test a second export while one runs raises ExportInProgressError."""
        exporter = PdfExporter(browsers, paginator, settle_ms=0)
        exporter._processing = True

        with pytest.raises(ExportInProgressError):
            await exporter.export(sample_document)

    @pytest.mark.asyncio
    async def test_processing_flag_reset_after_failure(self, browsers, paginator, page, sample_document):
        page.pdf.side_effect = RuntimeError("print failed")
        exporter = PdfExporter(browsers, paginator, settle_ms=0)

        with pytest.raises(RuntimeError):
            await exporter.export(sample_document)

        assert exporter.is_processing is False

    @pytest.mark.asyncio
    async def test_merge_result_returned(self, browsers, paginator, sample_document):
        exporter = PdfExporter(browsers, paginator, settle_ms=0)

        with patch("curriculo.rendering.pdf_export.merge_pdf_pages", return_value=b"%PDF-merged") as mock_merge:
            result = await exporter.export(sample_document)

        assert result == b"%PDF-merged"
        assert len(mock_merge.call_args.args[0]) == 2
