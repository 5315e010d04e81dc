"""
Unit tests for PDF text extraction.
"""

import pytest
from unittest.mock import MagicMock, patch

from curriculo.services.pdf_import import extract_pdf_text


def mock_reader(*texts):
    reader = MagicMock()
    reader.pages = []
    for text in texts:
        page = MagicMock()
        page.extract_text.return_value = text
        reader.pages.append(page)
    return reader


class TestExtractPdfText:
    """Tests for extract_pdf_text()."""

    def test_pages_joined_with_blank_lines(self):
        with patch("curriculo.services.pdf_import.PdfReader", return_value=mock_reader("Página um", "Página dois")):
            text = extract_pdf_text(b"%PDF-1.4 fake")

        assert text == "Página um\n\nPágina dois\n\n"

    def test_empty_file_rejected(self):
        with pytest.raises(ValueError):
            extract_pdf_text(b"")

    def test_invalid_pdf_rejected(self):
        with pytest.raises(ValueError, match="Failed to read PDF"):
            extract_pdf_text(b"this is not a pdf")

    def test_scanned_pdf_without_text_rejected(self):
        """Test a PDF with no text layer raises a helpful error."""
        with patch("curriculo.services.pdf_import.PdfReader", return_value=mock_reader("", None)):
            with pytest.raises(ValueError, match="No text could be extracted"):
                extract_pdf_text(b"%PDF-1.4 fake")

    def test_unreadable_page_is_skipped(self):
        reader = mock_reader("Página um", "Página dois")
        reader.pages[0].extract_text.side_effect = KeyError("/Font")

        with patch("curriculo.services.pdf_import.PdfReader", return_value=reader):
            text = extract_pdf_text(b"%PDF-1.4 fake")

        assert text == "\n\nPágina dois\n\n"
