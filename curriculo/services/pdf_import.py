"""
Plain-text extraction from uploaded PDFs (resumes, Carteira de Trabalho).

The text feeds TextEnhancementService.extract_experiences / extract_resume.
"""

import logging
from io import BytesIO

from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """
    Extract the text of every page, each page followed by a blank line.

    Args:
        pdf_bytes: Raw PDF file content

    Returns:
        Concatenated page text

    Raises:
        ValueError: If the file is not a readable PDF or has no text layer
    """
    if not pdf_bytes:
        raise ValueError("PDF file is empty")

    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        pages = reader.pages
    except Exception as e:
        logger.error(f"Error reading PDF: {e}")
        raise ValueError(f"Failed to read PDF: {e}") from e

    full_text = ""
    for page_num, page in enumerate(pages):
        try:
            page_text = page.extract_text() or ""
        except Exception as page_err:
            logger.warning(f"Could not extract text from page {page_num}: {page_err}")
            page_text = ""
        full_text += page_text + "\n\n"

    if not full_text.strip():
        raise ValueError(
            "No text could be extracted from the PDF. Please ensure the PDF contains "
            "selectable text (not scanned images)."
        )

    logger.info(f"Extracted {len(full_text)} characters from {len(pages)} PDF page(s)")
    return full_text
