# Rendering: HTML pages, shared Chromium, PDF export.
#
# Exports:
# - render_page_html / render_pages_html: Page HTML for preview and print
# - BrowserProvider: Lazily launched shared Chromium
#
# PdfExporter lives in curriculo.rendering.pdf_export (imports the paginator).

from curriculo.rendering.preview import render_page_html, render_pages_html
from curriculo.rendering.browser import BrowserProvider

__all__ = [
    "render_page_html",
    "render_pages_html",
    "BrowserProvider",
]
