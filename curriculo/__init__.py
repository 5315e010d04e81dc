"""
curriculo - resume builder backend.

Packages:
- common: configuration, logging, errors, Document types, persistence
- pagination: A4 pagination engine (measure, extract, pack)
- rendering: page HTML, shared Chromium, PDF export
- services: Gemini text features, Mercado Pago Pix payments, PDF text import
"""
