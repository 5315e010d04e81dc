"""
Preview Service - HTTP front end of the resume builder.

Serves pagination, page previews and PDF export using Playwright/Chromium,
and proxies the Gemini text features and Mercado Pago Pix payments so
their credentials stay on the server.
"""
