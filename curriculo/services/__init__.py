"""
External collaborators of the resume builder.

- TextEnhancementService: Gemini-backed rewrite, skill suggestion, PDF import
- PaymentGateway: Mercado Pago Pix charges
- extract_pdf_text: Text layer of uploaded PDFs
"""

from curriculo.services.payment_gateway import (
    PaymentGateway,
    PaymentStatus,
    PixPayment,
    PriceTier,
)
from curriculo.services.pdf_import import extract_pdf_text
from curriculo.services.text_enhancement_service import (
    TextEnhancementService,
    filter_new_skills,
    normalize_imported_resume,
)

__all__ = [
    "PaymentGateway",
    "PaymentStatus",
    "PixPayment",
    "PriceTier",
    "extract_pdf_text",
    "TextEnhancementService",
    "filter_new_skills",
    "normalize_imported_resume",
]
