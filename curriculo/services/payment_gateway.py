"""
Payment Gateway: Pix payments through the Mercado Pago REST API.

A resume download costs PRICE_STANDARD; re-exporting a previously paid
and since edited resume costs PRICE_DISCOUNTED. Pix codes expire after
PIX_EXPIRATION_SECONDS.
"""

import logging
import time
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import requests

from curriculo.common.config import Config
from curriculo.common.error_handling import UpstreamServiceError
from curriculo.common.types import CamelModel, iso_timestamp

logger = logging.getLogger(__name__)

SERVICE_NAME = "mercadopago"

PAYMENT_DESCRIPTION = "Download de Currículo Profissional"


class PriceTier(str, Enum):
    STANDARD = "standard"
    DISCOUNTED = "discounted"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    ERROR = "error"


class PixPayment(CamelModel):
    """Data the client needs to show a Pix charge."""

    payment_id: str
    qr_code_url: str        # data:image/png;base64,... URL
    copy_paste_code: str    # Pix "copia e cola" code


class PaymentGateway:
    """Mercado Pago client for Pix charges."""

    TIMEOUT = 30  # seconds

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_base: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token if access_token is not None else Config.MERCADO_PAGO_ACCESS_TOKEN
        self.api_base = (api_base or Config.MERCADO_PAGO_API_BASE).rstrip("/")
        self.session = session or requests.Session()

    def price_for(self, tier: PriceTier) -> float:
        return Config.PRICE_DISCOUNTED if tier == PriceTier.DISCOUNTED else Config.PRICE_STANDARD

    def create_payment(self, tier: PriceTier = PriceTier.STANDARD) -> PixPayment:
        """
        Create a Pix charge.

        Args:
            tier: STANDARD for a first download, DISCOUNTED when re-exporting
                an edited resume that was already paid for

        Returns:
            PixPayment with the QR code as a data URL and the copy/paste code

        Raises:
            UpstreamServiceError: If the gateway rejects the request or the
                response lacks the Pix transaction data
        """
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(seconds=Config.PIX_EXPIRATION_SECONDS)
        amount = self.price_for(tier)

        payment_data = {
            "transaction_amount": amount,
            "description": PAYMENT_DESCRIPTION,
            "payment_method_id": "pix",
            "date_of_expiration": iso_timestamp(expires_at),
            # Mercado Pago requires a payer e-mail; none is collected before payment
            "payer": {"email": f"pagamento-{int(time.time() * 1000)}@velcurriculo.com"},
        }

        logger.info(f"Creating Pix payment ({tier.value}, R${amount:.2f})")
        payment = self._request("POST", "/v1/payments", json=payment_data)

        transaction = (payment.get("point_of_interaction") or {}).get("transaction_data")
        if not payment.get("id") or not transaction:
            raise UpstreamServiceError(
                SERVICE_NAME, "Não foi possível gerar os dados do pagamento Pix."
            )

        pix = PixPayment(
            payment_id=str(payment["id"]),
            qr_code_url=f"data:image/png;base64,{transaction.get('qr_code_base64', '')}",
            copy_paste_code=transaction.get("qr_code", ""),
        )
        logger.info(f"Pix payment {pix.payment_id} created")
        return pix

    def get_status(self, payment_id: str) -> PaymentStatus:
        """
        Poll a payment.

        Returns:
            SUCCEEDED once approved, ERROR if the lookup failed, PENDING
            otherwise

        Raises:
            ValueError: If payment_id is blank
        """
        if not payment_id or not str(payment_id).strip():
            raise ValueError("Payment ID is required.")

        try:
            payment = self._request("GET", f"/v1/payments/{payment_id}")
        except UpstreamServiceError as e:
            logger.warning(f"Could not retrieve payment {payment_id}: {e.message}")
            return PaymentStatus.ERROR

        status = payment.get("status")
        logger.debug(f"Payment {payment_id} status: {status}")
        if status == "approved":
            return PaymentStatus.SUCCEEDED
        return PaymentStatus.PENDING

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.access_token:
            raise UpstreamServiceError(SERVICE_NAME, "Mercado Pago access token not configured", 500)

        headers = {"Authorization": f"Bearer {self.access_token}"}
        if method == "POST":
            # Mercado Pago requires an idempotency key on payment creation
            headers["X-Idempotency-Key"] = f"curriculo-{int(time.time() * 1000)}"

        try:
            response = self.session.request(
                method,
                f"{self.api_base}{path}",
                json=json,
                headers=headers,
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.Timeout:
            logger.error(f"Mercado Pago {method} {path} timed out")
            raise UpstreamServiceError(SERVICE_NAME, "Mercado Pago request timed out")
        except requests.exceptions.RequestException as e:
            logger.error(f"Mercado Pago {method} {path} failed: {e}")
            raise UpstreamServiceError(SERVICE_NAME, str(e))

        if not response.ok:
            message = _error_message(response)
            logger.error(f"Mercado Pago error {response.status_code}: {message}")
            raise UpstreamServiceError(SERVICE_NAME, message)

        try:
            return response.json()
        except ValueError:
            raise UpstreamServiceError(SERVICE_NAME, "Mercado Pago returned a malformed response")


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return response.reason or f"HTTP {response.status_code}"
