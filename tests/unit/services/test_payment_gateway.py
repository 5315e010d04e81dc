"""
Unit tests for the Mercado Pago Pix gateway.
"""

import re

import pytest
import requests
from unittest.mock import MagicMock

from curriculo.common.error_handling import UpstreamServiceError
from curriculo.services.payment_gateway import (
    PaymentGateway,
    PaymentStatus,
    PixPayment,
    PriceTier,
)


def mp_response(body, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = "OK" if response.ok else "Bad Request"
    response.json.return_value = body
    return response


PIX_CREATED = {
    "id": 123456789,
    "status": "pending",
    "point_of_interaction": {
        "transaction_data": {
            "qr_code": "00020126580014br.gov.bcb.pix",
            "qr_code_base64": "iVBORw0KGgo=",
        }
    },
}


@pytest.fixture
def session():
    mock_session = MagicMock()
    mock_session.request.return_value = mp_response(PIX_CREATED)
    return mock_session


@pytest.fixture
def gateway(session):
    return PaymentGateway(access_token="TEST-token", api_base="https://mp.test/", session=session)


class TestCreatePayment:
    """Tests for create_payment()."""

    def test_returns_pix_data(self, gateway):
        payment = gateway.create_payment()

        assert isinstance(payment, PixPayment)
        assert payment.payment_id == "123456789"
        assert payment.qr_code_url == "data:image/png;base64,iVBORw0KGgo="
        assert payment.copy_paste_code == "00020126580014br.gov.bcb.pix"

    def test_wire_format_is_camel_case(self, gateway):
        wire = gateway.create_payment().model_dump(by_alias=True)

        assert set(wire) == {"paymentId", "qrCodeUrl", "copyPasteCode"}

    def test_request_payload(self, gateway, session):
        gateway.create_payment()

        call = session.request.call_args
        assert call.args == ("POST", "https://mp.test/v1/payments")
        body = call.kwargs["json"]
        assert body["transaction_amount"] == 5.0
        assert body["payment_method_id"] == "pix"
        assert body["description"] == "Download de Currículo Profissional"
        assert re.fullmatch(r"pagamento-\d+@velcurriculo\.com", body["payer"]["email"])
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", body["date_of_expiration"])

    def test_headers_carry_token_and_idempotency_key(self, gateway, session):
        gateway.create_payment()

        headers = session.request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer TEST-token"
        assert headers["X-Idempotency-Key"]

    def test_discounted_price(self, gateway, session):
        gateway.create_payment(PriceTier.DISCOUNTED)

        assert session.request.call_args.kwargs["json"]["transaction_amount"] == 2.5

    def test_missing_transaction_data(self, gateway, session):
        session.request.return_value = mp_response({"id": 1, "status": "pending"})

        with pytest.raises(UpstreamServiceError, match="Pix"):
            gateway.create_payment()

    def test_gateway_error_message_surfaced(self, gateway, session):
        session.request.return_value = mp_response({"message": "invalid payer"}, status_code=400)

        with pytest.raises(UpstreamServiceError) as exc_info:
            gateway.create_payment()

        assert exc_info.value.message == "invalid payer"

    def test_timeout(self, gateway, session):
        session.request.side_effect = requests.exceptions.Timeout()

        with pytest.raises(UpstreamServiceError, match="timed out"):
            gateway.create_payment()

    def test_missing_token(self, session):
        gateway = PaymentGateway(access_token="", session=session)

        with pytest.raises(UpstreamServiceError) as exc_info:
            gateway.create_payment()

        assert exc_info.value.status_code == 500
        session.request.assert_not_called()


class TestGetStatus:
    """Tests for get_status()."""

    @pytest.mark.parametrize("status,expected", [
        ("approved", PaymentStatus.SUCCEEDED),
        ("pending", PaymentStatus.PENDING),
        ("in_process", PaymentStatus.PENDING),
        ("rejected", PaymentStatus.PENDING),
    ])
    def test_status_mapping(self, gateway, session, status, expected):
        session.request.return_value = mp_response({"id": 1, "status": status})

        assert gateway.get_status("1") == expected

    def test_lookup_uses_payment_path(self, gateway, session):
        session.request.return_value = mp_response({"id": 1, "status": "pending"})

        gateway.get_status("987")

        call = session.request.call_args
        assert call.args == ("GET", "https://mp.test/v1/payments/987")
        assert "X-Idempotency-Key" not in call.kwargs["headers"]

    def test_lookup_failure_is_error_status(self, gateway, session):
        session.request.return_value = mp_response({"message": "not found"}, status_code=404)

        assert gateway.get_status("1") == PaymentStatus.ERROR

    def test_blank_id_rejected(self, gateway):
        with pytest.raises(ValueError, match="Payment ID is required"):
            gateway.get_status(" ")
