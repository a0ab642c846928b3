"""
Tests for the simulated checkout.

Covers:
- Amount computation
- POST /api/simulate-payment (local and n8n-backed)
- POST /api/validate-coupon
"""

import json
from unittest.mock import patch

import httpx
import pytest

from app.models.payment import PaymentBreakdown
from app.services.payment_service import PaymentService, generate_txn_id
from app.services.settings_service import SettingsResolver

from tests.conftest import N8N_BASE_URL


def payment_service_for(client, base_url=N8N_BASE_URL):
    return PaymentService(
        resolver=SettingsResolver(client=client, base_url=base_url),
        client=client,
        base_url=base_url,
    )


def n8n_responder(settings_row, routes):
    """Answers get-settings with settings_row and other paths from routes."""
    def responder(request):
        path = request.url.path.rsplit("/", 1)[-1]
        if path == "get-settings":
            return httpx.Response(200, json=settings_row)
        return routes[path](request)
    return responder


class TestPaymentBreakdown:
    """Amount computation."""

    def test_success_with_coupon(self):
        breakdown = PaymentBreakdown.compute(4999, "Success", "WELCOME10", 10)

        assert breakdown.discount_amt == pytest.approx(499.9)
        assert breakdown.payable_amt == pytest.approx(4499.1)
        assert breakdown.paid_amt == pytest.approx(4499.1)

    def test_discount_needs_a_coupon_code(self):
        """A percentage without a code is ignored."""
        breakdown = PaymentBreakdown.compute(4999, "Success", None, 10)

        assert breakdown.discount_amt == 0
        assert breakdown.payable_amt == 4999

    @pytest.mark.parametrize("status", ["Need Time", "Failure"])
    def test_nothing_paid_unless_success(self, status):
        breakdown = PaymentBreakdown.compute(4999, status)

        assert breakdown.paid_amt == 0
        assert breakdown.payable_amt == 4999

    def test_txn_id_shape(self):
        txn_id = generate_txn_id()

        prefix, millis, suffix = txn_id.split("_")
        assert prefix == "txn"
        assert millis.isdigit()
        assert len(suffix) == 9


class TestSimulatePayment:
    """POST /api/simulate-payment"""

    def test_local_success_with_default_fee(self, test_client):
        response = test_client.post("/api/simulate-payment", json={
            "email": "Buyer@Example.com",
            "payment_status": "Success",
            "couponcode_applied": "WELCOME10",
            "discount_percentage": 10,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Payment Success processed successfully"
        assert data["data"]["reg_fee"] == 4999
        assert data["data"]["discount_amt"] == pytest.approx(499.9)
        assert data["data"]["paid_amt"] == pytest.approx(4499.1)
        assert data["data"]["whatsapp_link"] == "www.google.com"
        assert data["data"]["txn_id"].startswith("txn_")

    def test_need_time(self, test_client):
        response = test_client.post("/api/simulate-payment", json={
            "email": "buyer@example.com",
            "payment_status": "Need Time",
        })

        data = response.json()["data"]
        assert data["confirmation_pending"] is True
        assert data["paid_amt"] == 0
        assert data["whatsapp_link"] is None

    def test_given_txn_id_kept(self, test_client):
        response = test_client.post("/api/simulate-payment", json={
            "email": "buyer@example.com",
            "payment_status": "Failure",
            "txn_id": "txn_custom",
        })
        assert response.json()["data"]["txn_id"] == "txn_custom"

    @pytest.mark.parametrize("body", [
        {"email": "buyer@example.com", "payment_status": "Pending"},
        {"email": "not-an-email", "payment_status": "Success"},
        {"email": "buyer@example.com", "payment_status": "Success", "discount_percentage": 150},
    ])
    def test_invalid_body(self, test_client, body):
        response = test_client.post("/api/simulate-payment", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_recorded_in_n8n_with_live_fee(
        self, test_client, make_webhook_client, sample_external_payload
    ):
        handler, client = make_webhook_client(n8n_responder(sample_external_payload, {
            "simulate-payment": lambda request: httpx.Response(200, json={"payment_status": "Success"}),
        }))

        with patch("app.api.payments.payment_service", payment_service_for(client)):
            response = test_client.post("/api/simulate-payment", json={
                "email": "buyer@example.com",
                "payment_status": "Success",
            })

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Payment Success processed successfully"
        assert data["data"]["reg_fee"] == 2999
        assert data["data"]["whatsapp_link"] == "https://chat.whatsapp.com/abc"

        record = json.loads(handler.requests[-1].content)
        assert record["email"] == "buyer@example.com"
        assert record["paid_amt"] == 2999
        assert record["currency"] == "INR"

    def test_local_fallback_when_recording_fails(
        self, test_client, make_webhook_client, sample_external_payload
    ):
        """The frontend can always redirect, even when n8n fails."""
        _, client = make_webhook_client(n8n_responder(sample_external_payload, {
            "simulate-payment": lambda request: httpx.Response(500),
        }))

        with patch("app.api.payments.payment_service", payment_service_for(client)):
            response = test_client.post("/api/simulate-payment", json={
                "email": "buyer@example.com",
                "payment_status": "Success",
            })

        assert response.status_code == 200
        assert response.json()["message"].endswith(" (local)")

    def test_zero_fee_rejected(self, test_client, make_webhook_client, sample_external_payload):
        """A zero registration fee is a configuration problem."""
        sample_external_payload["Registration Fee"] = "0"
        _, client = make_webhook_client(n8n_responder(sample_external_payload, {}))

        with patch("app.api.payments.payment_service", payment_service_for(client)):
            response = test_client.post("/api/simulate-payment", json={
                "email": "buyer@example.com",
                "payment_status": "Success",
            })

        assert response.status_code == 500
        assert "Registration fee" in response.json()["message"]


class TestValidateCoupon:
    """POST /api/validate-coupon"""

    def test_unconfigured(self, test_client):
        response = test_client.post("/api/validate-coupon", json={
            "couponcode_applied": "welcome10",
            "email": "buyer@example.com",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert "not configured" in data["message"]
        assert "discount_percentage" not in data

    def test_valid_coupon(self, test_client, make_webhook_client, sample_external_payload):
        handler, client = make_webhook_client(n8n_responder(sample_external_payload, {
            "validate-coupon": lambda request: httpx.Response(200, json={
                "success": True,
                "discount_percentage": "15",
                "message": "15% off",
            }),
        }))

        with patch("app.api.payments.payment_service", payment_service_for(client)):
            response = test_client.post("/api/validate-coupon", json={
                "couponcode_applied": " welcome15 ",
                "email": "Buyer@Example.com",
            })

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "15% off",
            "discount_percentage": 15.0,
            "couponcode_applied": "WELCOME15",
        }

        body = json.loads(handler.requests[-1].content)
        assert body["couponcode_applied"] == "WELCOME15"
        assert body["email"] == "buyer@example.com"
        assert body["registrationFee"] == 2999
        assert body["action"] == "validate_coupon"

    def test_invalid_coupon(self, test_client, make_webhook_client, sample_external_payload):
        _, client = make_webhook_client(n8n_responder(sample_external_payload, {
            "validate-coupon": lambda request: httpx.Response(200, json={"success": False}),
        }))

        with patch("app.api.payments.payment_service", payment_service_for(client)):
            response = test_client.post("/api/validate-coupon", json={
                "couponcode_applied": "NOPE",
                "email": "buyer@example.com",
            })

        assert response.json() == {"success": False, "message": "Invalid coupon code"}

    def test_service_down(self, test_client, make_webhook_client, sample_external_payload):
        _, client = make_webhook_client(n8n_responder(sample_external_payload, {
            "validate-coupon": lambda request: httpx.Response(504),
        }))

        with patch("app.api.payments.payment_service", payment_service_for(client)):
            response = test_client.post("/api/validate-coupon", json={
                "couponcode_applied": "WELCOME10",
                "email": "buyer@example.com",
            })

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert "temporarily unavailable" in response.json()["message"]

    def test_missing_code(self, test_client):
        response = test_client.post("/api/validate-coupon", json={"email": "buyer@example.com"})
        assert response.status_code == 400
