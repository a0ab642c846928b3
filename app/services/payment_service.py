"""
Payment simulation and coupon validation.

The registration fee is always read from the settings resolver for the
current request; nothing is cached between requests.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings, is_configured_base_url
from app.core.error_handler import FunnelError, WebhookError
from app.models.payment import (
    CouponValidationRequest,
    CouponValidationResponse,
    PaymentBreakdown,
    PaymentRecord,
    PaymentSimulationRequest,
)
from app.services.settings_service import SettingsResolver, settings_resolver
from app.services.webhook_client import WebhookClient, webhook_client
from app.utils.validators import parse_strict_float

logger = logging.getLogger(__name__)


def generate_txn_id() -> str:
    """Simulated transaction id: txn_<epoch ms>_<9 random chars>."""
    return f"txn_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class PaymentService:
    """Simulated checkout backed by n8n."""

    def __init__(
        self,
        resolver: Optional[SettingsResolver] = None,
        client: Optional[WebhookClient] = None,
        base_url: Optional[str] = None
    ):
        self.resolver = resolver or settings_resolver
        self.client = client or webhook_client
        self.base_url = settings.api_base_url if base_url is None else base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        """True when the n8n base URL is usable."""
        return is_configured_base_url(self.base_url)

    async def simulate_payment(self, request: PaymentSimulationRequest) -> tuple[str, dict]:
        """
        Simulates a payment and records it.

        Falls back to a local result when n8n is missing or failing, so
        that the frontend can always redirect.

        Returns:
            Tuple (message, data).

        Raises:
            FunnelError: Registration fee missing or invalid.
        """
        current = (await self.resolver.resolve()).settings
        if current.course_price <= 0:
            raise FunnelError(
                message="Registration fee missing or invalid. Please check admin settings.",
                workflow="payment",
                node="registration_fee",
            )

        breakdown = PaymentBreakdown.compute(
            reg_fee=current.course_price,
            payment_status=request.payment_status,
            couponcode_applied=request.couponcode_applied,
            discount_percentage=request.discount_percentage,
        )
        record = PaymentRecord(
            email=request.email,
            payment_status=request.payment_status,
            txn_id=request.txn_id or generate_txn_id(),
            txn_timestamp=datetime.now(timezone.utc).isoformat(),
            couponcode_applied=request.couponcode_applied,
            discount_percentage=request.discount_percentage or 0,
            currency=settings.currency,
            **breakdown.model_dump(),
        )
        logger.info(f"💳 Payment simulation: {record.payment_status} for {record.email}")

        payment_status = record.payment_status
        suffix = ""
        if self.configured:
            try:
                data = await self.client.post(
                    f"{self.base_url}/simulate-payment",
                    record.model_dump(),
                )
                if isinstance(data, dict) and data.get("payment_status"):
                    payment_status = data["payment_status"]
            except WebhookError as e:
                logger.warning(f"⚠️ Payment webhook failed, local fallback: {e.message}")
                suffix = " (local)"

        message = f"Payment {record.payment_status} processed successfully{suffix}"
        return message, {
            "txn_id": record.txn_id,
            "payment_status": payment_status,
            "txn_timestamp": record.txn_timestamp,
            "paid_amt": record.paid_amt,
            "reg_fee": record.reg_fee,
            "payable_amt": record.payable_amt,
            "discount_amt": record.discount_amt,
            "whatsapp_link": current.whatsapp_link if record.payment_status == "Success" else None,
            "confirmation_pending": record.payment_status == "Need Time",
        }

    async def validate_coupon(self, request: CouponValidationRequest) -> CouponValidationResponse:
        """
        Validates a coupon code with n8n.

        n8n answers {success, discount_percentage, message}. Never raises:
        a missing or failing service gives success=False.
        """
        logger.info(f"🎟️ Validating coupon {request.couponcode_applied} for {request.email}")

        if not self.configured:
            logger.warning("API_BASE_URL not configured, coupon validation unavailable")
            return CouponValidationResponse(
                success=False,
                message="Coupon validation service is not configured",
            )

        current = (await self.resolver.resolve()).settings
        body = {
            "couponcode_applied": request.couponcode_applied,
            "email": request.email,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": "validate_coupon",
            "registrationFee": current.course_price,
        }

        try:
            data = await self.client.post(
                f"{self.base_url}/validate-coupon",
                body,
                timeout=settings.coupon_timeout,
            )
        except WebhookError as e:
            logger.error(f"❌ Coupon validation webhook failed: {e.message}")
            return CouponValidationResponse(
                success=False,
                message="Coupon validation service is temporarily unavailable. Please try again later.",
            )

        if isinstance(data, dict) and data.get("success"):
            return CouponValidationResponse(
                success=True,
                message=data.get("message") or "Coupon applied successfully",
                discount_percentage=parse_strict_float(data.get("discount_percentage")) or 0,
                couponcode_applied=request.couponcode_applied,
            )

        message = data.get("message") if isinstance(data, dict) else None
        return CouponValidationResponse(success=False, message=message or "Invalid coupon code")


# Global instance
payment_service = PaymentService()
