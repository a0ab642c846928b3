"""
Checkout endpoints.

- POST /api/simulate-payment: simulated payment (never charged)
- POST /api/validate-coupon: coupon check through n8n
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.models.payment import (
    CouponValidationRequest,
    CouponValidationResponse,
    PaymentResponse,
    PaymentSimulationRequest,
)
from app.services.payment_service import payment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])


@router.post(
    "/simulate-payment",
    response_model=PaymentResponse,
    summary="Simulate a payment"
)
async def simulate_payment(payload: PaymentSimulationRequest):
    """
    Computes the amounts of a simulated payment and records it.

    Answers 200 even when n8n is down, with a "(local)" message.
    """
    message, data = await payment_service.simulate_payment(payload)
    return PaymentResponse(success=True, message=message, data=data)


@router.post(
    "/validate-coupon",
    response_model=CouponValidationResponse,
    response_model_exclude_none=True,
    summary="Validate a coupon code"
)
async def validate_coupon(payload: CouponValidationRequest):
    """Always 200; `success` tells whether the coupon applies."""
    return await payment_service.validate_coupon(payload)
