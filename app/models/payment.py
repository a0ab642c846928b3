"""
Pydantic models for the simulated checkout.

Payments are never charged: the amounts are computed locally and
recorded through n8n.
"""

from __future__ import annotations

from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.utils.validators import normalize_email_address


PaymentStatus = Literal["Success", "Need Time", "Failure"]


class PaymentSimulationRequest(BaseModel):
    """Body of POST /api/simulate-payment."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    payment_status: PaymentStatus
    txn_id: Optional[str] = Field(default=None, max_length=100)
    couponcode_applied: Optional[str] = Field(default=None, min_length=1, max_length=20)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lower-cases the email."""
        return normalize_email_address(v)


class PaymentBreakdown(BaseModel):
    """Amounts of a simulated payment."""

    reg_fee: float
    discount_amt: float = 0
    payable_amt: float
    paid_amt: float = 0

    @classmethod
    def compute(
        cls,
        reg_fee: float,
        payment_status: PaymentStatus,
        couponcode_applied: Optional[str] = None,
        discount_percentage: Optional[float] = None
    ) -> "PaymentBreakdown":
        """
        Computes the amounts.

        The discount only applies with a coupon code. The payable amount
        does not depend on the status; only a Success is actually paid.
        """
        discount_amt = 0.0
        if couponcode_applied and discount_percentage and discount_percentage > 0:
            discount_amt = reg_fee * discount_percentage / 100
        payable_amt = reg_fee - discount_amt
        return cls(
            reg_fee=reg_fee,
            discount_amt=discount_amt,
            payable_amt=payable_amt,
            paid_amt=payable_amt if payment_status == "Success" else 0,
        )


class PaymentRecord(BaseModel):
    """Payment row sent to the simulate-payment webhook."""

    email: str
    payment_status: PaymentStatus
    txn_id: str
    txn_timestamp: str
    paid_amt: float
    reg_fee: float
    couponcode_applied: Optional[str] = None
    discount_percentage: float = 0
    discount_amt: float
    payable_amt: float
    currency: str


class PaymentResponse(BaseModel):
    """Response of POST /api/simulate-payment."""

    success: bool = True
    message: str
    data: dict


class CouponValidationRequest(BaseModel):
    """Body of POST /api/validate-coupon."""

    model_config = ConfigDict(str_strip_whitespace=True)

    couponcode_applied: str = Field(..., min_length=1, max_length=20)
    email: EmailStr

    @field_validator("couponcode_applied")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Coupon codes are upper-case."""
        return v.upper()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lower-cases the email."""
        return normalize_email_address(v)


class CouponValidationResponse(BaseModel):
    """Response of POST /api/validate-coupon (always HTTP 200)."""

    success: bool
    message: str
    discount_percentage: Optional[float] = None
    couponcode_applied: Optional[str] = None
