from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .enums import PaymentMethod, PaymentStatus


# -------------------------------------------------
# Payments are recorded claims of a bank transfer,
# backed by an uploaded statement. Nothing is charged.
# -------------------------------------------------
class PaymentRead(BaseModel):
    id: str
    user_id: str
    property_id: Optional[str] = None
    amount: float
    currency: str
    payment_method: PaymentMethod = PaymentMethod.bank_transfer
    payment_status: PaymentStatus = PaymentStatus.pending
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_holder_name: Optional[str] = None
    bank_statement_url: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentUpdate(BaseModel):
    """Owner-editable details; the status is changed by admins only."""
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_holder_name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus
    notes: Optional[str] = Field(None, description="Review note shown to the payer")
