# routers/payments.py

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from dependencies.auth import get_current_user, require_admin_user
from core.authz import ensure_owner
from core.config import settings
from core.errors import NotFound
from core.logging_config import logger
from core.s3_client import build_object_key, upload_bytes
from core.supabase_helpers import fetch_one, safe_insert, safe_select, safe_update
from models.enums import PaymentMethod, PaymentStatus
from models.payment import PaymentRead, PaymentStatusUpdate, PaymentUpdate
from models.user import Principal

router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
)

ALLOWED_PROOF_TYPES = {"application/pdf", "image/jpeg", "image/png", "image/webp"}

# Statuses that close a payment review
FINAL_STATUSES = {PaymentStatus.completed, PaymentStatus.failed, PaymentStatus.refunded}


def load_payment_for(current_user: Principal, payment_id: str) -> dict:
    return ensure_owner(current_user, fetch_one("payments", payment_id), "user_id", "Payment")


# -----------------------------------------------------
# LIST MY PAYMENTS
# -----------------------------------------------------
@router.get("", summary="My Payments", response_model=List[PaymentRead])
def list_payments(current_user: Principal = Depends(get_current_user)):
    return safe_select(
        "payments",
        {"user_id": current_user.id},
        order_by="created_at",
        desc=True,
    )


# -----------------------------------------------------
# RECORD A BANK TRANSFER (with proof upload)
# -----------------------------------------------------
@router.post("", summary="Record Bank Transfer", response_model=PaymentRead, status_code=201)
async def create_payment(
    amount: float = Form(..., gt=0),
    currency: str = Form(...),
    property_id: Optional[str] = Form(None),
    bank_name: Optional[str] = Form(None),
    account_number: Optional[str] = Form(None),
    account_holder_name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    bank_statement: Optional[UploadFile] = File(None),
    current_user: Principal = Depends(get_current_user),
):
    if property_id and not fetch_one("properties", property_id, columns="id"):
        raise NotFound("Property")

    statement_url = None
    if bank_statement is not None and bank_statement.filename:
        if bank_statement.content_type not in ALLOWED_PROOF_TYPES:
            raise HTTPException(400, "Bank statement must be a PDF or an image")

        contents = await bank_statement.read()
        if len(contents) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(413, "Bank statement is too large")

        key = build_object_key("payments", current_user.id, bank_statement.filename)
        try:
            statement_url = upload_bytes(key, contents, bank_statement.content_type)
        except RuntimeError as e:
            logger.error(f"Bank statement upload failed for {current_user.id}: {e}")
            raise HTTPException(502, "Could not store the bank statement")

    payment = safe_insert("payments", {
        "user_id": current_user.id,
        "property_id": property_id,
        "amount": amount,
        "currency": currency.upper(),
        "payment_method": PaymentMethod.bank_transfer.value,
        "payment_status": PaymentStatus.pending.value,
        "bank_name": bank_name,
        "account_number": account_number,
        "account_holder_name": account_holder_name,
        "bank_statement_url": statement_url,
        "description": description,
    })

    logger.info(f"Payment {payment['id']} recorded by {current_user.id} ({amount} {currency.upper()})")
    return payment


# -----------------------------------------------------
# GET / UPDATE ONE (owner or admin)
# -----------------------------------------------------
@router.get("/{payment_id}", summary="Get Payment", response_model=PaymentRead)
def get_payment(payment_id: str, current_user: Principal = Depends(get_current_user)):
    return load_payment_for(current_user, payment_id)


@router.patch("/{payment_id}", summary="Update Payment Details", response_model=PaymentRead)
def update_payment(
    payment_id: str,
    payload: PaymentUpdate,
    current_user: Principal = Depends(get_current_user),
):
    payment = load_payment_for(current_user, payment_id)

    if payment.get("payment_status") in {s.value for s in FINAL_STATUSES} and not current_user.is_admin:
        raise HTTPException(409, "This payment has already been reviewed")

    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        return payment

    return safe_update("payments", {"id": payment_id}, updates) or payment


# -----------------------------------------------------
# ADMIN REVIEW
# -----------------------------------------------------
@router.patch("/{payment_id}/status", summary="Review Payment", response_model=PaymentRead)
def review_payment(
    payment_id: str,
    payload: PaymentStatusUpdate,
    current_user: Principal = Depends(require_admin_user),
):
    if not fetch_one("payments", payment_id, columns="id"):
        raise NotFound("Payment")

    updates = {"payment_status": payload.payment_status.value}
    if payload.notes is not None:
        updates["notes"] = payload.notes
    if payload.payment_status in FINAL_STATUSES:
        updates["processed_at"] = datetime.now(timezone.utc).isoformat()

    payment = safe_update("payments", {"id": payment_id}, updates)
    logger.info(f"Payment {payment_id} marked {payload.payment_status} by {current_user.id}")
    return payment
