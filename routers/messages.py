# routers/messages.py

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from dependencies.auth import get_current_user
from core.errors import Forbidden, NotFound, handle_supabase_error
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.supabase_helpers import fetch_one, safe_insert, safe_select, safe_update
from models.message import (
    ConversationRead,
    ConversationStart,
    ConversationThread,
    MessageCreate,
    MessageRead,
)
from models.user import Principal

router = APIRouter(
    prefix="/messages",
    tags=["Messages"],
)


# -----------------------------------------------------
# Participant check (buyer or seller only; admins are not members)
# -----------------------------------------------------
def load_conversation_for(current_user: Principal, conversation_id: str) -> dict:
    conversation = fetch_one("conversations", conversation_id)
    if not conversation:
        raise NotFound("Conversation")

    if current_user.id not in (conversation.get("buyer_id"), conversation.get("seller_id")):
        raise Forbidden("You are not part of this conversation")

    return conversation


def _post_message(conversation_id: str, sender_id: str, content: str) -> dict:
    message = safe_insert("messages", {
        "conversation_id": conversation_id,
        "sender_id": sender_id,
        "content": content,
    })
    safe_update(
        "conversations",
        {"id": conversation_id},
        {"last_message_at": datetime.now(timezone.utc).isoformat()},
    )
    return message


# -----------------------------------------------------
# LIST MY CONVERSATIONS
# -----------------------------------------------------
@router.get("/conversations", summary="My Conversations", response_model=List[ConversationRead])
def list_conversations(current_user: Principal = Depends(get_current_user)):
    client = get_supabase_client()
    try:
        result = (
            client.table("conversations")
            .select("*")
            .or_(f"buyer_id.eq.{current_user.id},seller_id.eq.{current_user.id}")
            .order("last_message_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to list conversations")

    return result.data or []


# -----------------------------------------------------
# START A CONVERSATION ABOUT A LISTING
# -----------------------------------------------------
@router.post("/conversations", summary="Contact Seller", response_model=ConversationThread, status_code=201)
def start_conversation(payload: ConversationStart, current_user: Principal = Depends(get_current_user)):
    prop = fetch_one("properties", payload.property_id, columns="id, seller_id")
    if not prop:
        raise NotFound("Property")

    seller_id = prop["seller_id"]
    if seller_id == current_user.id:
        raise HTTPException(400, "You cannot start a conversation about your own listing")

    # Reuse the existing thread between this buyer and seller for this listing
    existing = safe_select(
        "conversations",
        {"property_id": payload.property_id, "buyer_id": current_user.id, "seller_id": seller_id},
        limit=1,
    )

    if existing:
        conversation = existing[0]
    else:
        conversation = safe_insert("conversations", {
            "property_id": payload.property_id,
            "buyer_id": current_user.id,
            "seller_id": seller_id,
        })
        logger.info(f"Conversation {conversation['id']} opened by {current_user.id} on property {payload.property_id}")

    message = _post_message(conversation["id"], current_user.id, payload.content)
    return ConversationThread(conversation=conversation, messages=[message])


# -----------------------------------------------------
# READ A THREAD (marks incoming messages read)
# -----------------------------------------------------
@router.get("/conversations/{conversation_id}", summary="Conversation Thread", response_model=ConversationThread)
def get_conversation(conversation_id: str, current_user: Principal = Depends(get_current_user)):
    conversation = load_conversation_for(current_user, conversation_id)

    messages = safe_select(
        "messages",
        {"conversation_id": conversation_id},
        order_by="created_at",
    )

    unread = [m for m in messages if not m.get("is_read") and m.get("sender_id") != current_user.id]
    if unread:
        client = get_supabase_client()
        try:
            client.rpc("mark_conversation_read", {"p_conversation_id": conversation_id}).execute()
        except Exception as e:
            # Read receipts are best effort; the thread is still returned
            logger.warning(f"Failed to mark conversation {conversation_id} read: {e}")

    return ConversationThread(conversation=conversation, messages=messages)


# -----------------------------------------------------
# REPLY
# -----------------------------------------------------
@router.post("/conversations/{conversation_id}", summary="Send Message", response_model=MessageRead, status_code=201)
def send_message(
    conversation_id: str,
    payload: MessageCreate,
    current_user: Principal = Depends(get_current_user),
):
    load_conversation_for(current_user, conversation_id)
    return _post_message(conversation_id, current_user.id, payload.content)
