from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import ServiceError
from core.security import get_current_active_user
from models.users import User
from schemas.chat_schema import ChatHistoryResponse, ChatListResponse, MessageCreate
from services.chat_service import ChatService

router = APIRouter()

@router.get("", response_model=ChatListResponse)
def get_chats(db: Session = Depends(get_db), current_user: User = Depends(get_current_active_user)):
    """Conversation list for the sidebar."""
    return {"chats": ChatService(db).get_recent_chats(current_user.id)}

@router.get("/history/{partner_id}", response_model=ChatHistoryResponse)
def get_history(partner_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_active_user)):
    try:
        return {"messages": ChatService(db).get_chat_history(current_user.id, partner_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.post("/send")
def send_message(msg_in: MessageCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_active_user)):
    try:
        new_msg = ChatService(db).send_message(current_user.id, msg_in)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"status": "success", "msg_id": str(new_msg.id)}

@router.put("/read/{partner_id}")
def mark_read(partner_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_active_user)):
    try:
        updated = ChatService(db).mark_read(current_user.id, partner_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"status": "marked as read", "updated": updated}
