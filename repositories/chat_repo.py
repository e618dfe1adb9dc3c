from sqlalchemy.orm import Session
from sqlalchemy import or_, and_, desc
from models.chat import Message
import uuid

class ChatRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, sender_id: uuid.UUID, receiver_id: uuid.UUID, content: str) -> Message:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, is_read=False)
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_for_user(self, user_id: uuid.UUID) -> list[Message]:
        """Every message the user sent or received, newest first."""
        return self.db.query(Message).filter(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id)
        ).order_by(desc(Message.created_at)).all()

    def get_conversation(self, user_id: uuid.UUID, partner_id: uuid.UUID, limit: int = 200) -> list[Message]:
        return self.db.query(Message).filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id == partner_id),
                and_(Message.sender_id == partner_id, Message.receiver_id == user_id)
            )
        ).order_by(Message.created_at.asc()).limit(limit).all()

    def mark_as_read(self, user_id: uuid.UUID, partner_id: uuid.UUID) -> int:
        updated = self.db.query(Message).filter(
            Message.sender_id == partner_id,
            Message.receiver_id == user_id,
            Message.is_read == False
        ).update({"is_read": True}, synchronize_session=False)
        self.db.commit()
        return updated
