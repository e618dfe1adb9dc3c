import uuid
from sqlalchemy.orm import Session
from repositories.chat_repo import ChatRepository
from repositories.user_repo import UserRepository
from schemas.chat_schema import MessageCreate, ChatPreview, MessageResponse
from core.exceptions import BadRequest, NotFound


def _parse_user_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise BadRequest("Invalid user id")


class ChatService:
    def __init__(self, db: Session):
        self.repo = ChatRepository(db)
        self.user_repo = UserRepository(db)

    def send_message(self, sender_id: uuid.UUID, msg_in: MessageCreate):
        receiver_id = _parse_user_id(msg_in.receiver_id)
        content = msg_in.content.strip()
        if not content:
            raise BadRequest("Message content is required")
        if not self.user_repo.get_by_id(receiver_id):
            raise NotFound("Recipient not found")
        return self.repo.create(sender_id=sender_id, receiver_id=receiver_id, content=content)

    def get_recent_chats(self, user_id: uuid.UUID) -> list[ChatPreview]:
        previews: dict[uuid.UUID, ChatPreview] = {}

        # Newest first, so the first message seen per partner is the preview
        for msg in self.repo.list_for_user(user_id):
            partner_id = msg.receiver_id if msg.sender_id == user_id else msg.sender_id
            if partner_id in previews:
                continue
            partner = self.user_repo.get_by_id(partner_id)
            previews[partner_id] = ChatPreview(
                id=str(partner_id),
                full_name=partner.display_name if partner else "Unknown",
                preview=msg.content,
                time=msg.created_at.strftime("%H:%M") if msg.created_at else "",
                unread=(msg.receiver_id == user_id and not msg.is_read),
            )

        # Students always see their primary teacher, even before the first message
        user = self.user_repo.get_by_id(user_id)
        teacher = user.assigned_teacher if user else None
        if teacher and teacher.id not in previews:
            previews[teacher.id] = ChatPreview(
                id=str(teacher.id),
                full_name=teacher.display_name,
                preview="Start a conversation with your teacher",
                time="",
                unread=False,
            )

        return list(previews.values())

    def get_chat_history(self, user_id: uuid.UUID, partner_id: str) -> list[MessageResponse]:
        partner_uuid = _parse_user_id(partner_id)
        return [
            MessageResponse(
                id=str(msg.id),
                content=msg.content,
                is_me=(msg.sender_id == user_id),
                is_read=msg.is_read,
                time=msg.created_at.strftime("%H:%M") if msg.created_at else "",
            )
            for msg in self.repo.get_conversation(user_id, partner_uuid)
        ]

    def mark_read(self, user_id: uuid.UUID, partner_id: str) -> int:
        return self.repo.mark_as_read(user_id, _parse_user_id(partner_id))
