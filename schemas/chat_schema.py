from pydantic import BaseModel
from typing import List

# --- Input ---
class MessageCreate(BaseModel):
    receiver_id: str
    content: str

# --- Output ---
class MessageResponse(BaseModel):
    id: str
    content: str
    is_me: bool
    is_read: bool
    time: str

class ChatPreview(BaseModel):
    id: str
    full_name: str  # partner display name
    preview: str    # last message, or a placeholder for the primary teacher
    time: str
    unread: bool

class ChatListResponse(BaseModel):
    chats: List[ChatPreview]

class ChatHistoryResponse(BaseModel):
    messages: List[MessageResponse]
