import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional
from backend.conversation.models import Conversation, ConversationStatus


class InMemoryConversationStore:
    """Process-lifetime conversation store.

    A store-wide lock guards the mapping; per-conversation locks serialize
    message handling for a single conversation id.
    """

    def __init__(self, idle_hours: int = 24):
        self._conversations: dict[str, Conversation] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock = asyncio.Lock()
        self._idle = timedelta(hours=idle_hours)

    async def create(self, customer_id: str) -> Conversation:
        conversation = Conversation(customer_id=customer_id)
        async with self._lock:
            self._conversations[conversation.id] = conversation
            self._locks[conversation.id] = asyncio.Lock()
        return conversation

    async def get(self, conversation_id: str) -> Optional[Conversation]:
        async with self._lock:
            return self._conversations.get(conversation_id)

    async def save(self, conversation: Conversation) -> None:
        conversation.last_activity_at = datetime.now(timezone.utc)
        async with self._lock:
            self._conversations[conversation.id] = conversation

    async def list_for_customer(self, customer_id: str) -> list[Conversation]:
        async with self._lock:
            return [c for c in self._conversations.values() if c.customer_id == customer_id]

    async def lock_for(self, conversation_id: str) -> Optional[asyncio.Lock]:
        """Message lock for a known conversation; None for unknown ids."""
        async with self._lock:
            return self._locks.get(conversation_id)

    async def mark_abandoned(self) -> int:
        """Flag active conversations idle for longer than the idle window."""
        now = datetime.now(timezone.utc)
        count = 0
        async with self._lock:
            for conversation in self._conversations.values():
                if (
                    conversation.status == ConversationStatus.ACTIVE
                    and now - conversation.last_activity_at > self._idle
                ):
                    conversation.status = ConversationStatus.ABANDONED
                    count += 1
        return count
