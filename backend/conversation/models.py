from __future__ import annotations
from enum import Enum
from typing import Any, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field
import uuid

from lz_engine.requirements import Requirements
from lz_engine.stages import ConversationStage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageType(str, Enum):
    USER_MESSAGE = "UserMessage"
    AI_RESPONSE = "AIResponse"
    SYSTEM_MESSAGE = "SystemMessage"
    REQUIREMENT_COLLECTED = "RequirementCollected"
    TEMPLATE_RECOMMENDATION = "TemplateRecommendation"
    DEPLOYMENT_PROGRESS = "DeploymentProgress"


class ConversationStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    ABANDONED = "Abandoned"
    ERROR = "Error"


class Message(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: MessageType
    content: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: Optional[dict[str, Any]] = None


class Conversation(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    customer_id: str
    landing_zone_id: Optional[str] = None
    started_at: datetime = Field(default_factory=_utcnow)
    last_activity_at: datetime = Field(default_factory=_utcnow)
    status: ConversationStatus = ConversationStatus.ACTIVE
    stage: ConversationStage = ConversationStage.GREETING
    messages: list[Message] = Field(default_factory=list)
    requirements: Requirements = Field(default_factory=Requirements)

    def user_message_count(self) -> int:
        return sum(1 for m in self.messages if m.type == MessageType.USER_MESSAGE)


class StartConversationRequest(BaseModel):
    customer_id: str = Field(..., min_length=1)
    initial_message: Optional[str] = Field(None, max_length=10000)


class SendMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=10000)


class DeployFromAIRequest(BaseModel):
    project_name: Optional[str] = None
    environment: str = "dev"
    selected_template_id: Optional[str] = None
    custom_parameters: Optional[dict[str, Any]] = None
    region: Optional[str] = None


class ConversationSummary(BaseModel):
    id: str
    customer_id: str
    status: ConversationStatus
    stage: ConversationStage
    message_count: int
    landing_zone_id: Optional[str] = None
    started_at: datetime
    last_activity_at: datetime
