"""AI assistant routes: guided conversation, recommendations and deployment."""

import logging

from fastapi import APIRouter, HTTPException, Request

from backend.conversation.models import (
    Conversation,
    ConversationSummary,
    DeployFromAIRequest,
    Message,
    SendMessageRequest,
    StartConversationRequest,
)
from backend.conversation.orchestrator import AssistantOrchestrator, NotFoundError
from backend.models import CustomerLandingZone
from lz_engine.progress import DeploymentProgress
from lz_engine.recommendation import Recommendation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai-assistant")


def _get_orchestrator(request: Request) -> AssistantOrchestrator:
    return request.app.state.orchestrator


@router.post("/conversations", response_model=Conversation)
async def start_conversation(body: StartConversationRequest, request: Request):
    """Start a new conversation for landing zone creation."""
    try:
        return await _get_orchestrator(request).start_conversation(body.customer_id, body.initial_message)
    except Exception:
        logger.error("Error starting conversation for customer %s", body.customer_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/conversations/{conversation_id}/messages", response_model=Message)
async def send_message(conversation_id: str, body: SendMessageRequest, request: Request):
    """Send a message to the assistant and get its reply."""
    try:
        return await _get_orchestrator(request).handle_message(conversation_id, body.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.error("Error processing message for conversation %s", conversation_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/conversations/{conversation_id}", response_model=Conversation)
async def get_conversation(conversation_id: str, request: Request):
    """Get full conversation state."""
    conversation = await _get_orchestrator(request).get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail=f"Conversation {conversation_id} not found")
    return conversation


@router.get("/customers/{customer_id}/conversations", response_model=list[ConversationSummary])
async def list_customer_conversations(customer_id: str, request: Request):
    """List a customer's conversations."""
    conversations = await _get_orchestrator(request).list_customer_conversations(customer_id)
    return [
        ConversationSummary(
            id=c.id,
            customer_id=c.customer_id,
            status=c.status,
            stage=c.stage,
            message_count=len(c.messages),
            landing_zone_id=c.landing_zone_id,
            started_at=c.started_at,
            last_activity_at=c.last_activity_at,
        )
        for c in conversations
    ]


@router.post("/conversations/{conversation_id}/recommendations", response_model=Recommendation)
async def generate_recommendations(conversation_id: str, request: Request):
    """Generate ranked template recommendations from the conversation so far."""
    try:
        return await _get_orchestrator(request).generate_recommendation(conversation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.error("Error generating recommendations for conversation %s", conversation_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/conversations/{conversation_id}/deploy", response_model=CustomerLandingZone)
async def deploy_from_recommendation(conversation_id: str, body: DeployFromAIRequest, request: Request):
    """Deploy a landing zone based on the conversation's recommendation."""
    try:
        return await _get_orchestrator(request).deploy_from_recommendation(conversation_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.error("Error deploying landing zone from conversation %s", conversation_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/deployments/{landing_zone_id}/progress", response_model=DeploymentProgress)
async def get_deployment_progress(landing_zone_id: str, request: Request):
    """Poll deployment progress. Each call advances the simulated deployment."""
    try:
        return await _get_orchestrator(request).get_deployment_progress(landing_zone_id)
    except Exception:
        logger.error("Error retrieving deployment progress for %s", landing_zone_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
