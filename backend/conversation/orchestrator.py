import logging
import random
from datetime import datetime, timezone
from typing import Optional

from backend.ai.prompts import (
    GREETING_QUESTIONS,
    MAX_INLINE_QUESTIONS,
    RECOMMENDATION_FOLLOW_UP,
    STAGE_RESPONSES,
    WELCOME_QUESTIONS,
    missing_requirement_questions,
)
from backend.conversation.models import (
    Conversation,
    ConversationStatus,
    DeployFromAIRequest,
    Message,
    MessageType,
)
from backend.conversation.session_store import InMemoryConversationStore
from backend.models import CustomerLandingZone
from backend.services.customer_store import CustomerStore
from backend.services.progress_tracker import DeploymentProgressTracker
from lz_engine.catalog import TemplateCatalog
from lz_engine.progress import DeploymentProgress, LandingZoneStatus
from lz_engine.recommendation import Recommendation, build_recommendation
from lz_engine.requirements import KeywordRequirementExtractor, RequirementExtractor, Requirements
from lz_engine.stages import ConversationStage, determine_stage, is_regression

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ID = "template-basic-ai"
DEFAULT_LANDING_ZONE_NAME = "AI Project"


class NotFoundError(LookupError):
    """A conversation, customer or template id did not resolve."""


class AssistantOrchestrator:
    def __init__(
        self,
        conversations: InMemoryConversationStore,
        customers: CustomerStore,
        catalog: TemplateCatalog,
        progress: DeploymentProgressTracker,
        extractor: Optional[RequirementExtractor] = None,
        rng: Optional[random.Random] = None,
    ):
        self.conversations = conversations
        self.customers = customers
        self.catalog = catalog
        self.progress = progress
        self.extractor = extractor or KeywordRequirementExtractor()
        self._rng = rng or random.Random()

    async def _require_conversation(self, conversation_id: str) -> Conversation:
        conversation = await self.conversations.get(conversation_id)
        if conversation is None:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        return conversation

    async def start_conversation(self, customer_id: str, initial_message: Optional[str] = None) -> Conversation:
        """Open a conversation with a greeting, optionally answering a first message."""
        logger.info("Starting conversation for customer %s", customer_id)
        conversation = await self.conversations.create(customer_id)

        greeting = Message(
            type=MessageType.AI_RESPONSE,
            content=self._rng.choice(STAGE_RESPONSES[ConversationStage.GREETING]),
            metadata={
                "stage": ConversationStage.GREETING.value,
                "suggestedQuestions": list(WELCOME_QUESTIONS),
            },
        )
        conversation.messages.append(greeting)
        await self.conversations.save(conversation)

        if initial_message:
            await self.handle_message(conversation.id, initial_message)
        return conversation

    async def handle_message(self, conversation_id: str, text: str) -> Message:
        """Record a user message, update requirements and stage, and reply."""
        logger.info("Processing message for conversation %s", conversation_id)
        lock = await self.conversations.lock_for(conversation_id)
        if lock is None:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        async with lock:
            conversation = await self._require_conversation(conversation_id)

            conversation.messages.append(Message(type=MessageType.USER_MESSAGE, content=text))
            conversation.requirements = self.extractor.extract(text, conversation.requirements)

            stage = determine_stage(conversation.user_message_count(), conversation.requirements)
            if is_regression(conversation.stage, stage):
                logger.info("Conversation %s moved back to %s", conversation_id, stage.value)
            conversation.stage = stage

            reply = self._compose_reply(stage, conversation.requirements)
            conversation.messages.append(reply)
            await self.conversations.save(conversation)
            return reply

    def _compose_reply(self, stage: ConversationStage, requirements: Requirements) -> Message:
        content = self._rng.choice(STAGE_RESPONSES[stage])
        metadata = {"stage": stage.value}

        if stage == ConversationStage.GREETING:
            metadata["suggestedQuestions"] = list(GREETING_QUESTIONS)
        elif stage == ConversationStage.REQUIREMENTS:
            questions = missing_requirement_questions(requirements)
            content += "\n\n" + "\n".join(f"• {q}" for q in questions[:MAX_INLINE_QUESTIONS])
            metadata["suggestedQuestions"] = questions
        elif stage == ConversationStage.RECOMMENDATION:
            content += RECOMMENDATION_FOLLOW_UP
            metadata["canGenerateRecommendations"] = True

        return Message(type=MessageType.AI_RESPONSE, content=content, metadata=metadata)

    async def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return await self.conversations.get(conversation_id)

    async def list_customer_conversations(self, customer_id: str) -> list[Conversation]:
        abandoned = await self.conversations.mark_abandoned()
        if abandoned:
            logger.info("Marked %d idle conversations abandoned", abandoned)
        return await self.conversations.list_for_customer(customer_id)

    async def generate_recommendation(self, conversation_id: str) -> Recommendation:
        """Score the active templates against the conversation's requirements."""
        logger.info("Generating recommendations for conversation %s", conversation_id)
        conversation = await self._require_conversation(conversation_id)
        templates = self.catalog.list(active_only=True)
        recommendation = build_recommendation(conversation.id, templates, conversation.requirements)
        logger.info(
            "Conversation %s: %d of %d templates recommended",
            conversation_id, len(recommendation.recommended_templates), len(templates),
        )
        return recommendation

    async def deploy_from_recommendation(
        self, conversation_id: str, request: DeployFromAIRequest
    ) -> CustomerLandingZone:
        """Create the landing zone on the customer and start tracking progress."""
        logger.info("Deploying landing zone from conversation %s", conversation_id)
        conversation = await self._require_conversation(conversation_id)

        customer = await self.customers.get(conversation.customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {conversation.customer_id} not found")

        template_id = request.selected_template_id or DEFAULT_TEMPLATE_ID
        if self.catalog.get_by_id(template_id) is None:
            raise NotFoundError(f"Template {template_id} not found")

        provider = customer.default_cloud_provider()
        landing_zone = CustomerLandingZone(
            customer_id=customer.id,
            name=request.project_name or DEFAULT_LANDING_ZONE_NAME,
            environment=request.environment,
            template_id=template_id,
            cloud_provider_id=provider.id if provider else "",
            status=LandingZoneStatus.PROVISIONING,
            parameters=dict(request.custom_parameters or {}),
            region=request.region or conversation.requirements.region,
        )
        await self.customers.add_landing_zone(customer.id, landing_zone)

        conversation.landing_zone_id = landing_zone.id
        conversation.status = ConversationStatus.COMPLETED
        conversation.messages.append(
            Message(
                type=MessageType.DEPLOYMENT_PROGRESS,
                content=f"Deployment of {landing_zone.name} started.",
                metadata={"landingZoneId": landing_zone.id, "templateId": template_id},
            )
        )
        await self.conversations.save(conversation)

        await self.progress.start(landing_zone.id)
        return landing_zone

    async def get_deployment_progress(self, landing_zone_id: str) -> DeploymentProgress:
        """Advance the simulated deployment one poll and mirror completion onto the landing zone."""
        progress = await self.progress.poll(landing_zone_id)
        if progress.status == LandingZoneStatus.DEPLOYED:
            landing_zone = await self.customers.find_landing_zone(landing_zone_id)
            if landing_zone is not None and landing_zone.status != LandingZoneStatus.DEPLOYED:
                landing_zone.status = LandingZoneStatus.DEPLOYED
                landing_zone.deployed_at = datetime.now(timezone.utc)
        return progress
