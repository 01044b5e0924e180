"""
Conversation stage tracking.

Three stages: greeting -> requirements -> recommendation. The stage is
recomputed from the user-message count and the requirements snapshot on every
message rather than stored as a transition log, so a conversation may move
back from recommendation to requirements. The transition table below makes
that explicit.
"""

from enum import Enum
from typing import Dict, FrozenSet

from lz_engine.requirements import Requirements


class ConversationStage(str, Enum):
    GREETING = 'greeting'
    REQUIREMENTS = 'requirements'
    RECOMMENDATION = 'recommendation'


GREETING_MAX_USER_MESSAGES = 1
RECOMMENDATION_MIN_USER_MESSAGES = 3

TRANSITIONS: Dict[ConversationStage, FrozenSet[ConversationStage]] = {
    ConversationStage.GREETING: frozenset({
        ConversationStage.GREETING,
        ConversationStage.REQUIREMENTS,
        ConversationStage.RECOMMENDATION,
    }),
    ConversationStage.REQUIREMENTS: frozenset({
        ConversationStage.REQUIREMENTS,
        ConversationStage.RECOMMENDATION,
    }),
    # Backward move happens when the completeness check stops holding
    ConversationStage.RECOMMENDATION: frozenset({
        ConversationStage.RECOMMENDATION,
        ConversationStage.REQUIREMENTS,
    }),
}


def determine_stage(user_message_count: int, requirements: Requirements) -> ConversationStage:
    """
    Compute the stage for a conversation.

    Args:
        user_message_count: User messages so far, including the one just received.
        requirements: Current requirements snapshot.
    """
    if user_message_count <= GREETING_MAX_USER_MESSAGES:
        return ConversationStage.GREETING
    if user_message_count >= RECOMMENDATION_MIN_USER_MESSAGES and requirements.has_basic_info():
        return ConversationStage.RECOMMENDATION
    return ConversationStage.REQUIREMENTS


def can_transition(current: ConversationStage, target: ConversationStage) -> bool:
    return target in TRANSITIONS[current]


def is_regression(current: ConversationStage, target: ConversationStage) -> bool:
    """True for the recommendation -> requirements move."""
    return current == ConversationStage.RECOMMENDATION and target == ConversationStage.REQUIREMENTS
