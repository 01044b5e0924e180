"""
Tests for conversation stage tracking.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from lz_engine.requirements import Requirements
from lz_engine.stages import (
    ConversationStage,
    can_transition,
    determine_stage,
    is_regression,
)


BASIC = Requirements(required_services=['Machine Learning'])
EMPTY = Requirements()


class TestDetermineStage:

    @pytest.mark.parametrize('count', [0, 1])
    def test_greeting_for_first_message(self, count):
        """Even complete requirements stay in greeting on the first message."""
        assert determine_stage(count, BASIC) == ConversationStage.GREETING

    def test_requirements_on_second_message(self):
        assert determine_stage(2, BASIC) == ConversationStage.REQUIREMENTS

    def test_recommendation_needs_three_messages_and_basic_info(self):
        assert determine_stage(3, BASIC) == ConversationStage.RECOMMENDATION
        assert determine_stage(7, BASIC) == ConversationStage.RECOMMENDATION

    def test_no_basic_info_stays_in_requirements(self):
        assert determine_stage(3, EMPTY) == ConversationStage.REQUIREMENTS
        assert determine_stage(10, Requirements(max_monthly_cost=400.0)) == ConversationStage.REQUIREMENTS

    def test_gpu_false_counts_as_basic_info(self):
        assert determine_stage(3, Requirements(requires_gpu=False)) == ConversationStage.RECOMMENDATION


class TestTransitions:

    def test_forward_moves_allowed(self):
        assert can_transition(ConversationStage.GREETING, ConversationStage.REQUIREMENTS)
        assert can_transition(ConversationStage.GREETING, ConversationStage.RECOMMENDATION)
        assert can_transition(ConversationStage.REQUIREMENTS, ConversationStage.RECOMMENDATION)

    def test_never_back_to_greeting(self):
        assert not can_transition(ConversationStage.REQUIREMENTS, ConversationStage.GREETING)
        assert not can_transition(ConversationStage.RECOMMENDATION, ConversationStage.GREETING)

    def test_recommendation_can_fall_back(self):
        assert can_transition(ConversationStage.RECOMMENDATION, ConversationStage.REQUIREMENTS)
        assert is_regression(ConversationStage.RECOMMENDATION, ConversationStage.REQUIREMENTS)
        assert not is_regression(ConversationStage.REQUIREMENTS, ConversationStage.RECOMMENDATION)

    def test_computed_stages_follow_table(self):
        """Walking message counts with a growing snapshot only takes allowed moves."""
        snapshots = [EMPTY, EMPTY, EMPTY, BASIC, BASIC]
        current = ConversationStage.GREETING
        for count, req in enumerate(snapshots, start=1):
            nxt = determine_stage(count, req)
            assert can_transition(current, nxt)
            current = nxt
        assert current == ConversationStage.RECOMMENDATION
