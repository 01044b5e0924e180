"""
Tests for template scoring and ranking.

Validates:
1. Score adjustments for feature overlap, GPU and budget
2. Scores always lie in [0, 1]
3. Ranking is descending and stable for ties
4. Threshold filtering
"""

import random

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from lz_engine.catalog import GPU_COMPUTE, LandingZoneTemplate, seed_templates
from lz_engine.requirements import Requirements, extract_requirements
from lz_engine.scoring import (
    MIN_RECOMMENDATION_SCORE,
    matching_features,
    rank_templates,
    score_template,
)


def _templates():
    return {t.id: t for t in seed_templates()}


class TestScoreTemplate:
    """Test individual score adjustments."""

    def test_base_score_without_requirements(self):
        for template in seed_templates():
            assert score_template(template, Requirements()) == pytest.approx(0.5)

    def test_canonical_message_on_basic_template(self):
        """ML overlap 1/2 adds 0.15, cost 500 over a 400 ceiling subtracts 0.1."""
        req = extract_requirements('I need machine learning, budget $400, for dev')
        basic = _templates()['template-basic-ai']
        assert score_template(basic, req) == pytest.approx(0.55)

    def test_over_budget_penalty(self):
        basic = _templates()['template-basic-ai']
        assert score_template(basic, Requirements(max_monthly_cost=400.0)) == pytest.approx(0.4)

    def test_within_budget_bonus(self):
        basic = _templates()['template-basic-ai']
        assert score_template(basic, Requirements(max_monthly_cost=500.0)) == pytest.approx(0.7)

    def test_missing_cost_estimate_penalized(self):
        template = LandingZoneTemplate(name='no-cost', required_features=['Machine Learning'])
        assert score_template(template, Requirements(max_monthly_cost=10000.0)) == pytest.approx(0.4)

    def test_gpu_bonus_only_for_gpu_templates(self):
        req = Requirements(requires_gpu=True)
        templates = _templates()
        assert score_template(templates['template-enterprise-ai'], req) == pytest.approx(0.7)
        assert score_template(templates['template-basic-ai'], req) == pytest.approx(0.5)

    def test_gpu_bonus_follows_capability_not_name(self):
        """An 'Enterprise' name without the capability earns nothing."""
        named = LandingZoneTemplate(name='Enterprise Lookalike')
        tagged = LandingZoneTemplate(name='Small Box', capabilities=[GPU_COMPUTE])
        req = Requirements(requires_gpu=True)
        assert score_template(named, req) == pytest.approx(0.5)
        assert score_template(tagged, req) == pytest.approx(0.7)

    def test_feature_overlap_uses_larger_set(self):
        req = Requirements(required_services=['Machine Learning', 'Computer Vision',
                                              'Natural Language Processing', 'OpenAI Service'])
        basic = _templates()['template-basic-ai']
        # 1 match / max(2, 4)
        assert score_template(basic, req) == pytest.approx(0.5 + 0.25 * 0.3)

    def test_duplicate_services_dilute_overlap(self):
        req = Requirements(required_services=['Machine Learning'] * 4)
        basic = _templates()['template-basic-ai']
        assert matching_features(basic, req) == ['Machine Learning']
        assert score_template(basic, req) == pytest.approx(0.5 + 0.25 * 0.3)

    def test_score_clamped_to_one(self):
        template = LandingZoneTemplate(
            name='perfect',
            required_features=['Machine Learning'],
            estimated_monthly_cost=100.0,
            capabilities=[GPU_COMPUTE],
        )
        req = Requirements(required_services=['Machine Learning'], requires_gpu=True, max_monthly_cost=200.0)
        assert score_template(template, req) == 1.0

    def test_score_bounds_random_snapshots(self):
        rng = random.Random(7)
        services = ['Machine Learning', 'Computer Vision', 'Natural Language Processing',
                    'OpenAI Service', 'CI/CD', 'Security']
        templates = seed_templates() + [LandingZoneTemplate(name='bare')]
        for _ in range(200):
            req = Requirements(
                required_services=[rng.choice(services) for _ in range(rng.randint(0, 5))],
                requires_gpu=rng.choice([None, True, False]),
                max_monthly_cost=rng.choice([None, 0.0, 300.0, 1200.0, 99999.0]),
            )
            for template in templates:
                assert 0.0 <= score_template(template, req) <= 1.0

    def test_gpu_requirement_never_lowers_score(self):
        req = Requirements(required_services=['Machine Learning'], max_monthly_cost=1000.0)
        with_gpu = req.copy()
        with_gpu.requires_gpu = True
        for template in seed_templates():
            assert score_template(template, with_gpu) >= score_template(template, req)


class TestRankTemplates:
    """Test ordering and threshold filtering."""

    def test_canonical_ranking(self):
        req = extract_requirements('I need machine learning, budget $400, for dev')
        ranked = rank_templates(seed_templates(), req)

        assert [t.id for t, _ in ranked] == ['template-basic-ai', 'template-mlops', 'template-enterprise-ai']
        assert [s for _, s in ranked] == pytest.approx([0.55, 0.5, 0.475])

    def test_non_increasing(self):
        req = Requirements(required_services=['Machine Learning', 'CI/CD'], requires_gpu=True, max_monthly_cost=1500.0)
        scores = [s for _, s in rank_templates(seed_templates(), req)]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_input_order(self):
        templates = seed_templates()
        ranked = rank_templates(templates, Requirements())
        assert [t.id for t, _ in ranked] == [t.id for t in templates]

        reversed_ranked = rank_templates(list(reversed(templates)), Requirements())
        assert [t.id for t, _ in reversed_ranked] == [t.id for t in reversed(templates)]

    def test_over_budget_templates_still_clear_threshold(self):
        """The worst reachable score is 0.4, above the 0.3 cut-off."""
        cheap = LandingZoneTemplate(name='cheap', estimated_monthly_cost=100.0)
        ranked = rank_templates([cheap], Requirements(max_monthly_cost=50.0))
        assert len(ranked) == 1
        assert ranked[0][1] == pytest.approx(0.4)
        assert ranked[0][1] > MIN_RECOMMENDATION_SCORE

    def test_empty_input(self):
        assert rank_templates([], Requirements()) == []
