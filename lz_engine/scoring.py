"""
Template scoring against collected requirements.

A fixed base score with additive adjustments for feature overlap, GPU
capability and budget fit, clamped to [0, 1].
"""

from typing import Iterable, List, Tuple

from lz_engine.catalog import LandingZoneTemplate
from lz_engine.requirements import Requirements

BASE_SCORE = 0.5
FEATURE_WEIGHT = 0.3
GPU_BONUS = 0.2
BUDGET_BONUS = 0.2
BUDGET_PENALTY = 0.1

# Templates must score strictly above this to be recommended
MIN_RECOMMENDATION_SCORE = 0.3


def matching_features(template: LandingZoneTemplate, requirements: Requirements) -> List[str]:
    """Distinct template features that were asked for, in template order."""
    wanted = set(requirements.required_services)
    seen = []
    for feature in template.required_features:
        if feature in wanted and feature not in seen:
            seen.append(feature)
    return seen


def fits_budget(template: LandingZoneTemplate, requirements: Requirements) -> bool:
    ceiling = requirements.max_monthly_cost
    cost = template.estimated_monthly_cost
    return ceiling is not None and cost is not None and cost <= ceiling


def score_template(template: LandingZoneTemplate, requirements: Requirements) -> float:
    """
    Score how well a template matches the requirements.

    - Feature overlap: |features ∩ services| / max(|features|, |services|) * 0.3,
      only when services were requested.
    - GPU: +0.2 when a GPU is required and the template has GPU compute.
    - Budget: +0.2 within the ceiling, -0.1 over it (or with no cost estimate).

    Returns:
        Score in [0, 1].
    """
    score = BASE_SCORE

    if requirements.required_services:
        overlap = len(matching_features(template, requirements))
        denominator = max(len(template.required_features), len(requirements.required_services))
        score += overlap / denominator * FEATURE_WEIGHT

    if requirements.requires_gpu is True and template.supports_gpu:
        score += GPU_BONUS

    if requirements.max_monthly_cost is not None:
        if fits_budget(template, requirements):
            score += BUDGET_BONUS
        else:
            score -= BUDGET_PENALTY

    return max(0.0, min(1.0, score))


def rank_templates(
    templates: Iterable[LandingZoneTemplate],
    requirements: Requirements,
) -> List[Tuple[LandingZoneTemplate, float]]:
    """
    Score templates and keep those above the recommendation threshold.

    Sorted by descending score; equal scores keep their input order.
    """
    scored = []
    for template in templates:
        score = score_template(template, requirements)
        if score > MIN_RECOMMENDATION_SCORE:
            scored.append((template, score))
    return sorted(scored, key=lambda pair: pair[1], reverse=True)
