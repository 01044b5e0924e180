"""
Recommendation assembly.

Turns ranked templates into a recommendation: per-template match reasons and
parameter overrides, a cost estimate with a fixed percentage breakdown, the
generated deployment parameters and a fixed set of warnings.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from lz_engine.catalog import LandingZoneTemplate, TemplateCategory
from lz_engine.requirements import Requirements
from lz_engine.scoring import fits_budget, matching_features, rank_templates

DEFAULT_MONTHLY_COST = 500.0
DEFAULT_DAILY_COST = 16.67
DEFAULT_ESTIMATED_COST = 1000.0
LOW_BUDGET_THRESHOLD = 300.0

GPU_COST_MULTIPLIER = 1.5
PROD_COST_MULTIPLIER = 1.3

COST_BREAKDOWN_SHARES = [
    ('Compute', 0.60),
    ('Storage', 0.20),
    ('AI Services', 0.15),
    ('Networking', 0.05),
]

COST_OPTIMIZATION_SUGGESTIONS = [
    'Consider using spot instances for development workloads',
    'Enable auto-scaling to optimize compute costs',
    'Use lifecycle policies for storage cost optimization',
]


@dataclass
class RecommendedTemplate:
    template: LandingZoneTemplate
    match_score: float
    match_reasons: List[str] = field(default_factory=list)
    recommended_parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CostEstimate:
    estimated_monthly_cost: Optional[float] = None
    estimated_daily_cost: Optional[float] = None
    cost_breakdown: Dict[str, float] = field(default_factory=dict)
    cost_optimization_suggestions: List[str] = field(default_factory=list)


@dataclass
class Recommendation:
    conversation_id: str
    recommended_templates: List[RecommendedTemplate] = field(default_factory=list)
    requirements: Requirements = field(default_factory=Requirements)
    cost_estimate: CostEstimate = field(default_factory=CostEstimate)
    warnings: List[str] = field(default_factory=list)
    generated_parameters: Dict[str, Any] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def format_money(amount: float) -> str:
    """500.0 -> '500', 1234.5 -> '1234.5'; the figure as given, no padding."""
    if amount == int(amount):
        return str(int(amount))
    return str(amount)


def match_reasons(template: LandingZoneTemplate, requirements: Requirements) -> List[str]:
    reasons = []

    overlap = matching_features(template, requirements)
    if overlap:
        reasons.append(f"Includes required services: {', '.join(overlap)}")

    if fits_budget(template, requirements):
        reasons.append(f'Fits within budget (${format_money(template.estimated_monthly_cost)}/month)')

    if template.category == TemplateCategory.BASIC_AI and requirements.environment == 'dev':
        reasons.append('Perfect for development environments')

    if template.category == TemplateCategory.ENTERPRISE_AI and requirements.requires_gpu is True:
        reasons.append('Includes GPU compute for ML workloads')

    return reasons


def recommended_parameters(template: LandingZoneTemplate, requirements: Requirements) -> Dict[str, Any]:
    """Overrides for the parameters the template declares."""
    params = {}
    if 'environment' in template.parameters:
        params['environment'] = requirements.environment or 'dev'
    if 'nodeCount' in template.parameters:
        params['nodeCount'] = 3 if requirements.requires_gpu is True else 2
    if 'enablePrivateEndpoints' in template.parameters:
        params['enablePrivateEndpoints'] = requirements.environment == 'prod'
    return params


def estimate_cost(recommended: List[RecommendedTemplate], requirements: Requirements) -> CostEstimate:
    """
    Estimate monthly cost from the top-ranked template.

    GPU and production multipliers compose (GPU first). The breakdown is a
    static percentage split, not derived from the template's composition.
    """
    if not recommended:
        return CostEstimate(
            estimated_monthly_cost=DEFAULT_MONTHLY_COST,
            estimated_daily_cost=DEFAULT_DAILY_COST,
            cost_breakdown={'Base Infrastructure': DEFAULT_MONTHLY_COST},
        )

    top = recommended[0].template
    base = top.estimated_monthly_cost if top.estimated_monthly_cost is not None else DEFAULT_MONTHLY_COST

    if requirements.requires_gpu is True:
        base *= GPU_COST_MULTIPLIER
    if requirements.environment == 'prod':
        base *= PROD_COST_MULTIPLIER

    return CostEstimate(
        estimated_monthly_cost=round(base, 2),
        estimated_daily_cost=round(base / 30, 2),
        cost_breakdown={name: round(base * share, 2) for name, share in COST_BREAKDOWN_SHARES},
        cost_optimization_suggestions=list(COST_OPTIMIZATION_SUGGESTIONS),
    )


def generated_parameters(requirements: Requirements) -> Dict[str, Any]:
    return {
        'projectName': requirements.project_name or 'ai-project',
        'environment': requirements.environment or 'dev',
        'enableGPU': requirements.requires_gpu is True,
        'estimatedCost': (
            requirements.max_monthly_cost
            if requirements.max_monthly_cost is not None
            else DEFAULT_ESTIMATED_COST
        ),
    }


def warnings_for(requirements: Requirements) -> List[str]:
    warnings = []
    if requirements.max_monthly_cost is not None and requirements.max_monthly_cost < LOW_BUDGET_THRESHOLD:
        warnings.append('Budget may be insufficient for production AI workloads')
    if requirements.requires_gpu is True and requirements.environment == 'dev':
        warnings.append(
            'GPU instances can be expensive for development - consider using CPU-only for initial development'
        )
    if not requirements.environment:
        warnings.append('Environment not specified - defaulting to development')
    return warnings


def build_recommendation(
    conversation_id: str,
    templates: Iterable[LandingZoneTemplate],
    requirements: Requirements,
) -> Recommendation:
    """Score, rank and assemble a full recommendation."""
    recommended = [
        RecommendedTemplate(
            template=template,
            match_score=score,
            match_reasons=match_reasons(template, requirements),
            recommended_parameters=recommended_parameters(template, requirements),
        )
        for template, score in rank_templates(templates, requirements)
    ]

    return Recommendation(
        conversation_id=conversation_id,
        recommended_templates=recommended,
        requirements=requirements.copy(),
        cost_estimate=estimate_cost(recommended, requirements),
        warnings=warnings_for(requirements),
        generated_parameters=generated_parameters(requirements),
    )
