"""
Landing Zone Recommendation Engine

Core library for turning conversation messages into landing zone
requirements, scoring and ranking templates, assembling recommendations
and simulating deployment progress.

Everything here is deterministic given its inputs (randomness is injected).
"""

from lz_engine.requirements import (
    CloudProviderType,
    KeywordRequirementExtractor,
    RequirementExtractor,
    Requirements,
    apply_requirement_updates,
    extract_requirements,
)
from lz_engine.stages import ConversationStage, determine_stage
from lz_engine.catalog import (
    LandingZoneTemplate,
    TemplateCatalog,
    TemplateCategory,
    TemplateParameter,
    ParameterType,
    validate_template,
    default_parameters,
)
from lz_engine.scoring import score_template, rank_templates
from lz_engine.recommendation import (
    CostEstimate,
    Recommendation,
    RecommendedTemplate,
    build_recommendation,
)
from lz_engine.progress import (
    DeploymentProgress,
    DeploymentStep,
    LandingZoneStatus,
    StepStatus,
    advance_progress,
    initialize_progress,
    step_label,
)

__version__ = "0.1.0"
