"""
Landing zone template catalog.

Seed data for the built-in AI landing zone templates plus an in-memory
catalog with lookup, filtering, cloning and validation. Templates are
read-only reference data for the recommendation flow.
"""

import copy
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from lz_engine.requirements import CloudProviderType


class TemplateCategory(str, Enum):
    BASIC_AI = 'BasicAI'
    ENTERPRISE_AI = 'EnterpriseAI'
    MLOPS = 'MLOps'
    DATA_SCIENCE = 'DataScience'
    CUSTOM_AI = 'CustomAI'


class ParameterType(str, Enum):
    STRING = 'String'
    NUMBER = 'Number'
    BOOLEAN = 'Boolean'
    LIST = 'List'
    OBJECT = 'Object'


# Capability tags a template can advertise
GPU_COMPUTE = 'gpu_compute'


@dataclass
class TemplateParameter:
    name: str
    display_name: str = ''
    description: str = ''
    type: ParameterType = ParameterType.STRING
    default_value: Any = None
    required: bool = False
    allowed_values: Optional[List[str]] = None


@dataclass
class LandingZoneTemplate:
    """Reusable infrastructure blueprint with parameters and a cost estimate."""
    name: str
    description: str = ''
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    version: str = '1.0.0'
    category: TemplateCategory = TemplateCategory.CUSTOM_AI
    supported_cloud_providers: List[CloudProviderType] = field(default_factory=list)
    parameters: Dict[str, TemplateParameter] = field(default_factory=dict)
    required_features: List[str] = field(default_factory=list)
    estimated_monthly_cost: Optional[float] = None
    is_active: bool = True
    capabilities: List[str] = field(default_factory=list)

    @property
    def supports_gpu(self) -> bool:
        return GPU_COMPUTE in self.capabilities


def _param(name, display_name, description, type_, default, required, allowed=None):
    return TemplateParameter(
        name=name,
        display_name=display_name,
        description=description,
        type=type_,
        default_value=default,
        required=required,
        allowed_values=allowed,
    )


def seed_templates() -> List[LandingZoneTemplate]:
    """Built-in templates, freshly constructed on each call."""
    return [
        LandingZoneTemplate(
            id='template-basic-ai',
            name='Basic AI Development',
            description='Simple AI development environment with ML workspace and basic compute',
            version='1.0.0',
            category=TemplateCategory.BASIC_AI,
            supported_cloud_providers=[CloudProviderType.AZURE, CloudProviderType.AWS],
            estimated_monthly_cost=500.0,
            parameters={
                'environment': _param('environment', 'Environment', 'Deployment environment',
                                      ParameterType.STRING, 'dev', True, ['dev', 'staging', 'prod']),
                'nodeCount': _param('nodeCount', 'Node Count', 'Number of compute nodes',
                                    ParameterType.NUMBER, 2, True),
            },
            required_features=['Machine Learning', 'Basic Storage'],
        ),
        LandingZoneTemplate(
            id='template-enterprise-ai',
            name='Enterprise AI Platform',
            description='Full enterprise AI platform with security, compliance, and governance',
            version='1.2.0',
            category=TemplateCategory.ENTERPRISE_AI,
            supported_cloud_providers=[CloudProviderType.AZURE],
            estimated_monthly_cost=2500.0,
            parameters={
                'enablePrivateEndpoints': _param('enablePrivateEndpoints', 'Private Endpoints',
                                                 'Enable private network endpoints',
                                                 ParameterType.BOOLEAN, True, False),
                'nodeCount': _param('nodeCount', 'Node Count', 'Number of compute nodes',
                                    ParameterType.NUMBER, 5, True),
            },
            required_features=['Machine Learning', 'Data Lake', 'Security', 'Compliance'],
            capabilities=[GPU_COMPUTE],
        ),
        LandingZoneTemplate(
            id='template-mlops',
            name='MLOps Pipeline',
            description='Complete MLOps pipeline with CI/CD for machine learning models',
            version='1.1.0',
            category=TemplateCategory.MLOPS,
            supported_cloud_providers=[CloudProviderType.AZURE, CloudProviderType.AWS],
            estimated_monthly_cost=1200.0,
            parameters={
                'pipelineType': _param('pipelineType', 'Pipeline Type', 'Type of MLOps pipeline',
                                       ParameterType.STRING, 'standard', True,
                                       ['basic', 'standard', 'advanced']),
            },
            required_features=['Machine Learning', 'CI/CD', 'Model Registry'],
        ),
    ]


CATEGORY_INFO = [
    {'type': TemplateCategory.BASIC_AI, 'name': 'Basic AI Development',
     'description': 'Simple AI development environments for small teams and proof-of-concept projects',
     'estimated_cost_range': {'min': 200.0, 'max': 800.0}},
    {'type': TemplateCategory.ENTERPRISE_AI, 'name': 'Enterprise AI Platform',
     'description': 'Production-ready AI platforms with enterprise security and compliance',
     'estimated_cost_range': {'min': 1500.0, 'max': 5000.0}},
    {'type': TemplateCategory.MLOPS, 'name': 'MLOps Pipeline',
     'description': 'Complete machine learning operations with CI/CD and model management',
     'estimated_cost_range': {'min': 800.0, 'max': 2500.0}},
    {'type': TemplateCategory.DATA_SCIENCE, 'name': 'Data Science Workspace',
     'description': 'Collaborative environments for data science teams and research',
     'estimated_cost_range': {'min': 400.0, 'max': 1500.0}},
    {'type': TemplateCategory.CUSTOM_AI, 'name': 'Custom AI Solution',
     'description': 'Flexible templates for specialized AI use cases and requirements',
     'estimated_cost_range': {'min': 300.0, 'max': 3000.0}},
]


_UPDATABLE_FIELDS = (
    'name', 'description', 'version', 'category', 'supported_cloud_providers',
    'parameters', 'required_features', 'estimated_monthly_cost', 'is_active', 'capabilities',
)


def validate_template(template: LandingZoneTemplate) -> List[str]:
    """Return a list of validation errors; empty when the template is valid."""
    errors = []
    if not template.name:
        errors.append('Template name is required')
    if not template.description:
        errors.append('Template description is required')
    if not template.supported_cloud_providers:
        errors.append('At least one cloud provider must be supported')
    for key, param in template.parameters.items():
        if not param.name:
            errors.append(f'Parameter {key} must have a name')
        if param.required and param.default_value is None:
            errors.append(f'Required parameter {key} must have a default value')
    return errors


def default_parameters(template: LandingZoneTemplate) -> Dict[str, Any]:
    """Parameter defaults for a template, skipping parameters without one."""
    return {
        key: param.default_value
        for key, param in template.parameters.items()
        if param.default_value is not None
    }


class TemplateCatalog:
    """In-memory template catalog."""

    def __init__(self, seed: bool = True):
        self.templates: List[LandingZoneTemplate] = []
        if seed:
            self.templates.extend(seed_templates())

    def list(self, active_only: bool = False) -> List[LandingZoneTemplate]:
        if active_only:
            return [t for t in self.templates if t.is_active]
        return list(self.templates)

    def get_by_id(self, template_id: str) -> Optional[LandingZoneTemplate]:
        for t in self.templates:
            if t.id == template_id:
                return t
        return None

    def by_category(self, category: TemplateCategory) -> List[LandingZoneTemplate]:
        return [t for t in self.templates if t.category == category and t.is_active]

    def by_cloud_provider(self, provider: CloudProviderType) -> List[LandingZoneTemplate]:
        return [t for t in self.templates if provider in t.supported_cloud_providers and t.is_active]

    def add(self, template: LandingZoneTemplate) -> LandingZoneTemplate:
        self.templates.append(template)
        return template

    def update(self, template_id: str, changes: Dict[str, Any]) -> Optional[LandingZoneTemplate]:
        """Apply non-empty changes to a template. Returns None if not found."""
        template = self.get_by_id(template_id)
        if template is None:
            return None
        for key in _UPDATABLE_FIELDS:
            value = changes.get(key)
            if value is None:
                continue
            if isinstance(value, (str, list, dict)) and not value:
                continue
            setattr(template, key, value)
        return template

    def remove(self, template_id: str) -> bool:
        template = self.get_by_id(template_id)
        if template is None:
            return False
        self.templates.remove(template)
        return True

    def clone(self, template_id: str, new_name: str) -> Optional[LandingZoneTemplate]:
        """Copy a template under a new name and id, version reset to 1.0.0."""
        source = self.get_by_id(template_id)
        if source is None:
            return None
        cloned = copy.deepcopy(source)
        cloned.id = str(uuid.uuid4())
        cloned.name = new_name
        cloned.description = f'Cloned from: {source.description}'
        cloned.version = '1.0.0'
        cloned.is_active = True
        return self.add(cloned)

    @property
    def count(self) -> int:
        return len(self.templates)
