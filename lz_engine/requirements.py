"""
Requirement extraction from free-text conversation messages.

Builds a structured requirements snapshot incrementally: each message's
matches are merged into the prior snapshot. Matching is plain case-insensitive
substring and regex matching, kept behind a small extractor interface so a
model-backed extractor can stand in without touching scoring or assembly.
"""

import copy
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class CloudProviderType(str, Enum):
    AZURE = 'Azure'
    AWS = 'AWS'
    GCP = 'GCP'
    ON_PREMISES = 'OnPremises'


ENVIRONMENTS = ('dev', 'staging', 'prod')

# (keywords, label): each matching rule appends its label, duplicates allowed
SERVICE_KEYWORDS = [
    (('machine learning', 'ml'), 'Machine Learning'),
    (('computer vision', 'vision'), 'Computer Vision'),
    (('nlp', 'natural language'), 'Natural Language Processing'),
    (('openai', 'gpt'), 'OpenAI Service'),
]

GPU_KEYWORDS = ('gpu', 'graphics')
COST_KEYWORDS = ('budget', 'cost')

# Checked in order; the first matching group wins
ENVIRONMENT_KEYWORDS = [
    (('development', 'dev'), 'dev'),
    (('production', 'prod'), 'prod'),
    (('staging', 'test'), 'staging'),
]

MONEY_PATTERN = re.compile(r'\$?(\d+(?:,\d{3})*(?:\.\d{2})?)')


@dataclass
class Requirements:
    """Requirements collected over the course of a conversation."""
    project_name: Optional[str] = None
    environment: Optional[str] = None
    preferred_cloud_provider: Optional[CloudProviderType] = None
    required_services: List[str] = field(default_factory=list)
    requires_gpu: Optional[bool] = None
    max_monthly_cost: Optional[float] = None
    region: Optional[str] = None

    def has_basic_info(self) -> bool:
        """Enough has been said to attempt a recommendation."""
        return bool(self.project_name) or bool(self.required_services) or self.requires_gpu is not None

    def copy(self) -> 'Requirements':
        return copy.deepcopy(self)


def _contains_any(text: str, keywords) -> bool:
    return any(k in text for k in keywords)


def parse_money(text: str) -> Optional[float]:
    """Return the first monetary figure in text, commas stripped."""
    match = MONEY_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(1).replace(',', ''))


def extract_requirements(
    message: str,
    prior: Optional[Requirements] = None,
    now: Optional[datetime] = None,
) -> Requirements:
    """
    Merge keyword matches from one user message into a requirements snapshot.

    Fields are only ever added or overwritten by a new match, never cleared,
    so a message without recognizable keywords returns an equal snapshot.

    Args:
        message: Raw user message text.
        prior: Snapshot accumulated so far. Not mutated.
        now: Clock used for the placeholder project name (local time).

    Returns:
        A new Requirements instance.
    """
    requirements = prior.copy() if prior is not None else Requirements()
    text = message.lower()

    if 'project' in text and requirements.project_name is None:
        stamp = (now or datetime.now()).strftime('%Y%m%d')
        requirements.project_name = f'AI Project {stamp}'

    for keywords, label in SERVICE_KEYWORDS:
        if _contains_any(text, keywords):
            requirements.required_services.append(label)

    if _contains_any(text, GPU_KEYWORDS):
        requirements.requires_gpu = True

    if _contains_any(text, COST_KEYWORDS):
        amount = parse_money(text)
        if amount is not None:
            requirements.max_monthly_cost = amount

    for keywords, environment in ENVIRONMENT_KEYWORDS:
        if _contains_any(text, keywords):
            requirements.environment = environment
            break

    return requirements


def apply_requirement_updates(requirements: Requirements, updates: Dict) -> Requirements:
    """
    Merge a structured update dict into a snapshot, in place.

    Follows the same additive rules as keyword extraction: services append,
    the GPU flag can only be switched on, scalar fields overwrite when present.
    Unknown environments and cloud providers are ignored.
    """
    if updates.get('project_name'):
        requirements.project_name = str(updates['project_name'])

    env = updates.get('environment')
    if isinstance(env, str) and env.lower() in ENVIRONMENTS:
        requirements.environment = env.lower()

    provider = updates.get('preferred_cloud_provider')
    if provider:
        for member in CloudProviderType:
            if member.value.lower() == str(provider).lower():
                requirements.preferred_cloud_provider = member
                break

    services = updates.get('required_services')
    if isinstance(services, list):
        requirements.required_services.extend(str(s) for s in services)
    elif services:
        requirements.required_services.append(str(services))

    if updates.get('requires_gpu') is True:
        requirements.requires_gpu = True

    cost = updates.get('max_monthly_cost')
    if cost is not None:
        amount = parse_money(str(cost))
        if amount is not None:
            requirements.max_monthly_cost = amount

    if updates.get('region'):
        requirements.region = str(updates['region'])

    return requirements


class RequirementExtractor:
    """Interface for turning a user message into an updated snapshot."""

    name = 'base'

    def extract(self, message: str, prior: Requirements) -> Requirements:
        raise NotImplementedError


class KeywordRequirementExtractor(RequirementExtractor):
    """Substring and regex rules; deterministic."""

    name = 'keyword'

    def __init__(self, clock=None):
        self._clock = clock or datetime.now

    def extract(self, message: str, prior: Requirements) -> Requirements:
        return extract_requirements(message, prior, now=self._clock())
