"""
Deployment progress simulation.

Each poll advances a landing zone's percentage by a random step and maps the
percentage onto a fixed list of step labels. Provisioning ends in Deployed
once the percentage reaches 100.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional


class LandingZoneStatus(str, Enum):
    REQUESTED = 'Requested'
    PROVISIONING = 'Provisioning'
    DEPLOYED = 'Deployed'
    FAILED = 'Failed'
    UPDATING = 'Updating'
    DESTROYING = 'Destroying'
    DESTROYED = 'Destroyed'


class StepStatus(str, Enum):
    PENDING = 'Pending'
    IN_PROGRESS = 'InProgress'
    COMPLETED = 'Completed'
    FAILED = 'Failed'
    SKIPPED = 'Skipped'


INITIAL_PERCENTAGE = 5
MIN_INCREMENT = 5
MAX_INCREMENT = 14
ESTIMATED_DURATION = timedelta(minutes=15)

INITIAL_STEP_LABEL = 'Initializing Deployment'
COMPLETE_STEP_LABEL = 'Deployment Complete'

# Labels reported as current_step while provisioning
STEP_LABELS = [
    'Validating Configuration',
    'Creating Resource Group',
    'Deploying Network',
    'Setting up Storage',
    'Configuring AI Services',
    'Finalizing Security',
]

# Named steps tracked per deployment
DEPLOYMENT_STEPS = [
    'Validate Configuration',
    'Create Resource Group',
    'Deploy Networking',
    'Setup Storage',
    'Configure AI Services',
    'Apply Security Settings',
    'Finalize Deployment',
]

_PERCENT_PER_LABEL = 16


@dataclass
class DeploymentStep:
    name: str
    description: str = ''
    status: StepStatus = StepStatus.PENDING
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None


@dataclass
class DeploymentProgress:
    landing_zone_id: str
    status: LandingZoneStatus = LandingZoneStatus.PROVISIONING
    progress_percentage: int = INITIAL_PERCENTAGE
    current_step: str = INITIAL_STEP_LABEL
    steps: List[DeploymentStep] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    estimated_completion_time: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (LandingZoneStatus.DEPLOYED, LandingZoneStatus.FAILED)


def step_label(percentage: int) -> str:
    """
    Current-step label for a percentage.

    Index is (percentage // 16) % 6, so 96-111 wraps back to the first label.
    """
    return STEP_LABELS[(percentage // _PERCENT_PER_LABEL) % len(STEP_LABELS)]


def completed_step_count(percentage: int, total: int = len(DEPLOYMENT_STEPS)) -> int:
    """Named steps considered finished at a percentage."""
    if percentage >= 100:
        return total
    return 1 + (percentage * (total - 1)) // 100


def _sync_steps(progress: DeploymentProgress, now: datetime) -> None:
    done = completed_step_count(progress.progress_percentage, len(progress.steps))
    for i, step in enumerate(progress.steps):
        if i < done:
            if step.status != StepStatus.COMPLETED:
                step.started_at = step.started_at or now
                step.completed_at = now
                step.status = StepStatus.COMPLETED
        elif i == done:
            if step.status == StepStatus.PENDING:
                step.started_at = now
                step.status = StepStatus.IN_PROGRESS


def initialize_progress(landing_zone_id: str, now: Optional[datetime] = None) -> DeploymentProgress:
    """New Provisioning progress: first step done, second underway."""
    now = now or datetime.now(timezone.utc)
    progress = DeploymentProgress(
        landing_zone_id=landing_zone_id,
        started_at=now,
        estimated_completion_time=now + ESTIMATED_DURATION,
        steps=[DeploymentStep(name=name) for name in DEPLOYMENT_STEPS],
    )
    _sync_steps(progress, now)
    return progress


def advance_progress(
    progress: DeploymentProgress,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> DeploymentProgress:
    """
    Advance a Provisioning deployment by one poll, in place.

    Adds a uniform random increment in [5, 14], clamped to 100. Any other
    status is returned untouched.
    """
    if progress.status != LandingZoneStatus.PROVISIONING:
        return progress

    rng = rng or random
    now = now or datetime.now(timezone.utc)

    increment = rng.randint(MIN_INCREMENT, MAX_INCREMENT)
    progress.progress_percentage = min(100, progress.progress_percentage + increment)

    if progress.progress_percentage >= 100:
        progress.status = LandingZoneStatus.DEPLOYED
        progress.current_step = COMPLETE_STEP_LABEL
        progress.estimated_completion_time = now
    else:
        progress.current_step = step_label(progress.progress_percentage)

    _sync_steps(progress, now)
    return progress
