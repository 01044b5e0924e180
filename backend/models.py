"""Pydantic models for the Landing Zone portal API requests and responses."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from lz_engine.catalog import ParameterType, TemplateCategory
from lz_engine.progress import LandingZoneStatus
from lz_engine.requirements import CloudProviderType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# --- Enums ---

class CustomerStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    SUSPENDED = "Suspended"
    TRIAL = "Trial"


class DeploymentRunStatus(str, Enum):
    STARTING = "Starting"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


# --- Customers ---

class CloudProvider(BaseModel):
    id: str = Field(default_factory=_new_id)
    type: CloudProviderType
    display_name: str = ""
    configuration: dict[str, str] = Field(default_factory=dict)
    is_default: bool = False
    is_active: bool = True
    configured_at: datetime = Field(default_factory=_utcnow)


class CustomerLandingZone(BaseModel):
    """A landing zone instance deployed for a customer."""
    id: str = Field(default_factory=_new_id)
    customer_id: str
    name: str
    environment: str = "dev"
    template_id: str
    cloud_provider_id: str = ""
    status: LandingZoneStatus = LandingZoneStatus.REQUESTED
    parameters: dict[str, Any] = Field(default_factory=dict)
    region: Optional[str] = None
    resource_group_name: Optional[str] = None
    current_monthly_cost: Optional[float] = None
    created_at: datetime = Field(default_factory=_utcnow)
    deployed_at: Optional[datetime] = None


class Customer(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    contact_email: str
    company_name: Optional[str] = None
    status: CustomerStatus = CustomerStatus.ACTIVE
    created_at: datetime = Field(default_factory=_utcnow)
    last_updated: datetime = Field(default_factory=_utcnow)
    cloud_providers: list[CloudProvider] = Field(default_factory=list)
    landing_zones: list[CustomerLandingZone] = Field(default_factory=list)

    def default_cloud_provider(self) -> Optional[CloudProvider]:
        for provider in self.cloud_providers:
            if provider.is_default:
                return provider
        return None


class CreateCustomerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact_email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    company_name: Optional[str] = None


class UpdateCustomerRequest(BaseModel):
    name: Optional[str] = None
    contact_email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    company_name: Optional[str] = None
    status: Optional[CustomerStatus] = None


class CloudProviderConfiguration(BaseModel):
    type: CloudProviderType
    display_name: str = ""
    configuration: dict[str, str] = Field(default_factory=dict)
    is_default: bool = False


# --- Templates ---

class TemplateParameterModel(BaseModel):
    name: str
    display_name: str = ""
    description: str = ""
    type: ParameterType = ParameterType.STRING
    default_value: Any = None
    required: bool = False
    allowed_values: Optional[list[str]] = None


class CreateTemplateRequest(BaseModel):
    name: str = ""
    description: str = ""
    version: Optional[str] = None
    category: TemplateCategory = TemplateCategory.CUSTOM_AI
    supported_cloud_providers: list[CloudProviderType] = Field(default_factory=list)
    parameters: dict[str, TemplateParameterModel] = Field(default_factory=dict)
    required_features: list[str] = Field(default_factory=list)
    estimated_monthly_cost: Optional[float] = Field(None, ge=0)
    capabilities: list[str] = Field(default_factory=list)


class UpdateTemplateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    category: Optional[TemplateCategory] = None
    supported_cloud_providers: Optional[list[CloudProviderType]] = None
    parameters: Optional[dict[str, TemplateParameterModel]] = None
    required_features: Optional[list[str]] = None
    estimated_monthly_cost: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    capabilities: Optional[list[str]] = None


class CloneTemplateRequest(BaseModel):
    new_name: str = Field(..., min_length=1, max_length=200)


class TemplateValidationResult(BaseModel):
    template_id: str
    is_valid: bool
    validation_date: datetime = Field(default_factory=_utcnow)
    errors: list[str] = []
    warnings: list[str] = []


# --- Deployment runner ---

class DeploymentRequest(BaseModel):
    project_name: str = ""
    environment: str = ""
    location: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


class DeploymentRun(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    status: DeploymentRunStatus = DeploymentRunStatus.STARTING
    resource_group: str
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: Optional[datetime] = None
    operations: list[str] = Field(default_factory=list)
    error_message: Optional[str] = None


class DeploymentValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = []
    validated_at: datetime = Field(default_factory=_utcnow)
