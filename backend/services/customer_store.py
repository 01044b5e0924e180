"""
In-memory customer store.

Seeded with one sample customer that has a default Azure subscription and a
deployed development landing zone. All state is process-lifetime only.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from backend.models import (
    CloudProvider,
    CloudProviderConfiguration,
    CreateCustomerRequest,
    Customer,
    CustomerLandingZone,
    CustomerStatus,
    UpdateCustomerRequest,
)
from lz_engine.progress import LandingZoneStatus
from lz_engine.requirements import CloudProviderType

logger = logging.getLogger(__name__)

SAMPLE_CUSTOMER_ID = "customer-sample-1"


def _sample_customer() -> Customer:
    now = datetime.now(timezone.utc)
    return Customer(
        id=SAMPLE_CUSTOMER_ID,
        name="John Smith",
        contact_email="john.smith@example.com",
        company_name="TechCorp AI Division",
        status=CustomerStatus.ACTIVE,
        created_at=now - timedelta(days=30),
        last_updated=now - timedelta(days=2),
        cloud_providers=[
            CloudProvider(
                id="cp-azure-1",
                type=CloudProviderType.AZURE,
                display_name="Production Azure",
                is_default=True,
                configuration={
                    "subscriptionId": "12345678-1234-1234-1234-123456789012",
                    "tenantId": "87654321-4321-4321-4321-210987654321",
                },
            )
        ],
        landing_zones=[
            CustomerLandingZone(
                id="lz-dev-001",
                customer_id=SAMPLE_CUSTOMER_ID,
                name="Development Environment",
                environment="dev",
                template_id="template-basic-ai",
                cloud_provider_id="cp-azure-1",
                status=LandingZoneStatus.DEPLOYED,
                parameters={"environment": "dev", "nodeCount": 3},
                resource_group_name="rg-techcorp-ai-dev",
                current_monthly_cost=450.0,
                created_at=now - timedelta(days=15),
                deployed_at=now - timedelta(days=14),
            )
        ],
    )


class CustomerStore:
    def __init__(self, seed: bool = True):
        self._customers: dict[str, Customer] = {}
        self._lock = asyncio.Lock()
        if seed:
            sample = _sample_customer()
            self._customers[sample.id] = sample

    async def list(self, status: Optional[CustomerStatus] = None) -> list[Customer]:
        async with self._lock:
            customers = list(self._customers.values())
        if status is not None:
            customers = [c for c in customers if c.status == status]
        return customers

    async def get(self, customer_id: str) -> Optional[Customer]:
        async with self._lock:
            return self._customers.get(customer_id)

    async def get_by_email(self, email: str) -> Optional[Customer]:
        async with self._lock:
            for customer in self._customers.values():
                if customer.contact_email.lower() == email.lower():
                    return customer
        return None

    async def create(self, request: CreateCustomerRequest) -> Customer:
        logger.info("Creating customer %s", request.name)
        customer = Customer(
            name=request.name,
            contact_email=request.contact_email,
            company_name=request.company_name,
        )
        async with self._lock:
            self._customers[customer.id] = customer
        return customer

    async def update(self, customer_id: str, request: UpdateCustomerRequest) -> Optional[Customer]:
        async with self._lock:
            customer = self._customers.get(customer_id)
            if customer is None:
                return None
            if request.name:
                customer.name = request.name
            if request.contact_email:
                customer.contact_email = request.contact_email
            if request.company_name:
                customer.company_name = request.company_name
            if request.status is not None:
                customer.status = request.status
            customer.last_updated = datetime.now(timezone.utc)
            return customer

    async def delete(self, customer_id: str) -> bool:
        logger.info("Deleting customer %s", customer_id)
        async with self._lock:
            return self._customers.pop(customer_id, None) is not None

    async def configure_cloud_provider(
        self, customer_id: str, config: CloudProviderConfiguration
    ) -> Optional[CloudProvider]:
        """Attach a cloud provider; a new default clears the previous one."""
        async with self._lock:
            customer = self._customers.get(customer_id)
            if customer is None:
                return None
            if config.is_default:
                for existing in customer.cloud_providers:
                    existing.is_default = False
            provider = CloudProvider(
                type=config.type,
                display_name=config.display_name,
                configuration=config.configuration,
                is_default=config.is_default,
            )
            customer.cloud_providers.append(provider)
            customer.last_updated = datetime.now(timezone.utc)
        logger.info("Configured %s provider for customer %s", config.type.value, customer_id)
        return provider

    async def add_landing_zone(self, customer_id: str, landing_zone: CustomerLandingZone) -> Optional[CustomerLandingZone]:
        async with self._lock:
            customer = self._customers.get(customer_id)
            if customer is None:
                return None
            customer.landing_zones.append(landing_zone)
            customer.last_updated = datetime.now(timezone.utc)
        return landing_zone

    async def find_landing_zone(self, landing_zone_id: str) -> Optional[CustomerLandingZone]:
        async with self._lock:
            for customer in self._customers.values():
                for lz in customer.landing_zones:
                    if lz.id == landing_zone_id:
                        return lz
        return None
