"""Customer routes: accounts, cloud providers and landing zones."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from backend.models import (
    CloudProvider,
    CloudProviderConfiguration,
    CreateCustomerRequest,
    Customer,
    CustomerLandingZone,
    CustomerStatus,
    UpdateCustomerRequest,
)
from lz_engine.catalog import LandingZoneTemplate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers")


def _not_found(customer_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Customer {customer_id} not found")


@router.get("", response_model=list[Customer])
async def list_customers(request: Request, status: Optional[CustomerStatus] = Query(None)):
    return await request.app.state.customers.list(status)


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(customer_id: str, request: Request):
    customer = await request.app.state.customers.get(customer_id)
    if customer is None:
        raise _not_found(customer_id)
    return customer


@router.post("", response_model=Customer, status_code=201)
async def create_customer(body: CreateCustomerRequest, request: Request):
    """Create a customer. Contact emails are unique."""
    store = request.app.state.customers
    if await store.get_by_email(body.contact_email) is not None:
        raise HTTPException(status_code=400, detail=f"Customer with email {body.contact_email} already exists")
    return await store.create(body)


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(customer_id: str, body: UpdateCustomerRequest, request: Request):
    customer = await request.app.state.customers.update(customer_id, body)
    if customer is None:
        raise _not_found(customer_id)
    return customer


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(customer_id: str, request: Request):
    if not await request.app.state.customers.delete(customer_id):
        raise _not_found(customer_id)


@router.post("/{customer_id}/cloud-providers", response_model=CloudProvider)
async def configure_cloud_provider(customer_id: str, body: CloudProviderConfiguration, request: Request):
    """Attach a cloud provider account to a customer."""
    provider = await request.app.state.customers.configure_cloud_provider(customer_id, body)
    if provider is None:
        raise _not_found(customer_id)
    return provider


@router.get("/{customer_id}/landing-zones", response_model=list[CustomerLandingZone])
async def list_landing_zones(customer_id: str, request: Request):
    customer = await request.app.state.customers.get(customer_id)
    if customer is None:
        raise _not_found(customer_id)
    return customer.landing_zones


@router.get("/{customer_id}/templates", response_model=list[LandingZoneTemplate])
async def list_available_templates(customer_id: str, request: Request):
    """Templates the customer can deploy."""
    customer = await request.app.state.customers.get(customer_id)
    if customer is None:
        raise _not_found(customer_id)
    return request.app.state.catalog.list(active_only=True)
