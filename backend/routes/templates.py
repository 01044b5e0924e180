"""Template routes: catalog browsing, editing, cloning and validation."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from backend.models import (
    CloneTemplateRequest,
    CreateTemplateRequest,
    TemplateParameterModel,
    TemplateValidationResult,
    UpdateTemplateRequest,
)
from lz_engine.catalog import (
    CATEGORY_INFO,
    LandingZoneTemplate,
    TemplateCategory,
    TemplateParameter,
    default_parameters,
    validate_template,
)
from lz_engine.requirements import CloudProviderType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates")


def _not_found(template_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Template {template_id} not found")


def _to_parameters(parameters: dict[str, TemplateParameterModel]) -> dict[str, TemplateParameter]:
    return {key: TemplateParameter(**param.model_dump()) for key, param in parameters.items()}


@router.get("", response_model=list[LandingZoneTemplate])
async def list_templates(request: Request):
    return request.app.state.catalog.list()


@router.get("/categories")
async def list_categories():
    """Template categories with typical monthly cost ranges."""
    return [{**info, "type": info["type"].value} for info in CATEGORY_INFO]


@router.get("/category/{category}", response_model=list[LandingZoneTemplate])
async def list_by_category(category: TemplateCategory, request: Request):
    return request.app.state.catalog.by_category(category)


@router.get("/cloud-provider/{provider}", response_model=list[LandingZoneTemplate])
async def list_by_cloud_provider(provider: CloudProviderType, request: Request):
    return request.app.state.catalog.by_cloud_provider(provider)


@router.get("/{template_id}", response_model=LandingZoneTemplate)
async def get_template(template_id: str, request: Request):
    template = request.app.state.catalog.get_by_id(template_id)
    if template is None:
        raise _not_found(template_id)
    return template


@router.post("", response_model=LandingZoneTemplate, status_code=201)
async def create_template(body: CreateTemplateRequest, request: Request):
    """Add a template to the catalog. Invalid templates are rejected with their errors."""
    template = LandingZoneTemplate(
        name=body.name,
        description=body.description,
        version=body.version or "1.0.0",
        category=body.category,
        supported_cloud_providers=list(body.supported_cloud_providers),
        parameters=_to_parameters(body.parameters),
        required_features=list(body.required_features),
        estimated_monthly_cost=body.estimated_monthly_cost,
        capabilities=list(body.capabilities),
    )
    errors = validate_template(template)
    if errors:
        logger.warning("Rejected template %r: %s", body.name, "; ".join(errors))
        raise HTTPException(status_code=400, detail={"message": "Template validation failed", "errors": errors})

    logger.info("Created template %s (%s)", template.id, template.name)
    return request.app.state.catalog.add(template)


@router.put("/{template_id}", response_model=LandingZoneTemplate)
async def update_template(template_id: str, body: UpdateTemplateRequest, request: Request):
    changes: dict[str, Any] = body.model_dump(exclude={"parameters"})
    if body.parameters is not None:
        changes["parameters"] = _to_parameters(body.parameters)

    template = request.app.state.catalog.update(template_id, changes)
    if template is None:
        raise _not_found(template_id)
    logger.info("Updated template %s", template_id)
    return template


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: str, request: Request):
    if not request.app.state.catalog.remove(template_id):
        raise _not_found(template_id)
    logger.info("Deleted template %s", template_id)


@router.post("/{template_id}/clone", response_model=LandingZoneTemplate, status_code=201)
async def clone_template(template_id: str, body: CloneTemplateRequest, request: Request):
    """Copy a template under a new name."""
    cloned = request.app.state.catalog.clone(template_id, body.new_name)
    if cloned is None:
        raise _not_found(template_id)
    logger.info("Cloned template %s as %s", template_id, cloned.id)
    return cloned


@router.post("/{template_id}/validate", response_model=TemplateValidationResult)
async def validate_existing_template(template_id: str, request: Request):
    template = request.app.state.catalog.get_by_id(template_id)
    if template is None:
        raise _not_found(template_id)
    errors = validate_template(template)
    return TemplateValidationResult(template_id=template_id, is_valid=not errors, errors=errors)


@router.get("/{template_id}/parameters", response_model=dict[str, Any])
async def get_default_parameters(template_id: str, request: Request):
    """Default value for each template parameter that has one."""
    template = request.app.state.catalog.get_by_id(template_id)
    if template is None:
        raise _not_found(template_id)
    return default_parameters(template)
