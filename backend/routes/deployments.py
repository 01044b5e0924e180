"""Deployment routes: background landing zone deployments."""

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from backend.models import DeploymentRequest, DeploymentRun, DeploymentValidationResponse
from backend.services.deployment_runner import DeploymentRunner, default_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/deployment")


def _get_runner(request: Request) -> DeploymentRunner:
    return request.app.state.deployment_runner


@router.post("/deploy", response_model=DeploymentRun, status_code=202)
async def deploy(body: DeploymentRequest, request: Request):
    """Validate a request and start the deployment in the background."""
    runner = _get_runner(request)
    errors = runner.validate(body)
    if errors:
        raise HTTPException(status_code=400, detail={"message": "Invalid deployment request", "errors": errors})
    try:
        return await runner.deploy(body)
    except Exception:
        logger.error("Error starting deployment for project %s", body.project_name, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to start deployment")


@router.get("/status/{deployment_id}", response_model=DeploymentRun)
async def deployment_status(deployment_id: str, request: Request):
    run = _get_runner(request).status(deployment_id)
    if run is None:
        raise HTTPException(status_code=404, detail=f"Deployment {deployment_id} not found")
    return run


@router.get("/recent", response_model=list[DeploymentRun])
async def recent_deployments(request: Request, count: int = Query(10, ge=1, le=100)):
    return _get_runner(request).recent(count)


@router.post("/validate", response_model=DeploymentValidationResponse)
async def validate_deployment(body: DeploymentRequest, request: Request):
    errors = _get_runner(request).validate(body)
    return DeploymentValidationResponse(is_valid=not errors, errors=errors)


@router.post("/{deployment_id}/cancel", response_model=DeploymentRun)
async def cancel_deployment(deployment_id: str, request: Request):
    run = await _get_runner(request).cancel(deployment_id)
    if run is None:
        raise HTTPException(status_code=404, detail=f"Deployment {deployment_id} not found")
    return run


@router.get("/template", response_model=DeploymentRequest)
async def deployment_template():
    """Default deployment parameters."""
    return default_request()
