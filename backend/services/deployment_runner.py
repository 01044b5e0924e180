"""
Background landing zone deployment runner.

Simulates an infrastructure deployment as a fixed sequence of steps, each
taking a random delay with a small chance of failure. Every deployment runs
as its own asyncio task and can be cancelled.

Usage:
    runner = DeploymentRunner(step_delay=(0.0, 0.0), failure_rate=0.0)
    errors = runner.validate(request)
    run = await runner.deploy(request)
    await runner.wait(run.id)
"""

import asyncio
import logging
import random
import re
from datetime import datetime, timezone
from typing import Optional

from backend.models import DeploymentRequest, DeploymentRun, DeploymentRunStatus

logger = logging.getLogger(__name__)

DEPLOYMENT_STEPS = [
    "Validating parameters",
    "Creating resource group",
    "Deploying networking infrastructure",
    "Setting up security (Key Vault)",
    "Configuring storage",
    "Deploying container registry",
    "Setting up monitoring",
    "Deploying AKS cluster",
    "Configuring AI services",
    "Finalizing deployment",
]

VALID_ENVIRONMENTS = ("dev", "staging", "prod")
_PROJECT_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9\-]{2,20}$")


def default_request() -> DeploymentRequest:
    """A filled-in request clients can start from."""
    return DeploymentRequest(
        project_name="my-ai-project",
        environment="dev",
        location="eastus",
        parameters={
            "enablePrivateEndpoints": True,
            "aksNodeCount": 3,
            "aksVmSize": "Standard_D4s_v3",
            "aiNodeCount": 2,
            "aiVmSize": "Standard_NC4as_T4_v3",
            "storageAccountSku": "Standard_LRS",
            "openaiModels": [
                {"name": "gpt-35-turbo", "capacity": 30},
                {"name": "gpt-4", "capacity": 10},
                {"name": "text-embedding-ada-002", "capacity": 30},
            ],
        },
    )


class DeploymentStepError(RuntimeError):
    """A simulated step failed."""


class DeploymentRunner:
    def __init__(
        self,
        step_delay: tuple[float, float] = (2.0, 8.0),
        failure_rate: float = 0.05,
        rng: Optional[random.Random] = None,
    ):
        self._runs: dict[str, DeploymentRun] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._step_delay = step_delay
        self._failure_rate = failure_rate
        self._rng = rng or random.Random()

    def validate(self, request: DeploymentRequest) -> list[str]:
        """Return validation errors for a deployment request."""
        errors = []
        if not request.project_name:
            errors.append("Project name is required")
        elif not _PROJECT_NAME_RE.match(request.project_name):
            errors.append("Project name must start with a letter and contain 3-21 letters, digits or hyphens")
        if not request.environment:
            errors.append("Environment is required")
        elif request.environment.lower() not in VALID_ENVIRONMENTS:
            errors.append(f"Invalid environment. Must be one of: {', '.join(VALID_ENVIRONMENTS)}")
        if not request.location:
            errors.append("Location is required")
        if errors:
            logger.warning("Deployment validation failed: %s", "; ".join(errors))
        return errors

    async def deploy(self, request: DeploymentRequest) -> DeploymentRun:
        """Register a run and start executing it in the background."""
        run = DeploymentRun(
            name=f"deploy-{request.project_name}-{request.environment}",
            resource_group=f"rg-{request.project_name}-{request.environment}",
            operations=["Initializing deployment..."],
        )
        self._runs[run.id] = run
        self._tasks[run.id] = asyncio.create_task(self._execute(run))
        logger.info("Started deployment %s for project %s", run.id, request.project_name)
        return run

    async def _execute(self, run: DeploymentRun) -> None:
        run.status = DeploymentRunStatus.RUNNING
        try:
            for step in DEPLOYMENT_STEPS:
                run.operations.append(f"Starting: {step}")
                await asyncio.sleep(self._rng.uniform(*self._step_delay))
                run.operations.append(f"Completed: {step}")
                if self._rng.random() < self._failure_rate:
                    raise DeploymentStepError(f"Deployment failed during: {step}")

            run.status = DeploymentRunStatus.SUCCEEDED
            run.operations.append("Deployment completed successfully")
            logger.info("Deployment %s completed successfully", run.id)
        except asyncio.CancelledError:
            run.status = DeploymentRunStatus.CANCELLED
            run.operations.append("Deployment cancelled")
            logger.info("Deployment %s cancelled", run.id)
            raise
        except DeploymentStepError as e:
            run.status = DeploymentRunStatus.FAILED
            run.error_message = str(e)
            run.operations.append(f"Deployment failed: {e}")
            logger.error("Deployment %s failed: %s", run.id, e)
        finally:
            run.end_time = datetime.now(timezone.utc)

    def status(self, deployment_id: str) -> Optional[DeploymentRun]:
        return self._runs.get(deployment_id)

    def recent(self, count: int = 10) -> list[DeploymentRun]:
        # Newest registered first among equal start times
        runs = sorted(reversed(list(self._runs.values())), key=lambda r: r.start_time, reverse=True)
        return runs[:count]

    async def cancel(self, deployment_id: str) -> Optional[DeploymentRun]:
        """Cancel a running deployment. Returns None for unknown ids."""
        run = self._runs.get(deployment_id)
        if run is None:
            return None
        task = self._tasks.get(deployment_id)
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._settle_cancelled(run)
        return run

    def _settle_cancelled(self, run: DeploymentRun) -> None:
        # Tasks cancelled before their first step never reach the handler
        if run.status in (DeploymentRunStatus.STARTING, DeploymentRunStatus.RUNNING):
            run.status = DeploymentRunStatus.CANCELLED
            run.operations.append("Deployment cancelled")
            run.end_time = datetime.now(timezone.utc)

    async def wait(self, deployment_id: str) -> Optional[DeploymentRun]:
        task = self._tasks.get(deployment_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return self._runs.get(deployment_id)

    async def shutdown(self) -> None:
        """Cancel every unfinished run."""
        pending = {run_id: t for run_id, t in self._tasks.items() if not t.done()}
        if not pending:
            return
        for task in pending.values():
            task.cancel()
        await asyncio.gather(*pending.values(), return_exceptions=True)
        for run_id in pending:
            self._settle_cancelled(self._runs[run_id])
        logger.info("Cancelled %d unfinished deployments on shutdown", len(pending))
