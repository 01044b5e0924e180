"""
Tests for the background deployment runner.
"""

import asyncio
import random

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from backend.models import DeploymentRequest, DeploymentRunStatus
from backend.services.deployment_runner import DEPLOYMENT_STEPS, DeploymentRunner


REQUEST = DeploymentRequest(project_name="vision-lab", environment="prod", location="westeurope")


def _runner(delay=0.0, failure_rate=0.0, seed=0) -> DeploymentRunner:
    return DeploymentRunner(step_delay=(delay, delay), failure_rate=failure_rate, rng=random.Random(seed))


class TestValidation:

    def test_valid(self):
        assert _runner().validate(REQUEST) == []

    def test_environment_case_insensitive(self):
        request = DeploymentRequest(project_name="vision-lab", environment="PROD", location="eastus")
        assert _runner().validate(request) == []

    def test_project_name_rules(self):
        for name in ["ab", "1project", "has space", "x" * 22]:
            request = DeploymentRequest(project_name=name, environment="dev", location="eastus")
            assert len(_runner().validate(request)) == 1, name

    def test_all_missing(self):
        assert _runner().validate(DeploymentRequest()) == [
            "Project name is required",
            "Environment is required",
            "Location is required",
        ]


class TestExecution:

    def test_successful_run(self):
        async def run():
            runner = _runner()
            started = await runner.deploy(REQUEST)
            assert started.status == DeploymentRunStatus.STARTING

            finished = await runner.wait(started.id)
            assert finished.status == DeploymentRunStatus.SUCCEEDED
            assert finished.end_time is not None
            assert finished.operations[0] == "Initializing deployment..."
            assert finished.operations[-1] == "Deployment completed successfully"
            assert len(finished.operations) == 2 + 2 * len(DEPLOYMENT_STEPS)

        asyncio.run(run())

    def test_failed_run(self):
        async def run():
            runner = _runner(failure_rate=1.0)
            started = await runner.deploy(REQUEST)
            finished = await runner.wait(started.id)
            assert finished.status == DeploymentRunStatus.FAILED
            assert finished.error_message == f"Deployment failed during: {DEPLOYMENT_STEPS[0]}"
            assert f"Completed: {DEPLOYMENT_STEPS[0]}" in finished.operations
            assert f"Starting: {DEPLOYMENT_STEPS[1]}" not in finished.operations

        asyncio.run(run())

    def test_cancel(self):
        async def run():
            runner = _runner(delay=30.0)
            started = await runner.deploy(REQUEST)
            await asyncio.sleep(0)
            cancelled = await runner.cancel(started.id)
            assert cancelled.status == DeploymentRunStatus.CANCELLED
            assert cancelled.operations[-1] == "Deployment cancelled"
            assert cancelled.end_time is not None

        asyncio.run(run())

    def test_cancel_before_first_step(self):
        async def run():
            runner = _runner(delay=30.0)
            started = await runner.deploy(REQUEST)
            cancelled = await runner.cancel(started.id)
            assert cancelled.status == DeploymentRunStatus.CANCELLED

        asyncio.run(run())

    def test_cancel_finished_run_is_noop(self):
        async def run():
            runner = _runner()
            started = await runner.deploy(REQUEST)
            await runner.wait(started.id)
            result = await runner.cancel(started.id)
            assert result.status == DeploymentRunStatus.SUCCEEDED

        asyncio.run(run())

    def test_unknown_ids(self):
        async def run():
            runner = _runner()
            assert runner.status("missing") is None
            assert await runner.cancel("missing") is None
            assert await runner.wait("missing") is None

        asyncio.run(run())

    def test_recent_newest_first(self):
        async def run():
            runner = _runner()
            ids = []
            for _ in range(3):
                run_ = await runner.deploy(REQUEST)
                ids.append(run_.id)
                await runner.wait(run_.id)
            assert [r.id for r in runner.recent()] == list(reversed(ids))
            assert len(runner.recent(2)) == 2

        asyncio.run(run())

    def test_shutdown_cancels_pending(self):
        async def run():
            runner = _runner(delay=30.0)
            runs = [await runner.deploy(REQUEST) for _ in range(2)]
            await asyncio.sleep(0)
            await runner.shutdown()
            assert all(r.status == DeploymentRunStatus.CANCELLED for r in runs)

        asyncio.run(run())
