"""pytest fixtures for replicate-mcp tests.

Provides:
- FakePredictionsAPI: Scripted stand-in for the Replicate predictions API
- fake_sleep: Recording sleep coroutine (no real delay)
- GatedSleep / MultiJobPredictionsAPI: Fakes for overlapping tool calls
- settings: Settings with a fake token and no dotenv file
- runner / handler: JobRunner and ToolHandler wired to the fakes
"""

import asyncio
from typing import Any, Optional

import pytest
import structlog

from replicate_mcp.core.config import Settings
from replicate_mcp.models.prediction import Prediction
from replicate_mcp.services.exceptions import RemoteError
from replicate_mcp.services.replicate.runner import JobRunner
from replicate_mcp.tools.handler import ToolHandler


class FakePredictionsAPI:
    """Predictions capability returning scripted responses.

    Poll responses are consumed in order; an item that is an exception is raised
    instead of returned. Once the script runs out, the last response repeats.
    """

    def __init__(
        self,
        polls: Optional[list[Any]] = None,
        created: Optional[Prediction] = None,
        create_error: Optional[Exception] = None,
    ):
        self.polls = list(polls or [])
        self.created = created or Prediction(id="pred-123", status="starting")
        self.create_error = create_error
        self.create_calls: list[dict[str, Any]] = []
        self.get_calls: list[str] = []

    async def create_prediction(self, payload: dict[str, Any]) -> Prediction:
        self.create_calls.append(payload)
        if self.create_error is not None:
            raise self.create_error
        return self.created

    async def get_prediction(self, prediction_id: str) -> Prediction:
        self.get_calls.append(prediction_id)
        if not self.polls:
            raise AssertionError("No scripted poll response left")
        response = self.polls.pop(0) if len(self.polls) > 1 else self.polls[0]
        if isinstance(response, Exception):
            raise response
        return response


class SleepRecorder:
    """Fake clock: records requested delays without suspending for real."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class GatedSleep:
    """Fake clock that suspends every caller until release() is called."""

    def __init__(self):
        self.calls: list[float] = []
        self._gate = asyncio.Event()

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await self._gate.wait()

    def release(self) -> None:
        self._gate.set()


class MultiJobPredictionsAPI:
    """Predictions capability serving several jobs at once.

    Created jobs get ids "job-1", "job-2", ... in creation order. Poll
    responses are scripted per job id and consumed in order.
    """

    def __init__(self, scripts: dict[str, list[Prediction]]):
        self.scripts = {job_id: list(polls) for job_id, polls in scripts.items()}
        self.create_calls: list[dict[str, Any]] = []
        self.get_calls: list[str] = []

    async def create_prediction(self, payload: dict[str, Any]) -> Prediction:
        self.create_calls.append(payload)
        return Prediction(id=f"job-{len(self.create_calls)}", status="starting")

    async def get_prediction(self, prediction_id: str) -> Prediction:
        self.get_calls.append(prediction_id)
        return self.scripts[prediction_id].pop(0)


async def yielding_sleep(seconds: float) -> None:
    """Fake clock that only yields to the event loop."""
    await asyncio.sleep(0)


def processing(prediction_id: str = "pred-123") -> Prediction:
    return Prediction(id=prediction_id, status="processing")


def succeeded(output: Any, prediction_id: str = "pred-123") -> Prediction:
    return Prediction(id=prediction_id, status="succeeded", output=output)


def remote_error(status_code: int = 500, body: str = "boom") -> RemoteError:
    return RemoteError(
        f"Replicate API error: {status_code}\n{body}", status_code=status_code, body=body
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() so later tests never write to a stale capture stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Settings with a fake token, isolated from any local .env file."""
    return Settings(_env_file=None, REPLICATE_API_TOKEN="r8_test_token")  # type: ignore[call-arg]


@pytest.fixture
def fake_sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fake_api() -> FakePredictionsAPI:
    """Fake API that succeeds on the first poll."""
    return FakePredictionsAPI(polls=[succeeded(["https://x/img.jpg"])])


@pytest.fixture
def runner(fake_api: FakePredictionsAPI, fake_sleep: SleepRecorder) -> JobRunner:
    return JobRunner(api=fake_api, model=None, sleep=fake_sleep)


@pytest.fixture
def handler(runner: JobRunner) -> ToolHandler:
    return ToolHandler(runner)
