"""Prediction job runner: create a prediction, poll it to a terminal state.

Each poll response is fed through evaluate_prediction(), the single
transition function of the job state machine:

    created -> polling -> polling ... -> succeeded | failed
                                     \\-> timed_out (attempt budget exhausted)

Polling uses a fixed interval with a hard attempt ceiling. The interval is
awaited through an injected sleep coroutine, so tests drive the loop with a
fake clock and scripted responses. A prediction abandoned on timeout is not
cancelled remotely.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog

from replicate_mcp.core.config import Settings
from replicate_mcp.models.prediction import GenerationRequest, Prediction, PredictionStatus
from replicate_mcp.services.exceptions import GenerationError, GenerationTimeoutError
from replicate_mcp.services.replicate.client import PredictionsAPI

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_MAX_POLL_ATTEMPTS = 60

SleepFunc = Callable[[float], Awaitable[None]]


class JobState(str, Enum):
    """Local view of a prediction's lifecycle."""

    CREATED = "created"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class PollOutcome:
    """Result of evaluating one poll response."""

    state: JobState
    output_url: Optional[str] = None
    error: Optional[str] = None


def evaluate_prediction(prediction: Prediction) -> PollOutcome:
    """Map one poll response to the next job state.

    Precedence:
        1. status "failed" -> FAILED ("Image generation failed"), even if error is set
        2. non-empty error -> FAILED carrying the error text
        3. status "succeeded" with at least one output -> SUCCEEDED with the first output
        4. anything else -> POLLING

    A "succeeded" prediction with no output yet keeps polling.
    """
    if prediction.status == PredictionStatus.FAILED.value:
        return PollOutcome(state=JobState.FAILED, error="Image generation failed")

    if prediction.error:
        return PollOutcome(
            state=JobState.FAILED, error=f"Replicate API error: {prediction.error}"
        )

    outputs = prediction.output_urls
    if prediction.status == PredictionStatus.SUCCEEDED.value and outputs:
        return PollOutcome(state=JobState.SUCCEEDED, output_url=outputs[0])

    return PollOutcome(state=JobState.POLLING)


class JobRunner:
    """Runs one image generation end to end per submit() call.

    Holds no per-job state, so concurrent submit() calls are independent.
    """

    def __init__(
        self,
        api: PredictionsAPI,
        model: Optional[str] = None,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize job runner.

        Args:
            api: Predictions capability (ReplicateClient or a test fake)
            model: Model identifier sent as "version"; None or empty omits it
            poll_interval_seconds: Fixed suspension before every poll
            max_attempts: Maximum number of poll calls per job
            sleep: Awaitable sleep function (injectable clock)
        """
        self.api = api
        self.model = model or None
        self.poll_interval_seconds = poll_interval_seconds
        self.max_attempts = max_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls, api: PredictionsAPI, settings: Settings, sleep: SleepFunc = asyncio.sleep
    ) -> "JobRunner":
        """Build a runner from application settings."""
        return cls(
            api=api,
            model=settings.replicate_model,
            poll_interval_seconds=settings.poll_interval_seconds,
            max_attempts=settings.max_poll_attempts,
            sleep=sleep,
        )

    def build_payload(self, request: GenerationRequest) -> dict:
        """Build the prediction creation body for a request."""
        payload: dict = {"input": request.to_input()}
        if self.model:
            payload["version"] = self.model
        return payload

    async def submit(self, request: GenerationRequest) -> str:
        """Generate one image and return its URL.

        Args:
            request: Validated generation request

        Returns:
            First output URL of the succeeded prediction (extra outputs are discarded)

        Raises:
            RemoteError: Create or poll call failed (not retried)
            GenerationError: Prediction failed or reported an error
            GenerationTimeoutError: No terminal state within max_attempts polls
        """
        start_time = time.monotonic()

        prediction = await self.api.create_prediction(self.build_payload(request))
        state = JobState.CREATED
        logger.info(
            "prediction.created",
            prediction_id=prediction.id,
            status=prediction.status,
            state=state.value,
        )

        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.poll_interval_seconds)

            current = await self.api.get_prediction(prediction.id)
            outcome = evaluate_prediction(current)
            state = outcome.state

            logger.debug(
                "prediction.polled",
                prediction_id=prediction.id,
                attempt=attempt,
                status=current.status,
                state=state.value,
            )

            if state == JobState.SUCCEEDED:
                logger.info(
                    "prediction.succeeded",
                    prediction_id=prediction.id,
                    image_url=outcome.output_url,
                    attempts=attempt,
                    duration_seconds=time.monotonic() - start_time,
                )
                return outcome.output_url  # type: ignore[return-value]

            if state == JobState.FAILED:
                logger.warning(
                    "prediction.failed",
                    prediction_id=prediction.id,
                    attempts=attempt,
                    error_message=outcome.error,
                )
                raise GenerationError(outcome.error)

        state = JobState.TIMED_OUT
        logger.warning(
            "prediction.timed_out",
            prediction_id=prediction.id,
            attempts=self.max_attempts,
            state=state.value,
        )
        raise GenerationTimeoutError("Timeout waiting for image generation")
