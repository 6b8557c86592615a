"""Replicate predictions API client."""

from typing import Any, Optional, Protocol

import httpx
import structlog
from pydantic import ValidationError

from replicate_mcp.models.prediction import Prediction
from replicate_mcp.services.exceptions import RemoteError

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.replicate.com"


class PredictionsAPI(Protocol):
    """Minimal capability the job runner needs from the remote service."""

    async def create_prediction(self, payload: dict[str, Any]) -> Prediction: ...

    async def get_prediction(self, prediction_id: str) -> Prediction: ...


class ReplicateClient:
    """Predictions client for the Replicate HTTP API.

    One instance holds one pooled httpx.AsyncClient and may be shared by
    concurrent tool calls. Nothing is retried: a non-success response or a
    transport failure raises RemoteError immediately.

    Example:
        >>> async with ReplicateClient(api_token="r8_...") as client:
        ...     prediction = await client.create_prediction({"input": {"prompt": "a fox"}})
        ...     prediction = await client.get_prediction(prediction.id)
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Replicate client.

        Args:
            api_token: Replicate API token (from REPLICATE_API_TOKEN env var)
            base_url: API root (default: public Replicate API)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ReplicateClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_prediction(self, payload: dict[str, Any]) -> Prediction:
        """Create a prediction.

        Args:
            payload: Request body, e.g. {"version": "...", "input": {...}}

        Returns:
            Prediction as created (typically status "starting")

        Raises:
            RemoteError: Non-2xx response, transport failure, or malformed body
        """
        return await self._request("POST", "/v1/predictions", json=payload)

    async def get_prediction(self, prediction_id: str) -> Prediction:
        """Fetch the current state of a prediction.

        Raises:
            RemoteError: Non-2xx response, transport failure, or malformed body
        """
        return await self._request("GET", f"/v1/predictions/{prediction_id}")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Prediction:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RemoteError(f"Replicate API request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise RemoteError(f"Replicate API network error: {e}") from e

        if not response.is_success:
            logger.warning(
                "replicate.request.failed",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise RemoteError(
                f"Replicate API error: {response.status_code} {response.reason_phrase}\n"
                f"{response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return Prediction.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RemoteError(
                f"Unexpected response from Replicate API: {response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from e
