"""Generation request and prediction models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from replicate_mcp.services.exceptions import InvalidInputError

TOOL_NAME = "replicate_image_generate"

ASPECT_RATIOS = [
    "21:9",
    "16:9",
    "3:2",
    "4:3",
    "5:4",
    "1:1",
    "4:5",
    "3:4",
    "2:3",
    "9:16",
    "9:21",
]
OUTPUT_FORMATS = ["jpg", "png"]

DEFAULT_RAW = False
DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_OUTPUT_FORMAT = "jpg"
DEFAULT_SAFETY_TOLERANCE = 2
DEFAULT_IMAGE_PROMPT_STRENGTH = 0.1


class PredictionStatus(str, Enum):
    """Prediction statuses this system acts on.

    Replicate reports other values (starting, processing, canceled); those are
    treated as in-progress and keep the poll loop going.
    """

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class GenerationRequest:
    """Validated, fully defaulted input for one image generation.

    Only the prompt is checked locally. Every other value is forwarded as
    given so an out-of-range option surfaces as a remote error.
    """

    prompt: str
    raw: Any = DEFAULT_RAW  # bool
    seed: Any = None  # int
    aspect_ratio: Any = DEFAULT_ASPECT_RATIO  # one of ASPECT_RATIOS
    image_prompt: Any = None  # str (URI)
    output_format: Any = DEFAULT_OUTPUT_FORMAT  # one of OUTPUT_FORMATS
    safety_tolerance: Any = DEFAULT_SAFETY_TOLERANCE  # int, 1..6
    image_prompt_strength: Any = DEFAULT_IMAGE_PROMPT_STRENGTH  # float, 0..1

    @classmethod
    def from_arguments(cls, arguments: Optional[dict[str, Any]]) -> "GenerationRequest":
        """Build a request from raw tool-call arguments.

        Args:
            arguments: Tool-call arguments as received from the host (may be None)

        Returns:
            GenerationRequest with defaults applied to omitted or null fields

        Raises:
            InvalidInputError: If prompt is missing, not a string, or empty
        """
        if not isinstance(arguments, dict):
            arguments = {}

        prompt = arguments.get("prompt")
        if not isinstance(prompt, str):
            raise InvalidInputError(
                f"Invalid arguments for {TOOL_NAME}: prompt must be a string"
            )
        if not prompt.strip():
            raise InvalidInputError(f"Invalid arguments for {TOOL_NAME}: prompt cannot be empty")

        def _get(key: str, default: Any) -> Any:
            value = arguments.get(key)
            return default if value is None else value

        return cls(
            prompt=prompt,
            raw=_get("raw", DEFAULT_RAW),
            seed=arguments.get("seed"),
            aspect_ratio=_get("aspect_ratio", DEFAULT_ASPECT_RATIO),
            image_prompt=arguments.get("image_prompt"),
            output_format=_get("output_format", DEFAULT_OUTPUT_FORMAT),
            safety_tolerance=_get("safety_tolerance", DEFAULT_SAFETY_TOLERANCE),
            image_prompt_strength=_get("image_prompt_strength", DEFAULT_IMAGE_PROMPT_STRENGTH),
        )

    def to_input(self) -> dict[str, Any]:
        """Return the Replicate "input" object, omitting unset optional fields."""
        payload = {
            "prompt": self.prompt,
            "raw": self.raw,
            "seed": self.seed,
            "aspect_ratio": self.aspect_ratio,
            "image_prompt": self.image_prompt,
            "output_format": self.output_format,
            "safety_tolerance": self.safety_tolerance,
            "image_prompt_strength": self.image_prompt_strength,
        }
        return {key: value for key, value in payload.items() if value is not None}


class Prediction(BaseModel):
    """Prediction record as returned by the Replicate API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str
    output: Any = None
    error: Any = None

    @property
    def output_urls(self) -> list[str]:
        """Output URIs in order.

        Flux Ultra returns a single URI string rather than a list, so both
        shapes are accepted.
        """
        if self.output is None:
            return []
        if isinstance(self.output, str):
            return [self.output] if self.output else []
        if isinstance(self.output, list):
            return [str(item) for item in self.output if item]
        return []
