"""Tool descriptor for the image generation tool."""

from mcp import types

from replicate_mcp.models.prediction import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_IMAGE_PROMPT_STRENGTH,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_RAW,
    DEFAULT_SAFETY_TOLERANCE,
    OUTPUT_FORMATS,
    TOOL_NAME,
)

INPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "prompt": {
            "type": "string",
            "title": "Prompt",
            "description": "Text prompt for image generation",
        },
        "raw": {
            "type": "boolean",
            "title": "Raw",
            "description": "Generate less processed, more natural-looking images",
            "default": DEFAULT_RAW,
        },
        "seed": {
            "type": "integer",
            "title": "Seed",
            "description": "Random seed. Set for reproducible generation",
        },
        "aspect_ratio": {
            "type": "string",
            "title": "aspect_ratio",
            "description": "Aspect ratio for the generated image",
            "default": DEFAULT_ASPECT_RATIO,
            "enum": ASPECT_RATIOS,
        },
        "image_prompt": {
            "type": "string",
            "title": "Image Prompt",
            "description": (
                "Image to use with Flux Redux. Used together with text prompt to guide generation"
            ),
            "format": "uri",
        },
        "output_format": {
            "type": "string",
            "title": "output_format",
            "description": "Format of the output images",
            "default": DEFAULT_OUTPUT_FORMAT,
            "enum": OUTPUT_FORMATS,
        },
        "safety_tolerance": {
            "type": "integer",
            "title": "Safety Tolerance",
            "description": "Safety tolerance, 1 is most strict and 6 is most permissive",
            "default": DEFAULT_SAFETY_TOLERANCE,
            "minimum": 1,
            "maximum": 6,
        },
        "image_prompt_strength": {
            "type": "number",
            "title": "Image Prompt Strength",
            "description": "Blend between the prompt and the image prompt",
            "default": DEFAULT_IMAGE_PROMPT_STRENGTH,
            "minimum": 0,
            "maximum": 1,
        },
    },
    "required": ["prompt"],
}

REPLICATE_TOOL = types.Tool(
    name=TOOL_NAME,
    description="Generates images using Replicate's Flux 1.1 Pro Ultra model",
    inputSchema=INPUT_SCHEMA,
)


def list_tools() -> list[types.Tool]:
    """Return the registered tools (always exactly one)."""
    return [REPLICATE_TOOL]
