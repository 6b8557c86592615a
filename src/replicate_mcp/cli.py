"""Command-line entry point for the Replicate MCP server.

Usage:
    replicate-mcp [OPTIONS]
    python -m replicate_mcp [OPTIONS]

Examples:
    # Serve over stdio (REPLICATE_API_TOKEN must be set)
    REPLICATE_API_TOKEN=r8_... replicate-mcp

    # Verbose logging (to stderr)
    replicate-mcp -v
"""

import asyncio
from argparse import ArgumentParser, Namespace
from typing import Optional, Sequence

import structlog

from replicate_mcp.core.config import Settings, configure_logging, load_settings
from replicate_mcp.server import create_server, run_stdio
from replicate_mcp.services.replicate.client import ReplicateClient
from replicate_mcp.services.replicate.runner import JobRunner
from replicate_mcp.tools.handler import ToolHandler

logger = structlog.get_logger()


def parse_args(argv: Optional[Sequence[str]] = None) -> Namespace:
    """Parse command-line arguments."""
    parser = ArgumentParser(
        description="MCP server exposing Replicate image generation as a tool",
        epilog="Configuration is read from environment variables (see README)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    parser.add_argument(
        "--env-file",
        default=".env",
        help="Dotenv file to read settings from (default: .env)",
    )

    return parser.parse_args(argv)


async def serve(settings: Settings) -> None:
    """Build the client, runner and handler, then serve over stdio."""
    async with ReplicateClient(
        api_token=settings.replicate_api_token,
        base_url=settings.replicate_api_base_url,
        timeout=settings.request_timeout_seconds,
    ) as client:
        runner = JobRunner.from_settings(client, settings)
        server = create_server(ToolHandler(runner))
        await run_stdio(server)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code: 0 (clean shutdown), 1 (fatal error)
    """
    args = parse_args(argv)

    # Exits with status 1 if REPLICATE_API_TOKEN is missing
    settings = load_settings(env_file=args.env_file)

    if args.verbose:
        settings.log_level = "DEBUG"

    configure_logging(settings)

    logger.info(
        "cli.started",
        base_url=settings.replicate_api_base_url,
        model=settings.replicate_model,
        poll_interval_seconds=settings.poll_interval_seconds,
        max_poll_attempts=settings.max_poll_attempts,
    )

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("cli.interrupted")
    except Exception as e:
        logger.error("cli.fatal_error", error=str(e), error_type=type(e).__name__, exc_info=e)
        return 1

    return 0
