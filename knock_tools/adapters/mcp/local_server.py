"""Local Knock MCP server over stdio.

Usage:
    local-mcp --service-token=sk_... --tools "users.*" --tools workflows.trigger_workflow
    local-mcp -t "*" -e production -u user_123

Flags fall back to KNOCK_* environment variables (see knock_config.Settings).
"""

import argparse
import asyncio

from knock_config.models import Config
from knock_config.settings import Settings
from knock_obs.logging import get_logger, setup_logging
from knock_obs.tracing import setup_tracing
from knock_tools import __version__
from knock_tools.api.client import create_knock_client
from knock_tools.catalog import build_default_registry
from knock_tools.exceptions import KnockToolkitError
from knock_tools.filters import filter_tools_by_patterns

from .server import create_knock_mcp_server

logger = get_logger(__name__)


def build_parser(categories: list[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="local-mcp", description="Knock MCP server (stdio)")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--tools",
        "-t",
        action="extend",
        nargs="+",
        metavar="PATTERN",
        help=(
            'Tools to enable. Use "*" for all tools, "category" or "category.*" for a '
            'whole category, "category.tool" for a single tool. Available categories: '
            + ", ".join(categories)
        ),
    )
    parser.add_argument("--service-token", help="Knock service token")
    parser.add_argument(
        "--environment", "-e", help="The environment to operate in from your Knock account"
    )
    parser.add_argument("--user-id", "-u", help="The user id to operate as")
    parser.add_argument("--tenant-id", help="The tenant id to operate as")
    return parser


async def serve(args: argparse.Namespace, settings: Settings) -> None:
    registry = build_default_registry()
    config = Config.from_settings(
        settings,
        service_token=args.service_token,
        environment=args.environment,
        user_id=args.user_id,
        tenant_id=args.tenant_id,
    )

    client = create_knock_client(config, settings=settings)
    tools = filter_tools_by_patterns(registry, args.tools) if args.tools else None

    server = await create_knock_mcp_server(client, config, tools)
    await server.run_stdio()


def main(argv: list[str] | None = None) -> None:
    """Run the local MCP server."""
    settings = Settings()
    setup_logging(settings)
    setup_tracing(settings)

    parser = build_parser(build_default_registry().categories())
    args = parser.parse_args(argv)

    try:
        asyncio.run(serve(args, settings))
    except KnockToolkitError as e:
        # Bad token or tool selection: report and exit non-zero
        logger.error("local_mcp_startup_failed", error=str(e))
        parser.error(str(e))


if __name__ == "__main__":
    main()
