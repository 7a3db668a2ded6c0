from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from mcp.server.stdio import stdio_server

from redmine_mcp.core.config import ConfigError, resolve_config
from redmine_mcp.core.context import ClientProvider
from redmine_mcp.core.dispatcher import ToolDispatcher
from redmine_mcp.core.logging import setup_logging
from redmine_mcp.core.registry import build_catalog

from .app import build_mcp_server

log = logging.getLogger("redmine_mcp.transports.stdio")

LOG_LEVEL_ENV = "REDMINE_MCP_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redmine-mcp",
        description="Redmine MCP server (stdio transport)",
    )
    parser.add_argument("--url", help="Redmine instance URL")
    parser.add_argument("--api-key", dest="api_key", help="Redmine API key")
    parser.add_argument(
        "--config", dest="config_path", help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, "INFO"),
        help=f"Logging level (default: INFO, or ${LOG_LEVEL_ENV})",
    )
    return parser


async def run(args: argparse.Namespace) -> None:
    config = resolve_config(
        url=args.url, api_key=args.api_key, config_path=args.config_path
    )
    log.info("Connecting to Redmine at: %s", config.url)

    provider = ClientProvider(config)
    dispatcher = ToolDispatcher(build_catalog(), provider)
    server = build_mcp_server(dispatcher)

    try:
        async with stdio_server() as (read_stream, write_stream):
            log.info("Redmine MCP server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await provider.aclose()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        asyncio.run(run(args))
    except ConfigError as exc:
        log.error("Failed to start Redmine MCP server: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
