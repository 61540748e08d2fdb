"""Command line entry point for the GitHub Projects MCP server.

The server speaks MCP over stdio and forwards each tool call to the GitHub GraphQL API
using the token named by GITHUB_PROJECTS_MCP_TOKEN_ENV (GITHUB_TOKEN by default).

  github-projects-mcp            # serve on stdio
  github-projects-mcp --test     # print the tool and resource catalog, then exit
"""

import argparse
import asyncio
import logging
import sys

from github_projects_mcp import __version__
from github_projects_mcp.errors import SafeError
from github_projects_mcp.server import run_server, test_server

logger = logging.getLogger("github_projects_mcp")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="github-projects-mcp",
        description="MCP server for GitHub Projects (v2) over the GitHub GraphQL API.",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="List the GitHub project tools and resources, then exit.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the server (or the catalog listing) and return a process exit code."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        asyncio.run(test_server() if args.test else run_server())
    except KeyboardInterrupt:
        logger.info("GitHub Projects MCP server stopped")
    except SafeError as exc:
        # run_server has already logged the configuration problem.
        return 2 if exc.code == "Config" else 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
