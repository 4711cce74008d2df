"""CLI entry point: ``foundry`` runs the repository workflow once."""

from __future__ import annotations

import argparse
import asyncio
import logging

from foundry import action_io
from foundry.config import settings
from foundry.constants import APP_NAME
from foundry.errors.exceptions import FoundryError
from foundry.github.rest import GitHubRestClient
from foundry.logging_config import configure_logging
from foundry.runner import INPUT_NAMES, gather_input, run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=(
            "Create a GitHub repository and productionalize it. Every input is read "
            "from INPUT_<NAME> like a GitHub Action and can be overridden with --<name>."
        ),
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Log level (default: %(default)s)")
    parser.add_argument("--json-logs", action="store_true", default=settings.json_logs, help="Emit JSON logs")
    parser.add_argument("--api-url", default=settings.github_api_url, help="GitHub API base URL")
    for name in INPUT_NAMES:
        parser.add_argument(f"--{name}", dest=name.replace("-", "_"), default=None, metavar="VALUE")
    return parser


async def _run(args: argparse.Namespace) -> int:
    def get_input(name: str) -> str:
        override = getattr(args, name.replace("-", "_"))
        return override.strip() if override is not None else action_io.get_input(name)

    try:
        repo_input = gather_input(get_input)
    except FoundryError as exc:
        logger.error("Invalid input: %s", exc.message)
        action_io.set_failed(f"Failed to initialize Foundry: {exc.message}")
        return 1

    async with GitHubRestClient(
        repo_input.token.get_secret_value(), base_url=args.api_url
    ) as client:
        return await run(repo_input, client, settings)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_output=args.json_logs)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
