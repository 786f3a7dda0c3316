"""Typer CLI for ci-reaper."""

from __future__ import annotations

import asyncio
import sys
from typing import Any

import typer
from pydantic import ValidationError

from reaper.app import main
from reaper.core.config import Settings
from reaper.core.logging import setup_logging

cli = typer.Typer(
    help="Cancel superseded and failing Travis/AppVeyor builds on a merge-bot branch.",
    add_completion=False,
)


def load_settings(**overrides: Any) -> Settings:
    """Settings from the environment, with explicit command-line values on top."""
    given = {}
    for key, value in overrides.items():
        if value is None or (isinstance(value, (list, tuple)) and not value):
            continue
        given[key] = value
    return Settings(**given)


@cli.command()
def run(
    repos: list[str] | None = typer.Argument(
        None, help="Repositories as owner/name (defaults to TRACKED_REPOS)."
    ),
    travis: str | None = typer.Option(None, "-t", "--travis", help="Travis token (TRAVIS_TOKEN)."),
    appveyor: str | None = typer.Option(None, "-a", "--appveyor", help="AppVeyor token (APPVEYOR_TOKEN)."),
    branch: str | None = typer.Option(None, "-b", "--branch", help="Branch to work with (TRACKED_BRANCH)."),
    appveyor_account: str | None = typer.Option(
        None, "--appveyor-account", help="AppVeyor account name (APPVEYOR_ACCOUNT, defaults to repo owner)."
    ),
    interval: float | None = typer.Option(None, "--interval", help="Seconds between cycle starts (POLL_INTERVAL)."),
    deadline: float | None = typer.Option(None, "--deadline", help="Per-cycle deadline in seconds (CYCLE_DEADLINE)."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (LOG_LEVEL)."),
    once: bool = typer.Option(False, "--once", help="Run a single cycle and exit."),
) -> None:
    try:
        settings = load_settings(
            tracked_repos=repos,
            travis_token=travis,
            appveyor_token=appveyor,
            tracked_branch=branch,
            appveyor_account=appveyor_account,
            poll_interval=interval,
            cycle_deadline=deadline,
            log_level=log_level,
        )
    except ValidationError as exc:
        typer.secho(f"Invalid configuration: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(2) from exc

    setup_logging(settings.log_level)

    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

    try:
        asyncio.run(main(settings, once=once))
    except KeyboardInterrupt:
        pass
