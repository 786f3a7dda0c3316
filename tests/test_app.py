"""
Tests for application wiring and the command line.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner


class TestBuildCoordinator:
    """Tests for build_coordinator."""

    def test_probers_share_one_client(self):
        from reaper.app import build_coordinator
        from reaper.core.config import Settings

        settings = Settings(appveyor_account="rust-lang-ci", cycle_deadline=12)
        client = httpx.AsyncClient()

        coordinator = build_coordinator(settings, client)

        providers = [p.provider for p in coordinator._probers]
        assert providers == ["travis", "appveyor"]
        assert all(p._transport._client is client for p in coordinator._probers)
        assert coordinator._repositories == settings.repositories
        assert coordinator.deadline == 12
        assert coordinator._probers[1]._account == "rust-lang-ci"


class TestMain:
    """Tests for the async main entry point."""

    @pytest.mark.asyncio
    async def test_once_runs_a_single_cycle(self):
        from reaper.app import main
        from reaper.core.config import Settings
        from reaper.models.outcome import CycleOutcome

        outcome = CycleOutcome(started_at=datetime.now(timezone.utc))
        coordinator = MagicMock()
        coordinator.run_cycle = AsyncMock(return_value=outcome)

        with patch("reaper.app.build_coordinator", return_value=coordinator):
            result = await main(Settings(), once=True)

        assert result is outcome
        coordinator.run_cycle.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_forever_runs_scheduler(self):
        from reaper.app import main
        from reaper.core.config import Settings

        with patch("reaper.app.Scheduler") as scheduler_cls, \
                patch("reaper.app._install_signal_handlers"):
            scheduler = scheduler_cls.return_value
            scheduler.run_forever = AsyncMock()

            await main(Settings(poll_interval=5))

        assert scheduler_cls.call_args.kwargs["interval"] == 5
        scheduler.run_forever.assert_awaited_once()


class TestCli:
    """Tests for the Typer command line."""

    def test_options_override_environment(self):
        from reaper.cli import cli

        runner = CliRunner()
        with patch("reaper.cli.main", new=AsyncMock()) as mock_main:
            result = runner.invoke(
                cli,
                ["-t", "tt", "-a", "aa", "-b", "bors", "--interval", "90", "--once", "a/b", "c/d"],
            )

        assert result.exit_code == 0, result.output
        settings = mock_main.call_args.args[0]
        assert settings.travis_token == "tt"
        assert settings.appveyor_token == "aa"
        assert settings.tracked_branch == "bors"
        assert settings.poll_interval == 90
        assert [r.slug for r in settings.repositories] == ["a/b", "c/d"]
        assert mock_main.call_args.kwargs["once"] is True

    def test_environment_used_without_arguments(self):
        from reaper.cli import cli

        runner = CliRunner()
        with patch("reaper.cli.main", new=AsyncMock()) as mock_main:
            result = runner.invoke(cli, [])

        assert result.exit_code == 0, result.output
        settings = mock_main.call_args.args[0]
        assert [r.slug for r in settings.repositories] == ["rust-lang/cargo", "rust-lang/rust"]
        assert mock_main.call_args.kwargs["once"] is False

    def test_invalid_repository_exits_with_2(self):
        from reaper.cli import cli

        runner = CliRunner()
        with patch("reaper.cli.main", new=AsyncMock()) as mock_main:
            result = runner.invoke(cli, ["not-a-repo"])

        assert result.exit_code == 2
        mock_main.assert_not_called()

    def test_missing_token_exits_with_2(self, monkeypatch):
        monkeypatch.delenv("APPVEYOR_TOKEN")

        from reaper.cli import cli

        runner = CliRunner()
        with patch("reaper.cli.main", new=AsyncMock()):
            result = runner.invoke(cli, [])

        assert result.exit_code == 2
