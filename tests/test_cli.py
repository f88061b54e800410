"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from shoutit import cli as cli_module
from shoutit.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from replacing pytest's log handlers."""
    monkeypatch.setattr(cli_module, "configure_logging", lambda **kwargs: None)


class TestConfigCommand:
    def test_valid_config(self, runner, write_config):
        path = write_config('app_id = "app-123"\nrest_api_key = "key-abc"\n')

        result = runner.invoke(cli, ["config", "--config", str(path)])

        assert result.exit_code == 0
        assert "app-123" in result.output
        assert str(path) in result.output
        assert "key-abc" not in result.output

    def test_missing_config_created(self, runner, tmp_path):
        path = tmp_path / "nested" / "shoutit.toml"

        result = runner.invoke(cli, ["config", "--config", str(path)])

        assert result.exit_code == 1
        assert path.is_file()
        assert "app_id" in result.output
        assert "rest_api_key" in result.output

    def test_config_from_env(self, runner, write_config):
        path = write_config('app_id = "from-env"\nrest_api_key = "k"\n')

        result = runner.invoke(cli, ["config"], env={"SHOUTIT_CONFIG": str(path)})

        assert result.exit_code == 0
        assert "from-env" in result.output


class TestServeCommand:
    def test_bad_config_exits_before_serving(self, runner, write_config, monkeypatch):
        path = write_config('app_id = "a"\nrest_api_key = ""\n')
        started = []
        monkeypatch.setattr(cli_module.asyncio, "run", lambda coro: started.append(coro))

        result = runner.invoke(cli, ["serve", "--config", str(path)])

        assert result.exit_code == 1
        assert "rest_api_key" in result.output
        assert started == []

    def test_serve_builds_server(self, runner, write_config, monkeypatch):
        path = write_config('app_id = "a"\nrest_api_key = "k"\n')
        servers = []

        def fake_run(coro):
            coro.close()

        monkeypatch.setattr(cli_module.asyncio, "run", fake_run)
        monkeypatch.setattr(
            cli_module,
            "ShoutItServer",
            lambda **kwargs: servers.append(kwargs) or kwargs,
        )
        monkeypatch.setattr(cli_module, "_run_server", _noop_run_server)

        result = runner.invoke(
            cli,
            ["serve", "--config", str(path), "--port", "9001", "--host", "127.0.0.1"],
        )

        assert result.exit_code == 0, result.output
        config = servers[0]["config"]
        assert config.port == 9001
        assert config.host == "127.0.0.1"
        assert servers[0]["credentials"].app_id == "a"

    def test_help(self, runner):
        result = runner.invoke(cli, ["serve", "--help"])

        assert result.exit_code == 0
        assert "--port" in result.output


async def _noop_run_server(server):
    return None
