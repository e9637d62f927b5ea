"""Tests for the CLI module."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import httpx
from typer.testing import CliRunner

from github_daily_report.cli import app
from github_daily_report.github_client import AuthenticationError, RateLimit
from github_daily_report.report_builder import minimal_project

runner = CliRunner()


def _repo(name: str) -> dict:
    return {
        "name": name,
        "full_name": f"octocat/{name}",
        "description": f"{name} description",
        "html_url": f"https://github.com/octocat/{name}",
        "language": None,
        "owner": {"login": "octocat"},
    }


def _mock_client(repos: list[dict]) -> MagicMock:
    client = MagicMock()
    client.get_authenticated_user.return_value = {"login": "octocat"}
    client.get_rate_limit.return_value = RateLimit(
        limit=5000, remaining=4999, reset_at=datetime.now(timezone.utc)
    )
    client.list_user_repos.return_value = repos
    client.get_repo_details.side_effect = minimal_project
    client.list_user_events.return_value = []
    client.api_call_count = 0
    client.rate_limit_remaining = None
    return client


@patch("github_daily_report.cli.GitHubClient")
def test_generate_writes_report(mock_client_cls, tmp_path):
    mock_client_cls.return_value = _mock_client([_repo("alpha")])
    output = tmp_path / "out.md"

    result = runner.invoke(app, ["generate", "--token", "abc", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert output.exists()
    assert "# GitHub Activity Report" in output.read_text(encoding="utf-8")
    assert "REPORT GENERATED" in result.output
    mock_client_cls.assert_called_once_with(
        token="abc", endpoint="https://api.github.com", timeout=30.0
    )


@patch("github_daily_report.cli.GitHubClient")
def test_generate_default_output(mock_client_cls, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    mock_client_cls.return_value = _mock_client([])

    result = runner.invoke(app, ["generate", "--token", "abc"])

    assert result.exit_code == 0, result.output
    markdown = (tmp_path / "github-report.md").read_text(encoding="utf-8")
    assert "## Active Projects" not in markdown
    assert "## All Repositories" not in markdown


@patch("github_daily_report.cli.GitHubClient")
def test_generate_token_from_environment(mock_client_cls, tmp_path):
    mock_client_cls.return_value = _mock_client([])

    result = runner.invoke(
        app,
        ["generate", "--output", str(tmp_path / "r.md")],
        env={"GITHUB_TOKEN": "from-env"},
    )

    assert result.exit_code == 0, result.output
    assert mock_client_cls.call_args.kwargs["token"] == "from-env"


def test_generate_requires_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    result = runner.invoke(app, ["generate"])
    assert result.exit_code != 0


@patch("github_daily_report.cli.GitHubClient")
def test_generate_authentication_failure_exits_nonzero(mock_client_cls, tmp_path):
    client = _mock_client([])
    client.get_authenticated_user.side_effect = AuthenticationError("GitHub authentication failed")
    mock_client_cls.return_value = client
    output = tmp_path / "out.md"

    result = runner.invoke(app, ["generate", "--token", "bad", "--output", str(output)])

    assert result.exit_code == 1
    assert "GitHub authentication failed" in result.output
    assert not output.exists()


@patch("github_daily_report.cli.GitHubClient")
def test_generate_partial_failure_exits_zero(mock_client_cls, tmp_path):
    client = _mock_client([_repo(f"repo-{i}") for i in range(5)])

    def details(repo):
        if repo["name"] == "repo-3":
            raise httpx.ReadTimeout("timed out")
        return minimal_project(repo)

    client.get_repo_details.side_effect = details
    mock_client_cls.return_value = client
    output = tmp_path / "out.md"

    result = runner.invoke(app, ["generate", "--token", "abc", "--output", str(output)])

    assert result.exit_code == 0, result.output
    markdown = output.read_text(encoding="utf-8")
    assert "## All Repositories (5 total)" in markdown
    assert "1 error(s) occurred during report generation." in markdown
    assert "Failed to process repo: octocat/repo-3" in result.output


@patch("github_daily_report.cli.GitHubClient")
def test_generate_uses_config_file(mock_client_cls, tmp_path):
    mock_client = _mock_client([])
    mock_client_cls.return_value = mock_client
    config = tmp_path / "config.yaml"
    config.write_text(f"username: hubot\noutput: {tmp_path / 'cfg.md'}\ntimeout: 5\n")

    result = runner.invoke(app, ["generate", "--token", "abc", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "cfg.md").exists()
    mock_client.list_user_repos.assert_called_once_with("hubot")
    assert mock_client_cls.call_args.kwargs["timeout"] == 5.0


@patch("github_daily_report.cli.GitHubClient")
def test_generate_flags_override_config(mock_client_cls, tmp_path):
    mock_client = _mock_client([])
    mock_client_cls.return_value = mock_client
    config = tmp_path / "config.yaml"
    config.write_text("username: hubot\n")

    result = runner.invoke(
        app,
        [
            "generate",
            "--token", "abc",
            "--config", str(config),
            "--username", "octocat",
            "--endpoint", "https://ghe.example.com/api/v3",
            "--output", str(tmp_path / "r.md"),
        ],
    )

    assert result.exit_code == 0, result.output
    mock_client.list_user_repos.assert_called_once_with("octocat")
    assert mock_client_cls.call_args.kwargs["endpoint"] == "https://ghe.example.com/api/v3"


def test_generate_invalid_config_exits_nonzero(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("activity_lookback_days: 0\n")

    result = runner.invoke(app, ["generate", "--token", "abc", "--config", str(config)])

    assert result.exit_code == 1
    assert "Error loading configuration" in result.output


def test_validate_config(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("username: octocat\n")

    result = runner.invoke(app, ["validate", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "Configuration is valid" in result.output
    assert "Username: octocat" in result.output
