"""
Tests for the foxdie command line.

Feature: foxdie
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from foxdie import cli
from foxdie.exceptions import UnknownProviderError
from foxdie.testing import GitSandbox

OLD = datetime(2020, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TOKEN", "FOXDIE_LOG", "GITHUB_BASE_URL", "GITLAB_BASE_URL", "FOXDIE_LEGACY_GITLAB_OVERRIDE"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2021-01-01T00:00:00Z", datetime(2021, 1, 1, tzinfo=timezone.utc)),
        ("2021-01-01T00:00:00z", datetime(2021, 1, 1, tzinfo=timezone.utc)),
        ("2021-01-01T02:00:00+02:00", datetime(2021, 1, 1, tzinfo=timezone.utc)),
        ("2021-01-01T00:00:00", datetime(2021, 1, 1, tzinfo=timezone.utc)),
        ("2021-01-01", datetime(2021, 1, 1, tzinfo=timezone.utc)),
    ],
)
def test_parse_since(value: str, expected: datetime) -> None:
    parsed = cli.parse_since(value)

    assert parsed == expected
    assert parsed.utcoffset() is not None


def test_parse_since_keeps_offset() -> None:
    assert cli.parse_since("2021-06-01T12:00:00-05:00").utcoffset() == timedelta(hours=-5)


@pytest.mark.parametrize("value", ["yesterday", "", "2021-13-01T00:00:00Z"])
def test_invalid_since_is_a_usage_error(value: str) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["push-requests", "-s", value, "-t", "t", "https://github.com/a/b"])

    assert exc_info.value.code == 2


def test_missing_since_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["branches", "-t", "t", "."])

    assert exc_info.value.code == 2


def test_missing_token_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["branches", "-s", "2021-01-01T00:00:00Z", "."])

    assert exc_info.value.code == 2


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 2


def test_token_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOKEN", "from-env")

    with patch("foxdie.cli.clean_push_requests") as clean:
        assert cli.main(["push-requests", "-s", "2021-01-01T00:00:00Z", "https://github.com/a/b"]) == 0

    url, options = clean.call_args.args
    assert url == "https://github.com/a/b"
    assert options.token == "from-env"
    assert options.should_delete is False
    assert options.since == datetime(2021, 1, 1, tzinfo=timezone.utc)


def test_dry_run_warning(caplog: pytest.LogCaptureFixture) -> None:
    with patch("foxdie.cli.clean_push_requests"), caplog.at_level(logging.WARNING, logger="foxdie"):
        cli.main(["push-requests", "-s", "2021-01-01T00:00:00Z", "-t", "t", "https://github.com/a/b"])

    assert "dry run mode" in caplog.text


def test_delete_flag_suppresses_dry_run_warning(caplog: pytest.LogCaptureFixture) -> None:
    with patch("foxdie.cli.clean_push_requests") as clean, caplog.at_level(logging.WARNING, logger="foxdie"):
        cli.main(["push-requests", "-D", "-s", "2021-01-01T00:00:00Z", "-t", "t", "https://github.com/a/b"])

    assert "dry run mode" not in caplog.text
    assert clean.call_args.args[1].should_delete is True


def test_foxdie_error_exits_with_one(caplog: pytest.LogCaptureFixture) -> None:
    with patch("foxdie.cli.clean_push_requests", side_effect=UnknownProviderError("https://example.com/a/b")):
        code = cli.main(["push-requests", "-s", "2021-01-01T00:00:00Z", "-t", "t", "https://example.com/a/b"])

    assert code == 1
    assert "Unknown provider for url https://example.com/a/b" in caplog.text


def test_detector_config_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITLAB_BASE_URL", "https://gitlab.corp")

    with patch("foxdie.cli.clean_push_requests") as clean:
        cli.main(["push-requests", "-s", "2021-01-01T00:00:00Z", "-t", "t", "https://gitlab.corp/a/b"])

    assert clean.call_args.args[1].config.gitlab_base_url == "https://gitlab.corp"


def test_branches_on_a_non_repository_exits_with_one(tmp_path: Path, git_sandbox: GitSandbox) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    assert cli.main(["branches", "-s", "2021-01-01T00:00:00Z", "-t", "t", str(plain)]) == 1


def test_branches_dry_run_against_local_remote(git_sandbox: GitSandbox) -> None:
    """A local-path remote cannot be classified, so it is skipped and the run succeeds."""
    git_sandbox.commit("Initial commit", OLD)
    git_sandbox.create_branch("feature-x", OLD)
    git_sandbox.push("main", "feature-x")

    code = cli.main(["branches", "-D", "-s", "2021-01-01T00:00:00Z", "-t", "t", str(git_sandbox.work_path)])

    assert code == 0
    assert git_sandbox.remote_heads() == {"main", "feature-x"}


def test_report_writes_json(git_sandbox: GitSandbox, tmp_path: Path) -> None:
    git_sandbox.commit("Initial commit", OLD)
    git_sandbox.push("main")
    output = tmp_path / "out.json"

    assert cli.main(["report", "-o", str(output), str(git_sandbox.work_path)]) == 0

    reports = json.loads(output.read_text())
    assert reports[0]["remote_name"] == "origin"
    assert reports[0]["items"][0]["branch"] == "origin/main"


def test_log_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOXDIE_LOG", "debug")
    assert cli._log_level() == logging.DEBUG

    monkeypatch.setenv("FOXDIE_LOG", "nonsense")
    assert cli._log_level() == logging.INFO


def test_malformed_base_url_exits_with_one(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("GITLAB_BASE_URL", "gitlab.corp")

    with patch("foxdie.cli.clean_push_requests") as clean:
        code = cli.main(["push-requests", "-s", "2021-01-01T00:00:00Z", "-t", "t", "https://gitlab.corp/a/b"])

    assert code == 1
    assert not clean.called
    assert "GITLAB_BASE_URL must be an http(s) URL" in caplog.text
