"""Tests for the prsync CLI (adapter calls mocked)."""

from pathlib import Path
from unittest.mock import patch

import pytest

from prsync.adapters import BitbucketAdapter, ReviewPlatformError
from prsync.main import main, parse_args
from prsync.models import MutationResult, PullRequest, PullRequestComment

PR = PullRequest(id=7, src_branch="feature-x", src_commit_hash="abc", dst_commit_hash="def")


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "bitbucket:\n"
        "  account_name: acme\n"
        "  repo_slug: widgets\n"
        "  api_key: k\n"
        "  branch_name: feature-x\n"
        "logging:\n"
        "  level: ERROR\n"
    )
    return path


def test_parse_args_requires_command(config_path: Path) -> None:
    with pytest.raises(SystemExit):
        parse_args(["-c", str(config_path)])


def test_parse_args_check_without_command(config_path: Path) -> None:
    args = parse_args(["-c", str(config_path), "--check"])
    assert args.check is True
    assert args.command is None


def test_check_reports_config(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-c", str(config_path), "--check"]) == 0
    assert "acme/widgets" in capsys.readouterr().out


def test_check_fails_without_repository(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("bitbucket:\n  account_name: acme\n")
    assert main(["-c", str(path), "--check"]) == 1


def test_prs_uses_configured_branch(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch.object(BitbucketAdapter, "find_pull_requests_with_source_branch", return_value=[PR]) as find:
        assert main(["-c", str(config_path), "prs"]) == 0
    find.assert_called_once_with("feature-x")
    assert capsys.readouterr().out.startswith("7\tfeature-x\tabc\tdef")


def test_comments_lists_own_comments(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    comments = [
        PullRequestComment(comment_id=1, content="inline", line=3, file_path="a.py"),
        PullRequestComment(comment_id=2, content="global"),
    ]
    with (
        patch.object(BitbucketAdapter, "list_open_pull_requests", return_value=[PR]),
        patch.object(BitbucketAdapter, "find_own_pull_request_comments", return_value=comments) as find,
    ):
        assert main(["-c", str(config_path), "comments", "7"]) == 0
    find.assert_called_once_with(PR)
    out = capsys.readouterr().out.splitlines()
    assert out == ["1\ta.py:3\tinline", "2\t-\tglobal"]


def test_approve_prints_status(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with (
        patch.object(BitbucketAdapter, "list_open_pull_requests", return_value=[PR]),
        patch.object(BitbucketAdapter, "approve", return_value=MutationResult.unchanged()),
    ):
        assert main(["-c", str(config_path), "approve", "7"]) == 0
    assert capsys.readouterr().out.strip() == "already_in_desired_state"


def test_unknown_pull_request_fails(config_path: Path) -> None:
    with patch.object(BitbucketAdapter, "list_open_pull_requests", return_value=[PR]):
        assert main(["-c", str(config_path), "diff", "99"]) == 1


def test_delete_comment_failure_exit_code(config_path: Path) -> None:
    with (
        patch.object(BitbucketAdapter, "list_open_pull_requests", return_value=[PR]),
        patch.object(BitbucketAdapter, "delete_pull_request_comment", return_value=False),
    ):
        assert main(["-c", str(config_path), "delete-comment", "7", "11"]) == 1


def test_platform_error_exit_code(config_path: Path) -> None:
    with patch.object(BitbucketAdapter, "list_open_pull_requests", side_effect=ReviewPlatformError("down", 503)):
        assert main(["-c", str(config_path), "unapprove", "7"]) == 1


def test_prs_with_unset_branch_placeholder_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """An unresolved ${BITBUCKET_BRANCH_NAME} is not used as a branch name."""
    monkeypatch.delenv("BITBUCKET_BRANCH_NAME", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "bitbucket:\n"
        "  account_name: acme\n"
        "  repo_slug: widgets\n"
        "  api_key: k\n"
        "  branch_name: ${BITBUCKET_BRANCH_NAME}\n"
        "logging:\n"
        "  level: ERROR\n"
    )
    with patch.object(BitbucketAdapter, "find_pull_requests_with_source_branch") as find:
        assert main(["-c", str(path), "prs"]) == 1
    find.assert_not_called()


def test_prs_branch_option_overrides_config(config_path: Path) -> None:
    with patch.object(BitbucketAdapter, "find_pull_requests_with_source_branch", return_value=[]) as find:
        assert main(["-c", str(config_path), "prs", "--branch", "release"]) == 0
    find.assert_called_once_with("release")


def test_error_log_masks_api_key(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "bitbucket:\n"
        "  account_name: acme\n"
        "  repo_slug: widgets\n"
        "  api_key: sekret-key-42\n"
        "logging:\n"
        "  level: ERROR\n"
        "  format: '%(name)s %(message)s'\n"
    )
    error = ReviewPlatformError("GET failed for user acme:sekret-key-42", status_code=500)
    with (
        patch.object(BitbucketAdapter, "list_open_pull_requests", return_value=[PR]),
        patch.object(BitbucketAdapter, "approve", side_effect=error),
    ):
        assert main(["-c", str(path), "approve", "7"]) == 1
    err = capsys.readouterr().err
    assert "sekret-key-42" not in err
    assert "prsync.cli Command approve failed: GET failed for user acme:***" in err
