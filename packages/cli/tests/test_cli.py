"""Tests for the CLI entry point."""

import base64
import json
import subprocess
from unittest.mock import MagicMock, patch

import yaml
from click.testing import CliRunner
from github import GithubException

from prlint_cli.cli import main

CRITERIA = "- Once the changes in this PR are merged and deployed, success criteria is:"


def _section(*raws, block_type="list"):
    return {
        "bodies": [
            {"type": block_type, "raw": "\n".join(raws), "items": [{"checked": False, "raw": r} for r in raws]}
        ]
    }


def _payload(**overrides):
    data = {
        "Description_of_changes": _section("- [x] Fixed the login bug"),
        "GitHub_issues_resolved_by_this_PR": _section("- Fixes #42 and #108"),
        "Quality_Assurance": _section(f"{CRITERIA} users can sign in with SSO"),
    }
    data.update(overrides)
    return data


def _encode(data) -> str:
    return base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")


def _invoke(args, env=None, **kwargs):
    return CliRunner().invoke(main, ["--config", "nonexistent.yml", *args], env=env, **kwargs)


class TestValidateCommand:
    def test_all_sections_pass(self):
        result = _invoke(["validate"], env={"PR_DESCRIPTION_JSON": _encode(_payload())})

        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.startswith(("✅", "❌"))]
        assert lines == [
            "✅ Description of Changes:",
            "✅ Issues resolved by this pull request:",
            "✅ Success criteria:",
        ]
        assert "#42, #108" in result.output

    def test_missing_qa_bodies_fails_only_qa(self):
        payload = _payload(Quality_Assurance={"title": "Quality Assurance"})
        result = _invoke(["validate"], env={"PR_DESCRIPTION_JSON": _encode(payload)})

        assert result.exit_code == 1
        fail_lines = [line for line in result.output.splitlines() if line.startswith("❌")]
        assert fail_lines == ["❌ Quality Assurance:"]
        assert result.output.count("✅") == 2
        assert "'Quality Assurance' section is missing or malformed" in result.output

    def test_every_section_reported_even_after_failure(self):
        payload = _payload(Description_of_changes=_section("<describe change here>"))
        result = _invoke(["validate"], env={"PR_DESCRIPTION_JSON": _encode(payload)})

        assert result.exit_code == 1
        assert result.output.index("❌ Description of Changes") < result.output.index("✅ Success criteria")

    def test_not_applicable_issues(self):
        payload = _payload(GitHub_issues_resolved_by_this_PR=_section("- No related issue, N/A"))
        result = _invoke(["validate"], env={"PR_DESCRIPTION_JSON": _encode(payload)})

        assert result.exit_code == 0
        assert "  > N/A" in result.output

    def test_malformed_base64_aborts(self):
        result = _invoke(["validate"], env={"PR_DESCRIPTION_JSON": "%%%not-base64%%%"})

        assert result.exit_code == 2
        assert "base64" in result.output
        assert "✅" not in result.output and "❌" not in result.output

    def test_malformed_shape_aborts(self):
        result = _invoke(["validate"], env={"PR_DESCRIPTION_JSON": _encode({"Quality_Assurance": {"bodies": 3}})})

        assert result.exit_code == 2
        assert "Quality_Assurance.bodies" in result.output

    def test_missing_env_var_is_usage_error(self, monkeypatch):
        monkeypatch.delenv("PR_DESCRIPTION_JSON", raising=False)
        result = _invoke(["validate"])

        assert result.exit_code == 2
        assert "PR_DESCRIPTION_JSON is not set" in result.output

    def test_input_env_option(self):
        result = _invoke(["validate", "--input-env", "PR_JSON"], env={"PR_JSON": _encode(_payload())})
        assert result.exit_code == 0

    def test_input_env_from_config(self, tmp_path):
        cfg = tmp_path / ".prlint.yml"
        cfg.write_text("input_env: DESCRIPTION_B64\n")
        result = CliRunner().invoke(
            main, ["--config", str(cfg), "validate"], env={"DESCRIPTION_B64": _encode(_payload())}
        )
        assert result.exit_code == 0

    def test_input_file(self, tmp_path):
        path = tmp_path / "description.json"
        path.write_text(json.dumps(_payload()))
        result = _invoke(["validate", "--input-file", str(path)])
        assert result.exit_code == 0

    def test_body_file(self, tmp_path):
        path = tmp_path / "body.md"
        path.write_text(
            "## Description of changes\n\n- [x] Fixed the login bug\n\n"
            "## GitHub issues resolved by this PR\n\n- N/A\n\n"
            f"## Quality Assurance\n\n{CRITERIA}\n"
        )
        result = _invoke(["validate", "--body-file", str(path)])

        assert result.exit_code == 1
        assert "❌ Success criteria:" in result.output

    def test_non_utf8_input_file_aborts(self, tmp_path):
        path = tmp_path / "description.json"
        path.write_bytes(b'{"Description_of_changes": {"bodies": []}, "x": "\xff\xfe"}')
        result = _invoke(["validate", "--input-file", str(path)])

        assert result.exit_code == 2
        assert "not valid UTF-8" in result.output
        assert "✅" not in result.output and "❌" not in result.output

    def test_non_utf8_body_file_aborts(self, tmp_path):
        path = tmp_path / "body.md"
        path.write_bytes(b"## Description of changes\n\n- \xff Fixed the login bug\n")
        result = _invoke(["validate", "--body-file", str(path)])

        assert result.exit_code == 2
        assert "not valid UTF-8" in result.output

    def test_input_and_body_file_are_exclusive(self, tmp_path):
        path = tmp_path / "x.json"
        path.write_text("{}")
        result = _invoke(["validate", "--input-file", str(path), "--body-file", str(path)])
        assert result.exit_code == 2

    def test_invalid_config_file_is_usage_error(self, tmp_path):
        cfg = tmp_path / ".prlint.yml"
        cfg.write_text("- not\n- a mapping\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "validate"])
        assert result.exit_code == 2
        assert "mapping" in result.output


class TestTitleCommand:
    def test_valid_title(self):
        result = _invoke(["title", "feat(auth): add SSO login"])
        assert result.exit_code == 0
        assert "✅ PR Title:" in result.output

    def test_invalid_title(self):
        result = _invoke(["title", "Add SSO login"])
        assert result.exit_code == 1
        assert "❌ PR Title:" in result.output

    def test_title_from_env(self):
        result = _invoke(["title"], env={"PR_TITLE": "fix: handle expired tokens"})
        assert result.exit_code == 0

    def test_scopes_from_config(self, tmp_path):
        cfg = tmp_path / ".prlint.yml"
        cfg.write_text("title_scopes: [api]\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "title", "fix(cli): tweak help"])
        assert result.exit_code == 1
        assert "Unknown scope" in result.output


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------

GOOD_BODY = (
    "## Description of changes\n\n- [x] Fixed the login redirect loop\n\n"
    "## GitHub issues resolved by this PR\n\n- Fixes #42\n\n"
    f"## Quality Assurance\n\n{CRITERIA} SSO users land on the dashboard\n"
)


def _mock_repo(mocker, title="fix(auth): stop redirect loop", body=GOOD_BODY, author="octocat"):
    pr = MagicMock(title=title, body=body)
    pr.user.login = author
    repo = MagicMock()
    repo.get_pull.return_value = pr
    mocker.patch("prlint_core.linter.get_repo", return_value=repo)
    mocker.patch("prlint_cli.auth.resolve_github_token", return_value="tok")
    return repo


class TestCheckCommand:
    def test_missing_github_token(self, mocker):
        mocker.patch("prlint_cli.auth.resolve_github_token", return_value=None)
        result = _invoke(["check", "--repo", "owner/repo", "--pr", "1"])
        assert result.exit_code != 0
        assert "GITHUB_TOKEN" in result.output

    def test_good_pr_passes(self, mocker):
        repo = _mock_repo(mocker)
        result = _invoke(["check", "--repo", "owner/repo", "--pr", "7"])

        repo.get_pull.assert_called_once_with(7)
        assert result.exit_code == 0
        assert result.output.count("✅") == 4

    def test_bad_title_fails(self, mocker):
        _mock_repo(mocker, title="Stop redirect loop")
        result = _invoke(["check", "--repo", "owner/repo", "--pr", "7"])
        assert result.exit_code == 1
        assert "❌ PR Title:" in result.output

    def test_skip_title_flag(self, mocker):
        _mock_repo(mocker, title="Stop redirect loop")
        result = _invoke(["check", "--repo", "owner/repo", "--pr", "7", "--skip-title"])
        assert result.exit_code == 0
        assert "PR Title" not in result.output

    def test_dependabot_is_skipped(self, mocker):
        _mock_repo(mocker, author="dependabot[bot]", body="")
        result = _invoke(["check", "--repo", "owner/repo", "--pr", "7"])
        assert result.exit_code == 0
        assert "Skipping PR #7" in result.output

    def test_github_error_reported(self, mocker):
        repo = _mock_repo(mocker)
        repo.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)
        result = _invoke(["check", "--repo", "owner/repo", "--pr", "7"])
        assert result.exit_code == 1
        assert "Could not fetch owner/repo#7" in result.output


# ---------------------------------------------------------------------------
# auth.py
# ---------------------------------------------------------------------------


class TestResolveGithubToken:
    def test_returns_env_var_when_set(self, monkeypatch):
        from prlint_cli.auth import resolve_github_token

        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        assert resolve_github_token() == "env-token"

    def test_falls_back_to_gh_cli(self, monkeypatch):
        from prlint_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="gh-token\n")
            result = resolve_github_token()
        assert result == "gh-token"

    def test_returns_none_when_gh_not_installed(self, monkeypatch):
        from prlint_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run", side_effect=FileNotFoundError):
            assert resolve_github_token() is None

    def test_returns_none_when_gh_times_out(self, monkeypatch):
        from prlint_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=5)):
            assert resolve_github_token() is None

    def test_returns_none_when_gh_returns_error(self, monkeypatch):
        from prlint_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="")
            assert resolve_github_token() is None

    def test_returns_none_when_gh_returns_empty(self, monkeypatch):
        from prlint_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="   ")
            assert resolve_github_token() is None


# ---------------------------------------------------------------------------
# init command
# ---------------------------------------------------------------------------


class TestInitCommand:
    def test_writes_config_and_template(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = _invoke(["init"], input="Y\nY\nN\n")  # check titles, require scope, no workflow

        assert result.exit_code == 0
        config = yaml.safe_load((tmp_path / ".prlint.yml").read_text())
        assert config == {"check_title": True, "require_scope": True}
        template = (tmp_path / ".github" / "pull_request_template.md").read_text()
        assert "## Quality Assurance" in template
        assert not (tmp_path / ".github" / "workflows" / "prlint.yml").exists()

    def test_template_passes_nothing_unedited(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _invoke(["init"], input="N\nN\n")

        result = _invoke(["validate", "--body-file", ".github/pull_request_template.md"])
        assert result.exit_code == 1
        assert "✅" not in result.output

    def test_keeps_existing_template(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        template = tmp_path / ".github" / "pull_request_template.md"
        template.parent.mkdir()
        template.write_text("custom template")

        result = _invoke(["init"], input="N\nN\n")

        assert template.read_text() == "custom template"
        assert "already exists" in result.output

    def test_preserves_existing_config_keys(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".prlint.yml").write_text("min_change_length: 20\n")

        _invoke(["init"], input="N\nN\n")

        config = yaml.safe_load((tmp_path / ".prlint.yml").read_text())
        assert config["min_change_length"] == 20
        assert config["check_title"] is False

    def test_writes_github_actions_workflow(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _invoke(["init"], input="Y\nN\nY\n")

        workflow = tmp_path / ".github" / "workflows" / "prlint.yml"
        assert workflow.exists()
        text = workflow.read_text()
        assert "prlint check" in text
        assert "uses: actions/checkout@v4" in text
        assert text.index("actions/checkout") < text.index("pip install")
        assert "${{ github.event.pull_request.number }}" in text
