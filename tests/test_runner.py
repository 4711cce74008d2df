"""Tests for input gathering and the top-level run."""

import json

import pytest

from foundry.config import Settings
from foundry.errors.exceptions import GitHubAPIError, InputValidationError
from foundry.models.enums import BranchProtectionPreset, TeamPermission
from foundry.runner import gather_input, run


def _inputs(**values):
    """A get_input callable over a dict keyed by action input name."""
    return lambda name: values.get(name, "")


def _read_outputs(path) -> dict[str, str]:
    outputs = {}
    lines = path.read_text(encoding="utf-8").splitlines()
    i = 0
    while i < len(lines):
        name, delimiter = lines[i].split("<<", 1)
        end = lines.index(delimiter, i + 1)
        outputs[name] = "\n".join(lines[i + 1:end])
        i = end + 1
    return outputs


@pytest.fixture
def github_output(tmp_path, monkeypatch):
    path = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path


@pytest.fixture
def test_settings():
    return Settings(secret_creation_delay=0)


class TestGatherInput:
    def test_minimal_inputs_use_defaults(self):
        repo_input = gather_input(_inputs(**{"github-token": "tok", "repository-name": "svc"}))

        assert repo_input.token.get_secret_value() == "tok"
        assert repo_input.name == "svc"
        assert repo_input.private is False
        assert repo_input.auto_init is True
        assert repo_input.template is None
        assert repo_input.organization is None
        assert repo_input.default_branch == "main"
        assert repo_input.productionalize is False
        assert repo_input.productionalization_config is None

    @pytest.mark.parametrize("missing", ["github-token", "repository-name"])
    def test_required_inputs(self, missing):
        values = {"github-token": "tok", "repository-name": "svc"}
        del values[missing]
        with pytest.raises(InputValidationError, match=f"Input required and not supplied: {missing}"):
            gather_input(_inputs(**values))

    def test_boolean_inputs(self):
        repo_input = gather_input(_inputs(**{
            "github-token": "tok",
            "repository-name": "svc",
            "repository-private": "TRUE",
            "auto-init": "false",
        }))
        assert repo_input.private is True
        assert repo_input.auto_init is False

    def test_productionalization_config_is_parsed(self):
        repo_input = gather_input(_inputs(**{
            "github-token": "tok",
            "repository-name": "svc",
            "productionalize": "true",
            "team-permissions": '[{"teamSlug": "devs", "permission": "push"}]',
            "repository-topics": "python, api",
            "branch-protection-preset": "strict",
        }))

        config = repo_input.productionalization_config
        assert repo_input.productionalize is True
        assert config.team_permissions[0].permission == TeamPermission.PUSH
        assert config.topics == ["python", "api"]
        assert config.branch_protection_preset == BranchProtectionPreset.STRICT
        assert config.branch_protection_target_branch == "master"
        assert config.environments is None
        assert config.secrets is None

    def test_productionalization_inputs_ignored_when_disabled(self):
        repo_input = gather_input(_inputs(**{
            "github-token": "tok",
            "repository-name": "svc",
            "team-permissions": "{not json",
        }))
        assert repo_input.productionalization_config is None

    def test_malformed_productionalization_input_raises(self):
        with pytest.raises(InputValidationError, match="Invalid branch protection preset: bogus"):
            gather_input(_inputs(**{
                "github-token": "tok",
                "repository-name": "svc",
                "productionalize": "true",
                "branch-protection-preset": "bogus",
            }))


class TestRun:
    @pytest.mark.asyncio
    async def test_creates_repository_and_sets_outputs(self, github, github_output, test_settings):
        github.create_for_authenticated_user.return_value = {
            "id": 42,
            "full_name": "me/svc",
            "html_url": "https://github.com/me/svc",
            "default_branch": "main",
        }
        repo_input = gather_input(_inputs(**{"github-token": "tok", "repository-name": "svc"}))

        exit_code = await run(repo_input, github, test_settings)

        assert exit_code == 0
        assert _read_outputs(github_output) == {
            "repository-url": "https://github.com/me/svc",
            "repository-name": "me/svc",
            "repository-id": "42",
        }

    @pytest.mark.asyncio
    async def test_productionalization_status_output(self, github, github_output, test_settings):
        github.create_in_org.return_value = {
            "id": 7,
            "full_name": "acme/svc",
            "html_url": "https://github.com/acme/svc",
            "default_branch": "main",
        }
        github.get_all_topics.return_value = {"names": []}
        github.replace_all_topics.side_effect = GitHubAPIError("Invalid topics", status_code=422)
        repo_input = gather_input(_inputs(**{
            "github-token": "tok",
            "repository-name": "svc",
            "organization": "acme",
            "productionalize": "true",
            "team-permissions": '[{"teamSlug": "devs", "permission": "push"}]',
            "repository-topics": "Bad Topic",
        }))

        exit_code = await run(repo_input, github, test_settings)

        assert exit_code == 0
        github.add_or_update_team_repo_permission.assert_awaited_once_with(
            org="acme", team_slug="devs", owner="acme", repo="svc", permission="push"
        )
        status = json.loads(_read_outputs(github_output)["productionalization-status"])
        assert status["teamPermissions"] == [{"teamSlug": "devs", "success": True}]
        assert status["topicsAdded"] is False
        assert status["topicsError"] == "Invalid topics"
        assert status["secretsCreated"] == 0

    @pytest.mark.asyncio
    async def test_creation_failure_exits_nonzero(self, github, github_output, test_settings, capsys):
        github.create_for_authenticated_user.side_effect = GitHubAPIError("Bad credentials", status_code=401)
        repo_input = gather_input(_inputs(**{"github-token": "tok", "repository-name": "svc"}))

        exit_code = await run(repo_input, github, test_settings)

        assert exit_code == 1
        assert "::error::Failed to create repository: Bad credentials" in capsys.readouterr().out
        assert not github_output.exists()

    @pytest.mark.asyncio
    async def test_incomplete_creation_payload_fails_cleanly(self, github, github_output, test_settings, capsys):
        github.create_for_authenticated_user.return_value = {
            "id": 1,
            "full_name": "o/r",
            "default_branch": "main",
        }
        repo_input = gather_input(_inputs(**{"github-token": "tok", "repository-name": "r"}))

        exit_code = await run(repo_input, github, test_settings)

        assert exit_code == 1
        assert "::error::GitHub response is missing repository field 'html_url'" in capsys.readouterr().out
        assert not github_output.exists()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_reported_as_failure(
        self, github, github_output, test_settings, capsys, monkeypatch
    ):
        async def explode(self, owner, repo, config):
            raise RuntimeError("event loop gone")

        monkeypatch.setattr(
            "foundry.runner.ProductionalizationService.productionalize_repository", explode
        )
        github.create_for_authenticated_user.return_value = {
            "id": 3,
            "full_name": "me/svc",
            "html_url": "https://github.com/me/svc",
            "default_branch": "main",
        }
        repo_input = gather_input(_inputs(**{
            "github-token": "tok",
            "repository-name": "svc",
            "productionalize": "true",
            "repository-topics": "python",
        }))

        exit_code = await run(repo_input, github, test_settings)

        assert exit_code == 1
        assert "::error::Unexpected error: event loop gone" in capsys.readouterr().out
        assert "productionalization-status" not in _read_outputs(github_output)
