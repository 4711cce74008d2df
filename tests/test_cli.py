"""Tests for the foundry CLI entry point."""

from foundry.cli import build_parser, main


class TestBuildParser:
    def test_every_input_has_an_override_flag(self):
        args = build_parser().parse_args([
            "--repository-name", "svc",
            "--branch-protection-preset", "strict",
            "--json-logs",
        ])
        assert args.repository_name == "svc"
        assert args.branch_protection_preset == "strict"
        assert args.github_token is None
        assert args.json_logs is True


class TestMain:
    def test_missing_required_input_fails_before_any_request(self, monkeypatch, capsys):
        monkeypatch.delenv("INPUT_GITHUB-TOKEN", raising=False)
        monkeypatch.delenv("INPUT_REPOSITORY-NAME", raising=False)

        exit_code = main(["--repository-name", "svc"])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "::error::Failed to initialize Foundry: Input required and not supplied: github-token" in out
