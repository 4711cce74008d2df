"""Tests for the branch protection ruleset presets."""

import pytest

from foundry.models.enums import BranchProtectionPreset
from foundry.services.branch_protection_presets import (
    BRANCH_PROTECTION_PRESETS,
    get_branch_protection_preset,
)


def _pull_request_params(ruleset: dict) -> dict:
    [rule] = [r for r in ruleset["rules"] if r["type"] == "pull_request"]
    return rule["parameters"]


class TestGetBranchProtectionPreset:
    @pytest.mark.parametrize(
        ("preset", "approvals", "strict_reviews"),
        [
            (BranchProtectionPreset.STRICT, 2, True),
            (BranchProtectionPreset.MODERATE, 1, True),
            (BranchProtectionPreset.MINIMAL, 1, False),
        ],
    )
    def test_pull_request_parameters(self, preset, approvals, strict_reviews):
        params = _pull_request_params(get_branch_protection_preset(preset, "main"))
        assert params["required_approving_review_count"] == approvals
        assert params["dismiss_stale_reviews_on_push"] is strict_reviews
        assert params["require_last_push_approval"] is strict_reviews
        assert params["required_review_thread_resolution"] is strict_reviews
        assert params["require_code_owner_review"] is False

    @pytest.mark.parametrize("preset", list(BranchProtectionPreset))
    def test_common_shape(self, preset):
        ruleset = get_branch_protection_preset(preset, "main")
        assert ruleset["name"] == f"Branch protection rules ({preset.value})"
        assert ruleset["target"] == "branch"
        assert ruleset["enforcement"] == "active"
        assert {"type": "non_fast_forward"} in ruleset["rules"]
        assert ruleset["conditions"]["ref_name"] == {"include": ["refs/heads/main"], "exclude": []}

    def test_default_target_branch_is_master(self):
        ruleset = get_branch_protection_preset(BranchProtectionPreset.MINIMAL)
        assert ruleset["conditions"]["ref_name"]["include"] == ["refs/heads/master"]

    def test_accepts_plain_string_preset(self):
        ruleset = get_branch_protection_preset("moderate", "develop")
        assert ruleset["name"].endswith("(moderate)")

    def test_returns_independent_copies(self):
        first = get_branch_protection_preset(BranchProtectionPreset.STRICT, "main")
        first["rules"].clear()
        second = get_branch_protection_preset(BranchProtectionPreset.STRICT, "release")

        assert len(second["rules"]) == 2
        assert second["conditions"]["ref_name"]["include"] == ["refs/heads/release"]
        assert BRANCH_PROTECTION_PRESETS[BranchProtectionPreset.STRICT]["conditions"]["ref_name"]["include"] == []
