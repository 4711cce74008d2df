"""Branch protection presets, expressed as GitHub repository rulesets.

Each preset is a ruleset document for ``POST /repos/{owner}/{repo}/rulesets``.
Presets differ only in the pull request rule parameters; all of them block
force pushes with a ``non_fast_forward`` rule.
"""

from __future__ import annotations

import copy
from typing import Any

from foundry.constants import DEFAULT_BRANCH_PROTECTION_TARGET
from foundry.models.enums import BranchProtectionPreset


def _pull_request_rule(approvals: int, strict_reviews: bool) -> dict[str, Any]:
    return {
        "type": "pull_request",
        "parameters": {
            "dismiss_stale_reviews_on_push": strict_reviews,
            "require_code_owner_review": False,
            "require_last_push_approval": strict_reviews,
            "required_approving_review_count": approvals,
            "required_review_thread_resolution": strict_reviews,
        },
    }


def _ruleset(label: str, pull_request_rule: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": f"Branch protection rules ({label})",
        "target": "branch",
        "enforcement": "active",
        "conditions": {
            "ref_name": {
                "include": [],
                "exclude": [],
            },
        },
        "rules": [
            pull_request_rule,
            {"type": "non_fast_forward"},
        ],
    }


# Production branches: two approvals, stale reviews dismissed, threads resolved
_STRICT = _ruleset("strict", _pull_request_rule(approvals=2, strict_reviews=True))

# Staging/development branches: one approval, same review hygiene as strict
_MODERATE = _ruleset("moderate", _pull_request_rule(approvals=1, strict_reviews=True))

# Feature branches: one approval, nothing else
_MINIMAL = _ruleset("minimal", _pull_request_rule(approvals=1, strict_reviews=False))

BRANCH_PROTECTION_PRESETS: dict[BranchProtectionPreset, dict[str, Any]] = {
    BranchProtectionPreset.STRICT: _STRICT,
    BranchProtectionPreset.MODERATE: _MODERATE,
    BranchProtectionPreset.MINIMAL: _MINIMAL,
}


def get_branch_protection_preset(
    preset: BranchProtectionPreset,
    target_branch: str = DEFAULT_BRANCH_PROTECTION_TARGET,
) -> dict[str, Any]:
    """Return a ruleset for *preset* targeting ``refs/heads/<target_branch>``.

    The returned document is a deep copy; callers may mutate it freely.
    """
    ruleset = copy.deepcopy(BRANCH_PROTECTION_PRESETS[BranchProtectionPreset(preset)])
    ruleset["conditions"]["ref_name"]["include"] = [f"refs/heads/{target_branch}"]
    return ruleset
