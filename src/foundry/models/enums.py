"""String enums for GitHub productionalization settings."""

from enum import StrEnum


class TeamPermission(StrEnum):
    PULL = "pull"
    TRIAGE = "triage"
    PUSH = "push"
    MAINTAIN = "maintain"
    ADMIN = "admin"


class ReviewerType(StrEnum):
    USER = "User"
    TEAM = "Team"


class BranchProtectionPreset(StrEnum):
    STRICT = "strict"
    MODERATE = "moderate"
    MINIMAL = "minimal"
