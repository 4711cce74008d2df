"""Custom exception classes for Foundry."""


class FoundryError(Exception):
    """Base exception for Foundry."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class InputParseError(FoundryError):
    """Raw input could not be decoded."""

    def __init__(self, section: str, reason: str):
        super().__init__(
            "PARSE_ERROR",
            f"Failed to parse {section}: {reason}",
            details={"section": section},
        )


class InputShapeError(FoundryError):
    """Decoded input is not the expected container type."""

    def __init__(self, message: str, section: str):
        super().__init__("SHAPE_ERROR", message, details={"section": section})


class InputValidationError(FoundryError):
    """An element of a decoded input is missing a field or has a bad value."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class InvalidTemplateError(FoundryError):
    """Template reference is not of the form ``owner/repository``."""

    def __init__(self, template: str):
        super().__init__(
            "INVALID_TEMPLATE_FORMAT",
            "Invalid template format. Expected format: owner/repository",
            details={"template": template},
        )


class MissingTemplateError(FoundryError):
    """Template creation was requested without a template reference."""

    def __init__(self):
        super().__init__("TEMPLATE_REQUIRED", "Template repository is required")


class RepositoryCreationError(FoundryError):
    """Repository creation (or its default-branch rename) failed."""

    def __init__(self, message: str, details=None):
        super().__init__("REPOSITORY_CREATION_FAILED", message, details)


class GitHubAPIError(FoundryError):
    """The GitHub REST API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, details=None):
        self.status_code = status_code
        super().__init__("GITHUB_API_ERROR", message, details)


class GitHubNotFoundError(GitHubAPIError):
    """GitHub responded 404."""

    def __init__(self, message: str = "Not Found", details=None):
        super().__init__(message, status_code=404, details=details)


class GitHubConflictError(GitHubAPIError):
    """GitHub responded 409."""

    def __init__(self, message: str, details=None):
        super().__init__(message, status_code=409, details=details)
