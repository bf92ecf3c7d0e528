"""
Core error classes for the reviewgate application.
"""


class ConfigurationError(Exception):
    """Raised when the reviewers configuration is missing, unreadable or malformed."""

    pass


class UnexpectedEventError(Exception):
    """Raised when the gate is invoked from an event it does not support."""

    def __init__(self, event_name: str) -> None:
        self.event_name = event_name
        super().__init__(f"Action invoked on unexpected event type '{event_name}'")


class GitHubAPIError(Exception):
    """Raised when a GitHub API call fails with a non-retryable status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub API rate limit is exceeded."""

    pass


class GitHubResourceNotFoundError(GitHubAPIError):
    """Raised when a specific GitHub resource is not found."""

    pass


class GitHubServerError(GitHubAPIError):
    """Raised when GitHub answers with a 5xx status; these are retried."""

    pass
