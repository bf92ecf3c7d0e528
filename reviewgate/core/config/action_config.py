"""
GitHub Action inputs and runner context.
"""

import os
from dataclasses import dataclass


def _get_input(name: str, default: str = "") -> str:
    """Read an action input the way the runner exposes it (INPUT_<NAME>, hyphens kept)."""
    return os.getenv(f"INPUT_{name.replace(' ', '_').upper()}", default).strip()


@dataclass
class ActionInputs:
    """Inputs of a single action run, threaded explicitly into every collaborator call."""

    github_token: str
    repository: str
    event_name: str
    event_path: str
    review_user: str = ""
    post_review: bool = False
    request_changes: bool = False
    config_path: str = ""
    api_base_url: str = "https://api.github.com"

    @classmethod
    def from_env(cls) -> "ActionInputs":
        return cls(
            github_token=_get_input("github-token") or os.getenv("GITHUB_TOKEN", ""),
            repository=os.getenv("GITHUB_REPOSITORY", ""),
            event_name=os.getenv("GITHUB_EVENT_NAME", ""),
            event_path=os.getenv("GITHUB_EVENT_PATH", ""),
            review_user=_get_input("review-user"),
            post_review=_get_input("post-review").lower() == "true",
            request_changes=_get_input("request-changes").lower() == "true",
            config_path=_get_input("config-path"),
            api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
        )
