"""
Pytest configuration: puts the project root on sys.path and shares engine fixtures.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class RecordingSink:
    """Collects messages written to a reporting sink."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def text(self) -> str:
        return "\n".join(self.messages)


@pytest.fixture
def info() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def warn() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def reviewers_data() -> dict:
    """Configuration document with a catch-all rule, a two-user rule and a team rule."""
    return {
        "teams": {
            "everyone": {"users": ["user1", "user2"]},
        },
        "reviewers": {
            "": {
                "description": "user 'user1' required reviewer for all files",
                "users": ["user1"],
                "requiredApproverCount": 1,
            },
            ".github/": {
                "description": ".github directory requires two reviews",
                "users": ["user1", "user2"],
                "requiredApproverCount": 2,
            },
            "team/": {
                "description": "team directory requires two reviews",
                "teams": ["everyone"],
                "requiredApproverCount": 2,
            },
        },
    }
