"""
Shared utilities for logging and retry handling.
"""

from reviewgate.core.utils.logging import configure_logging, log_operation
from reviewgate.core.utils.retry import RetryPolicy, retry_with_backoff

__all__ = [
    "RetryPolicy",
    "configure_logging",
    "log_operation",
    "retry_with_backoff",
]
