from abc import ABC, abstractmethod

from reviewgate.rules.models import ReviewersConfig


class ConfigLoader(ABC):
    """
    Abstract interface for fetching the reviewers configuration of a repository.

    This interface allows us to swap out different configuration sources
    (GitHub files, local files in tests) without changing the evaluation flow.
    """

    @abstractmethod
    async def get_config(self, repository: str, token: str) -> ReviewersConfig:
        """
        Fetch the reviewers configuration for a specific repository.

        Args:
            repository: The repository in format "owner/repo"
            token: Token used to read the repository contents

        Returns:
            The parsed configuration

        Raises:
            ConfigurationError: If the configuration is missing or malformed
        """
        pass
