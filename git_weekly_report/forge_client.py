"""Base class for git forge event sources."""

from abc import ABC, abstractmethod


class ForgeClient(ABC):
    """Abstract base class for git forge API clients.

    A forge client supplies the raw activity stream of one user. Paging and
    fetch errors are handled here, so callers always receive the complete
    list or an exception.
    """

    def __init__(self, token: str | None = None):
        """Initialize the forge client.

        Args:
            token: API token for authentication (optional)
        """
        self.token = token
        self.api_call_count = 0

    @abstractmethod
    def list_user_events(self, username: str) -> list[dict]:
        """Fetch every available activity event performed by a user.

        Args:
            username: Login of the user whose events are listed

        Returns:
            Raw event objects, newest first as the forge returns them

        Raises:
            EventSourceError: If any page cannot be fetched
        """
        pass

    @abstractmethod
    def get_forge_name(self) -> str:
        """Return the name of this forge (e.g., 'GitHub').

        Returns:
            Human-readable name of the forge
        """
        pass

    def get_api_call_count(self) -> int:
        """Get the number of API calls made by this client.

        Returns:
            Total number of API calls
        """
        return self.api_call_count
