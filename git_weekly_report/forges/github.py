"""GitHub API client implementation."""

import logging

import httpx

from ..errors import EventSourceError
from ..forge_client import ForgeClient

logger = logging.getLogger(__name__)


class GitHubClient(ForgeClient):
    """GitHub API client for fetching a user's public activity events."""

    def __init__(
        self,
        token: str | None = None,
        endpoint: str = "https://api.github.com",
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token
            endpoint: API endpoint URL (for GitHub Enterprise)
            transport: Optional httpx transport, used in place of the network
        """
        super().__init__(token)
        self.endpoint = endpoint.rstrip("/")
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    def get_forge_name(self) -> str:
        """Return the forge name."""
        return "GitHub"

    def list_user_events(self, username: str) -> list[dict]:
        """Fetch the public events performed by a GitHub user.

        Args:
            username: GitHub login

        Returns:
            All events from every page of the events listing

        Raises:
            EventSourceError: If a page request fails
        """
        url = f"{self.endpoint}/users/{username}/events/public"
        return self._make_request(url)

    def _make_request(self, url: str, params: dict | None = None) -> list[dict]:
        """Make paginated requests to GitHub API.

        Args:
            url: API endpoint URL
            params: Query parameters

        Returns:
            List of all results from paginated responses

        Raises:
            EventSourceError: If a request fails or returns a non-list body
        """
        results = []
        params = params or {}
        params["per_page"] = 100

        with httpx.Client(
            headers=self.headers, timeout=30.0, transport=self.transport
        ) as client:
            page_num = 1
            while url:
                logger.debug(f"GitHub API: GET {url} (page {page_num}, params: {params})")
                try:
                    response = client.get(url, params=params)
                    self.api_call_count += 1
                    response.raise_for_status()
                    data = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    raise EventSourceError(
                        f"Unable to list events for page {page_num}: {e}"
                    ) from e

                if not isinstance(data, list):
                    raise EventSourceError(
                        f"Unable to list events for page {page_num}: "
                        f"expected a list, got {type(data).__name__}"
                    )

                logger.debug(f"GitHub API: Received {len(data)} items")
                results.extend(data)

                link_header = response.headers.get("Link", "")
                url = self._get_next_page_url(link_header)
                params = None
                page_num += 1

        logger.debug(f"GitHub API: Total results: {len(results)}")
        return results

    def _get_next_page_url(self, link_header: str) -> str | None:
        """Extract next page URL from Link header.

        Args:
            link_header: GitHub Link header value

        Returns:
            URL of next page or None if no more pages
        """
        if not link_header:
            return None

        for link in link_header.split(","):
            parts = link.split(";")
            if len(parts) == 2 and 'rel="next"' in parts[1]:
                return parts[0].strip("<> ")

        return None
