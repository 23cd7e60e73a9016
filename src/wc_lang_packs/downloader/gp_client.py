"""GlotPress project API client.

Fetches project descriptors from ``/api/projects/{path}``. A descriptor lists
the project's translation sets and its sub-projects; the language packs
hierarchy is root project -> extension -> extension version.
"""

import json

from pydantic import ValidationError

from ..errors import DecodeError
from ..models import ProjectDescriptor
from ..utils.logging import get_logger
from .client import RateLimitedClient

logger = get_logger(__name__)


def join_url(root: str, path: str) -> str:
    """Join a root URL and a relative path with exactly one slash."""
    return root.rstrip("/") + "/" + path.lstrip("/")


class GlotPressClient:
    """Client for the GlotPress projects API."""

    def __init__(self, client: RateLimitedClient, api_url: str):
        """Initialize the project client.

        Args:
            client: Rate-limited HTTP client
            api_url: Root of the projects API (e.g. .../api/projects/)
        """
        self.client = client
        self.api_url = api_url

    def project_url(self, path: str) -> str:
        """Get the API URL of a project path."""
        return join_url(self.api_url, path)

    async def fetch_project(self, path: str) -> ProjectDescriptor:
        """Fetch and decode a project descriptor.

        Args:
            path: Project path relative to the API root
                (e.g. 'woocommerce/woocommerce-bookings')

        Returns:
            The decoded project descriptor

        Raises:
            NetworkError: If the request fails
            DecodeError: If the body is not a valid project descriptor
        """
        url = self.project_url(path)
        logger.info(f"Fetching project at {url}")

        content = await self.client.get(url)
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object from {url}, got {type(data).__name__}")

        try:
            return ProjectDescriptor.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected project schema from {url}: {e}") from e
