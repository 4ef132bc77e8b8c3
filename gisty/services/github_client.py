"""Async GitHub gists API client using httpx."""

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from gisty.config import Settings
from gisty.exceptions import GistDecodeError, GistNotFoundError, GistTransportError
from gisty.models.schemas import GistDocument, GistSummary

logger = logging.getLogger(__name__)

_summaries = TypeAdapter(list[GistSummary])


class GitHubClient:
    """
    Issues single GET requests against the gists API and decodes the body.

    Every call sends exactly one request. httpx reads the whole body before
    returning, so the connection is released on success and failure alike.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self._base_url = settings.api_base_url
        self._timeout = settings.request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubClient":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def start(self) -> None:
        """Initialize the HTTP client."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_page(self, url: str) -> list[GistSummary]:
        """
        Fetch one page of the gist list.

        The status code is not inspected: whatever the server sends back is
        decoded as a list of gists.

        Raises:
            GistTransportError: If the API could not be reached
            GistDecodeError: If the body is not a JSON list of gists
        """
        response = await self._get(url)
        try:
            return _summaries.validate_json(response.content)
        except ValidationError as e:
            raise GistDecodeError(_redact(url), str(e)) from e

    async def fetch_document(self, url: str, gist_id: str) -> tuple[GistDocument, int]:
        """
        Fetch a single gist.

        Returns:
            The decoded gist and the response status code. Error statuses
            other than 404 are decoded too, usually into a gist with no files.

        Raises:
            GistNotFoundError: If the API answers 404
            GistTransportError: If the API could not be reached
            GistDecodeError: If the body is not a JSON gist
        """
        response = await self._get(url)
        if response.status_code == 404:
            raise GistNotFoundError(gist_id)
        try:
            document = GistDocument.model_validate_json(response.content)
        except ValidationError as e:
            raise GistDecodeError(_redact(url), str(e)) from e
        return document, response.status_code

    async def check_health(self) -> bool:
        """Check if GitHub API is reachable."""
        if not self._client:
            return False
        try:
            response = await self._client.get(f"{self._base_url}/rate_limit")
            return response.status_code == 200
        except Exception:
            return False

    async def _get(self, url: str) -> httpx.Response:
        if not self._client:
            raise RuntimeError("Client not initialized. Call start() first.")

        logger.debug(f"GET {_redact(url)}")
        try:
            return await self._client.get(url)
        except httpx.TimeoutException as e:
            raise GistTransportError(
                _redact(url),
                "GitHub API request timed out",
                timeout=True,
            ) from e
        except httpx.RequestError as e:
            raise GistTransportError(
                _redact(url),
                f"Failed to connect to GitHub API: {str(e)}",
            ) from e


def _redact(url: str) -> str:
    return str(httpx.URL(url).copy_remove_param("access_token"))
