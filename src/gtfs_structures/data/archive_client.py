import logging

import httpx

from gtfs_structures.data.config import GTFSConfig
from gtfs_structures.errors import GTFSAccessError

logger = logging.getLogger(__name__)


class GTFSArchiveClient:
    """Async HTTP client for downloading a zipped GTFS bundle.

    Usage:
        async with GTFSArchiveClient(config) as client:
            body = await client.fetch_archive("https://example.com/gtfs.zip")
    """

    def __init__(self, config: GTFSConfig):
        """Initialize the client.

        Args:
            config: Configuration with timeout and user agent.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GTFSArchiveClient":
        """Enter async context - create HTTP client."""
        headers = {"User-Agent": self._config.user_agent}
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self._config.download_timeout,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_archive(self, url: str) -> bytes:
        """Download the archive at url.

        Returns:
            The raw bytes of the ZIP file.

        Raises:
            RuntimeError: If client not initialized.
            GTFSAccessError: If the HTTP request fails.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        logger.info(f"Downloading GTFS archive from {url}")
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise GTFSAccessError(f"Cannot download GTFS archive from {url}: {e}") from e

        body = response.content
        logger.info(f"  Downloaded {len(body):,} bytes")
        return body
