"""Tests for downloading zipped GTFS bundles."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from gtfs_structures.data.archive_client import GTFSArchiveClient
from gtfs_structures.data.config import GTFSConfig
from gtfs_structures.data.gtfs_loader import GTFSLoader
from gtfs_structures.errors import GTFSAccessError, GTFSFormatError
from gtfs_structures.models.feed import Gtfs


@pytest.fixture
def config() -> GTFSConfig:
    """Create a test config."""
    return GTFSConfig(
        feed_url="https://example.com/gtfs.zip",
        download_timeout=5.0,
        user_agent="test-agent",
    )


def mock_http_client(content: bytes, error: Exception | None = None) -> AsyncMock:
    """Build an httpx.AsyncClient replacement returning content."""
    # raise_for_status is sync, not async
    mock_response = MagicMock()
    mock_response.content = content
    if error is not None:
        mock_response.raise_for_status.side_effect = error

    mock_client = AsyncMock()
    mock_client.get = AsyncMock(return_value=mock_response)
    return mock_client


async def test_fetch_archive(config: GTFSConfig) -> None:
    """The response body is returned as is."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(b"zip bytes")
        mock_client_class.return_value = mock_client

        async with GTFSArchiveClient(config) as client:
            body = await client.fetch_archive("https://example.com/gtfs.zip")

    assert body == b"zip bytes"
    mock_client.get.assert_awaited_once_with("https://example.com/gtfs.zip")
    _, kwargs = mock_client_class.call_args
    assert kwargs["timeout"] == 5.0
    assert kwargs["headers"]["User-Agent"] == "test-agent"


async def test_fetch_requires_context(config: GTFSConfig) -> None:
    client = GTFSArchiveClient(config)

    with pytest.raises(RuntimeError):
        await client.fetch_archive("https://example.com/gtfs.zip")


async def test_http_error_is_access_error(config: GTFSConfig) -> None:
    error = httpx.HTTPStatusError("404 Not Found", request=MagicMock(), response=MagicMock())

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client_class.return_value = mock_http_client(b"", error=error)

        async with GTFSArchiveClient(config) as client:
            with pytest.raises(GTFSAccessError):
                await client.fetch_archive("https://example.com/missing.zip")


async def test_load_url(config: GTFSConfig, sample_gtfs_zip: Path) -> None:
    """A downloaded archive is loaded like a local one."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client_class.return_value = mock_http_client(sample_gtfs_zip.read_bytes())

        gtfs = await GTFSLoader(config).load_url("https://example.com/gtfs.zip")

    assert isinstance(gtfs, Gtfs)
    assert len(gtfs.stops) == 5
    assert len(gtfs.get_trip("trip1").stop_times) == 2


async def test_load_url_not_a_zip(config: GTFSConfig) -> None:
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client_class.return_value = mock_http_client(b"<html>Not found</html>")

        with pytest.raises(GTFSFormatError):
            await GTFSLoader(config).load_url("https://example.com/gtfs.zip")


async def test_gtfs_from_url(config: GTFSConfig, sample_gtfs_zip: Path) -> None:
    """Gtfs.from_url downloads with the configured settings."""
    with (
        patch("gtfs_structures.data.gtfs_loader.get_config", return_value=config),
        patch("httpx.AsyncClient") as mock_client_class,
    ):
        mock_client = mock_http_client(sample_gtfs_zip.read_bytes())
        mock_client_class.return_value = mock_client

        gtfs = await Gtfs.from_url("https://example.com/gtfs.zip")

    mock_client.get.assert_awaited_once_with("https://example.com/gtfs.zip")
    assert mock_client_class.call_args.kwargs["headers"]["User-Agent"] == "test-agent"
    assert gtfs.counts()["stop_times"] == 5
