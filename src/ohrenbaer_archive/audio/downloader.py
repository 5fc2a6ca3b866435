"""Stream remote media files to disk using httpx."""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

import aiofiles
import httpx

from ohrenbaer_archive.audio.models import TaskStatus
from ohrenbaer_archive.utils.errors import FetchError, StreamError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PARTIAL_SUFFIX = ".part"


class FileTransferAgent:
    """Download one URL to one local path.

    Honors skip-if-exists, force and dry-run. The body is streamed into a
    uniquely named ``.part`` file next to the destination and moved into place
    once it is complete, so a failed transfer never leaves a file at the
    destination and concurrent transfers never share a partial file.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     agent = FileTransferAgent(client)
        ...     status = await agent.transfer(url, Path("downloads/ep.mp3"))
    """

    def __init__(self, client: httpx.AsyncClient | None = None, chunk_size: int = CHUNK_SIZE):
        """Initialize the agent.

        Args:
            client: Shared HTTP client. If omitted, one is created on first
                use and closed by ``aclose()``.
            chunk_size: Bytes per streamed chunk
        """
        self._client = client
        self._owns_client = client is None
        self.chunk_size = chunk_size

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # No timeout: a stalled transfer keeps its slot
            self._client = httpx.AsyncClient(follow_redirects=True, timeout=None)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this agent created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def transfer(
        self,
        url: str,
        dest_path: Path,
        force: bool = False,
        dry_run: bool = False,
    ) -> TaskStatus:
        """Fetch ``url`` into ``dest_path``.

        Args:
            url: Absolute URL of the media file
            dest_path: Local destination
            force: Overwrite an existing destination
            dry_run: Only log the intended download

        Returns:
            TaskStatus.DOWNLOADED or TaskStatus.SKIPPED

        Raises:
            FetchError: If the request fails or the status is not 2xx
            StreamError: If streaming the body to disk fails
        """
        if not force and dest_path.exists():
            logger.debug("Skipping %s, already exists", dest_path)
            return TaskStatus.SKIPPED

        if dry_run:
            logger.info("Would download %s to %s", url, dest_path)
            return TaskStatus.SKIPPED

        client = self._get_client()
        request = client.build_request("GET", url)

        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to download {url}: {e}") from e

        try:
            if not response.is_success:
                raise FetchError(
                    f"Failed to download {url}: {response.status_code} {response.reason_phrase}"
                )
            await self._stream_to_file(response, dest_path)
        finally:
            await response.aclose()

        return TaskStatus.DOWNLOADED

    async def _stream_to_file(self, response: httpx.Response, dest_path: Path) -> None:
        """Write the response body to ``dest_path`` via a partial file."""
        partial_path: Path | None = None

        try:
            fd, name = tempfile.mkstemp(
                dir=dest_path.parent, prefix=f"{dest_path.name}.", suffix=PARTIAL_SUFFIX
            )
            os.close(fd)
            partial_path = Path(name)

            async with aiofiles.open(partial_path, "wb") as f:
                async for chunk in response.aiter_bytes(self.chunk_size):
                    await f.write(chunk)
            await asyncio.to_thread(partial_path.replace, dest_path)
        except (OSError, httpx.HTTPError) as e:
            if partial_path is not None:
                await asyncio.to_thread(partial_path.unlink, missing_ok=True)
            raise StreamError(f"Failed to write {dest_path}: {e}") from e
