"""
Loads the raw bytes of a metainfo file from disk or over HTTP.
"""
import asyncio
import logging
from pathlib import Path

import aiohttp

logger = logging.getLogger(__name__)

# Inputs larger than this are refused before they reach the decoder.
MAX_INPUT_BYTES = 64 * 1024 * 1024

FETCH_TIMEOUT_SECONDS = 30
CHUNK_SIZE = 64 * 1024


class SourceError(Exception):
    """The input could not be read, or is too large to decode."""
    pass


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def read_file(path, *, max_size=MAX_INPUT_BYTES) -> bytes:
    path = Path(path)
    try:
        size = path.stat().st_size
        if size > max_size:
            raise SourceError(f"{path} is {size} bytes, larger than the {max_size} byte limit")
        logger.debug("Reading %d bytes from %s", size, path)
        return path.read_bytes()
    except OSError as exc:
        raise SourceError(f"Could not read {path}: {exc.strerror or exc}") from exc


async def fetch_url(url: str, *, max_size=MAX_INPUT_BYTES) -> bytes:
    logger.debug("Fetching %s", url)
    timeout = aiohttp.ClientTimeout(total=FETCH_TIMEOUT_SECONDS)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as resp:
                if resp.status != 200:
                    raise SourceError(f"GET {url} returned HTTP {resp.status}")
                if resp.content_length is not None and resp.content_length > max_size:
                    raise SourceError(f"{url} is {resp.content_length} bytes, larger than the {max_size} byte limit")
                chunks = []
                received = 0
                async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                    received += len(chunk)
                    if received > max_size:
                        raise SourceError(f"{url} is larger than the {max_size} byte limit")
                    chunks.append(chunk)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise SourceError(f"Could not fetch {url}: {exc}") from exc

    data = b"".join(chunks)
    logger.debug("Fetched %d bytes from %s", len(data), url)
    return data


async def load_source(location: str, *, max_size=MAX_INPUT_BYTES) -> bytes:
    """Returns the bytes at `location`, a local path or an http(s) URL."""
    if is_url(location):
        return await fetch_url(location, max_size=max_size)
    return read_file(location, max_size=max_size)
