"""
Download cache for the catalog table and the assembly index.

Text resources are kept under the cache directory, one file per URL named
after the URL's final path segment (index.html for directory URLs). A
cached copy younger than CACHE_MAX_AGE is reused instead of contacting
GigaDB again.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional

import requests

from .config import CACHE_MAX_AGE, DEFAULT_CACHE_DIR, DEFAULT_TIMEOUT
from .errors import FetchError, HttpStatusError, NetworkError
from .urls import filename_from_url

logger = logging.getLogger(__name__)


def cache_path_for(url: str, cache_dir: Optional[str] = None) -> Path:
    """Location of the cached copy of url."""
    filename = filename_from_url(url) or "index.html"
    return Path(cache_dir or DEFAULT_CACHE_DIR) / filename


def is_stale(path: Path, max_age: float = CACHE_MAX_AGE) -> bool:
    """True if path is missing or older than max_age seconds."""
    try:
        mtime = path.stat().st_mtime
    except FileNotFoundError:
        return True
    return time.time() - mtime >= max_age


def download_text(url: str, session: Optional[requests.Session] = None,
                  timeout: float = DEFAULT_TIMEOUT) -> str:
    """GET url and return the decoded body."""
    sess = session or requests.Session()
    try:
        response = sess.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(url, str(e)) from e
    finally:
        if session is None:
            sess.close()

    if not 200 <= response.status_code < 300:
        raise HttpStatusError(url, response.status_code, response.reason or "")
    return response.text


def fetch_cached_text(
    url: str,
    cache_dir: Optional[str] = None,
    max_age: float = CACHE_MAX_AGE,
    refresh: bool = False,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Return the text at url, using the local cache when it is fresh.

    Args:
        url: Resource to fetch
        cache_dir: Cache directory (default: DEFAULT_CACHE_DIR)
        max_age: Maximum age of a reusable cached copy, in seconds
        refresh: Ignore the cached copy and download again
        session: Optional requests session to reuse

    Returns:
        Resource contents

    Raises:
        NetworkError, HttpStatusError: Download failed and no cached copy exists
    """
    path = cache_path_for(url, cache_dir)

    if not refresh and not is_stale(path, max_age):
        logger.debug("Using cached %s", path)
        return path.read_text(encoding='utf-8')

    logger.info("Downloading %s", url)
    try:
        text = download_text(url, session=session)
    except FetchError as e:
        if path.exists():
            logger.warning("%s; using stale cache %s", e, path)
            return path.read_text(encoding='utf-8')
        raise

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".part")
    tmp.write_text(text, encoding='utf-8')
    os.replace(tmp, path)
    return text
