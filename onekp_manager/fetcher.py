"""
Sequence Fetcher - Download translated assemblies from GigaDB.

Files are written flat into the destination directory, named after the
final segment of their URL:

    root_dir/
        WOGB-translated-protein.fa.gz
        WOGB-translated-nucleotides.fa.gz

Downloads run one at a time in input order. A failed URL is reported and
the remaining URLs are still attempted; nothing is retried.
"""

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import requests

from .config import CHUNK_SIZE, DEFAULT_TIMEOUT, REQUEST_INTERVAL
from .errors import FetchError, HttpStatusError, NetworkError, WriteError
from .urls import filename_from_url

logger = logging.getLogger(__name__)

STATUS_OK = 'ok'
STATUS_SKIPPED = 'skipped'
STATUS_FAILED = 'failed'


@dataclass
class FetchResult:
    url: str
    path: Path
    status: str
    error: Optional[str] = None
    bytes_written: int = 0

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILED


class Fetcher:
    """
    Sequential HTTP downloader.

    Consecutive requests are spaced at least `interval` seconds apart to
    stay polite with the GigaDB mirror.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = REQUEST_INTERVAL,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.interval = interval
        self._last_request: Optional[float] = None

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _wait_turn(self):
        if self._last_request is None or self.interval <= 0:
            return
        elapsed = time.monotonic() - self._last_request
        if elapsed < self.interval:
            time.sleep(self.interval - elapsed)

    def fetch(self, url: str, dest_dir: Path, skip_existing: bool = True) -> FetchResult:
        """
        Download one URL into dest_dir.

        Raises:
            NetworkError: Connection failed or timed out
            HttpStatusError: Server returned a non-2xx status
            WriteError: Destination file could not be written
        """
        filename = filename_from_url(url)
        if not filename:
            raise WriteError(url, "URL has no file name")
        dest = Path(dest_dir) / filename

        if skip_existing and dest.exists():
            return FetchResult(url, dest, STATUS_SKIPPED)

        self._wait_turn()
        tmp = dest.with_name(dest.name + ".part")
        written = 0

        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            self._last_request = time.monotonic()
            raise NetworkError(url, str(e)) from e

        try:
            if not 200 <= response.status_code < 300:
                raise HttpStatusError(url, response.status_code, response.reason or "")
            with open(tmp, 'wb') as f:
                for chunk in response.iter_content(CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
            os.replace(tmp, dest)
        except requests.RequestException as e:
            raise NetworkError(url, str(e)) from e
        except OSError as e:
            raise WriteError(url, f"cannot write {dest}: {e}") from e
        finally:
            response.close()
            self._last_request = time.monotonic()
            if tmp.exists():
                tmp.unlink()

        return FetchResult(url, dest, STATUS_OK, bytes_written=written)


def fetch_all(
    urls: Sequence[str],
    dest_dir: str,
    *,
    fetcher: Optional[Fetcher] = None,
    skip_existing: bool = True,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> List[FetchResult]:
    """
    Download each URL into dest_dir, one after another.

    Args:
        urls: URLs to download, in order
        dest_dir: Destination directory (created if missing)
        fetcher: Fetcher to use (default: a new one, closed afterwards)
        skip_existing: Skip URLs whose destination file already exists
        progress_callback: Optional callback(url, current, total)

    Returns:
        One FetchResult per URL, in input order
    """
    output_path = Path(dest_dir)
    try:
        output_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Cannot create %s: %s", output_path, e)
        print(f"   FAILED: cannot create {output_path}: {e}")
        return [
            FetchResult(url, output_path / filename_from_url(url), STATUS_FAILED,
                        error=str(WriteError(url, f"cannot create {output_path}: {e}")))
            for url in urls
        ]

    own_fetcher = fetcher is None
    if own_fetcher:
        fetcher = Fetcher()

    results = []
    total = len(urls)

    try:
        for idx, url in enumerate(urls, 1):
            if progress_callback:
                progress_callback(url, idx, total)

            print(f"[{idx}/{total}] {filename_from_url(url)}")
            try:
                result = fetcher.fetch(url, output_path, skip_existing=skip_existing)
            except FetchError as e:
                logger.warning("Download failed: %s", e)
                print(f"   FAILED: {e}")
                result = FetchResult(url, output_path / filename_from_url(url),
                                     STATUS_FAILED, error=str(e))
            else:
                if result.status == STATUS_SKIPPED:
                    print("   Skipping (already exists)")
                else:
                    print(f"   Done: {result.bytes_written:,} bytes")
            results.append(result)
    finally:
        if own_fetcher:
            fetcher.close()

    return results


def summarize(results: Sequence[FetchResult]) -> dict:
    """Counts of results by status: {'success': n, 'failed': n, 'skipped': n}"""
    stats = {'success': 0, 'failed': 0, 'skipped': 0}
    for result in results:
        if result.status == STATUS_OK:
            stats['success'] += 1
        elif result.status == STATUS_SKIPPED:
            stats['skipped'] += 1
        else:
            stats['failed'] += 1
    return stats
