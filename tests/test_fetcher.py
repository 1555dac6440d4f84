"""Tests for the sequential downloader."""

from unittest.mock import patch

import pytest
import requests

from onekp_manager.errors import HttpStatusError, NetworkError, WriteError
from onekp_manager.fetcher import (
    STATUS_FAILED,
    STATUS_OK,
    STATUS_SKIPPED,
    Fetcher,
    fetch_all,
    summarize,
)

BASE = "https://example.org/assemblies"


@pytest.fixture
def fetcher(mock_session):
    return Fetcher(session=mock_session, timeout=5, interval=0)


class TestFetcher:

    def test_writes_body(self, fetcher, mock_session, make_response, tmp_path):
        mock_session.get.return_value = make_response(chunks=[b"ab", b"", b"cd"])

        result = fetcher.fetch(f"{BASE}/WOGB/WOGB-translated-protein.fa.gz", tmp_path)

        assert result.status == STATUS_OK
        assert result.bytes_written == 4
        assert (tmp_path / "WOGB-translated-protein.fa.gz").read_bytes() == b"abcd"
        assert not (tmp_path / "WOGB-translated-protein.fa.gz.part").exists()
        mock_session.get.assert_called_once_with(
            f"{BASE}/WOGB/WOGB-translated-protein.fa.gz", stream=True, timeout=5)

    def test_http_error(self, fetcher, mock_session, make_response, tmp_path):
        mock_session.get.return_value = make_response(status_code=404, reason="Not Found")

        with pytest.raises(HttpStatusError) as exc_info:
            fetcher.fetch(f"{BASE}/X/X-translated-protein.fa.gz", tmp_path)

        assert exc_info.value.status_code == 404
        assert list(tmp_path.iterdir()) == []

    def test_connection_error(self, fetcher, mock_session, tmp_path):
        mock_session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError):
            fetcher.fetch(f"{BASE}/X/X-translated-protein.fa.gz", tmp_path)

    def test_error_while_streaming_is_network_error(self, fetcher, mock_session,
                                                    make_response, tmp_path):
        response = make_response()
        response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("cut")
        mock_session.get.return_value = response

        with pytest.raises(NetworkError):
            fetcher.fetch(f"{BASE}/X/X-translated-protein.fa.gz", tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_destination(self, fetcher, mock_session, make_response, tmp_path):
        mock_session.get.return_value = make_response()

        with pytest.raises(WriteError):
            fetcher.fetch(f"{BASE}/X/X-translated-protein.fa.gz", tmp_path / "missing")

    def test_url_without_file_name(self, fetcher, mock_session, tmp_path):
        with pytest.raises(WriteError, match="URL has no file name"):
            fetcher.fetch(f"{BASE}/", tmp_path)
        mock_session.get.assert_not_called()

    def test_skip_existing(self, fetcher, mock_session, tmp_path):
        (tmp_path / "WOGB-translated-protein.fa.gz").write_bytes(b"old")

        result = fetcher.fetch(f"{BASE}/WOGB/WOGB-translated-protein.fa.gz", tmp_path)

        assert result.status == STATUS_SKIPPED
        mock_session.get.assert_not_called()

    def test_no_skip_overwrites(self, fetcher, mock_session, make_response, tmp_path):
        (tmp_path / "WOGB-translated-protein.fa.gz").write_bytes(b"old")
        mock_session.get.return_value = make_response(chunks=[b"new"])

        fetcher.fetch(f"{BASE}/WOGB/WOGB-translated-protein.fa.gz", tmp_path,
                      skip_existing=False)

        assert (tmp_path / "WOGB-translated-protein.fa.gz").read_bytes() == b"new"

    def test_interval_between_requests(self, mock_session, make_response, tmp_path):
        mock_session.get.side_effect = lambda *a, **kw: make_response()
        fetcher = Fetcher(session=mock_session, interval=3)

        with patch('onekp_manager.fetcher.time') as mock_time:
            mock_time.monotonic.side_effect = [100.0, 101.0, 102.0]
            fetcher.fetch(f"{BASE}/A/A-translated-protein.fa.gz", tmp_path)
            fetcher.fetch(f"{BASE}/B/B-translated-protein.fa.gz", tmp_path)

        mock_time.sleep.assert_called_once_with(pytest.approx(2.0))


class TestFetchAll:

    def test_one_failure_does_not_stop_others(self, fetcher, mock_session,
                                              make_response, tmp_path):
        urls = [
            f"{BASE}/A/A-translated-protein.fa.gz",
            f"{BASE}/B/B-translated-protein.fa.gz",
            f"{BASE}/C/C-translated-protein.fa.gz",
        ]
        mock_session.get.side_effect = [
            make_response(chunks=[b"a"]),
            requests.ConnectionError("reset"),
            make_response(chunks=[b"c"]),
        ]
        dest = tmp_path / "out"

        results = fetch_all(urls, str(dest), fetcher=fetcher)

        assert [r.status for r in results] == [STATUS_OK, STATUS_FAILED, STATUS_OK]
        assert (dest / "A-translated-protein.fa.gz").read_bytes() == b"a"
        assert (dest / "C-translated-protein.fa.gz").read_bytes() == b"c"
        assert not (dest / "B-translated-protein.fa.gz").exists()
        assert "reset" in results[1].error
        assert summarize(results) == {'success': 2, 'failed': 1, 'skipped': 0}

    def test_http_status_failure_is_reported(self, fetcher, mock_session,
                                             make_response, tmp_path):
        mock_session.get.return_value = make_response(status_code=500, reason="Server Error")

        results = fetch_all([f"{BASE}/A/A-translated-cds.fa.gz"], str(tmp_path), fetcher=fetcher)

        assert results[0].status == STATUS_FAILED
        assert "HTTP 500" in results[0].error
        assert not results[0].ok

    def test_progress_callback(self, fetcher, mock_session, make_response, tmp_path):
        mock_session.get.side_effect = lambda *a, **kw: make_response()
        urls = [f"{BASE}/A/a.fa.gz", f"{BASE}/B/b.fa.gz"]
        seen = []

        fetch_all(urls, str(tmp_path), fetcher=fetcher,
                  progress_callback=lambda url, i, n: seen.append((url, i, n)))

        assert seen == [(urls[0], 1, 2), (urls[1], 2, 2)]

    def test_empty_url_list(self, fetcher, tmp_path):
        assert fetch_all([], str(tmp_path / "new"), fetcher=fetcher) == []
        assert (tmp_path / "new").is_dir()

    def test_summarize_counts_skipped(self, fetcher, tmp_path):
        (tmp_path / "a.fa.gz").write_bytes(b"x")
        results = fetch_all([f"{BASE}/A/a.fa.gz"], str(tmp_path), fetcher=fetcher)
        assert summarize(results) == {'success': 0, 'failed': 0, 'skipped': 1}

    def test_url_without_file_name_fails(self, fetcher, mock_session, tmp_path):
        results = fetch_all([f"{BASE}/WOGB/"], str(tmp_path), fetcher=fetcher)

        assert results[0].status == STATUS_FAILED
        assert "URL has no file name" in results[0].error
        assert summarize(results) == {'success': 0, 'failed': 1, 'skipped': 0}

    def test_destination_cannot_be_created(self, fetcher, mock_session, tmp_path):
        blocker = tmp_path / "taken"
        blocker.write_bytes(b"not a directory")
        urls = [f"{BASE}/A/a.fa.gz", f"{BASE}/B/b.fa.gz"]

        results = fetch_all(urls, str(blocker / "out"), fetcher=fetcher)

        assert [r.status for r in results] == [STATUS_FAILED, STATUS_FAILED]
        assert all("cannot create" in r.error for r in results)
        mock_session.get.assert_not_called()
