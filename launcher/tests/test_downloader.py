"""
Tests for the artifact downloader.
"""

import hashlib
import io
import pytest
from unittest.mock import patch
from urllib.error import URLError

from server_creator.downloader import Downloader, human_readable_size
from server_creator.errors import DownloadFailed
from server_creator.models import ArtifactDescriptor

PAYLOAD = b"PK\x03\x04" + b"x" * 300_000


def _descriptor(payload=PAYLOAD, checksum=None):
    return ArtifactDescriptor(
        download_url="https://dl.example/server.jar",
        size_bytes=len(payload),
        checksum=checksum if checksum is not None else hashlib.sha1(payload).hexdigest(),
    )


class TestDownload:

    def test_writes_file_and_reports_progress(self, tmp_path):
        dest = tmp_path / "server" / "server.jar"
        messages = []
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)) as op:
            result = Downloader(timeout=3).download(dest, _descriptor(), messages.append)

        op.assert_called_once_with("https://dl.example/server.jar", 3)
        assert result == dest
        assert dest.read_bytes() == PAYLOAD
        assert messages[0] == "Downloading server.jar"
        assert any("100%" in m for m in messages)

    def test_creates_directory_idempotently(self, tmp_path):
        dest = tmp_path / "server" / "server.jar"
        dest.parent.mkdir()
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            Downloader().download(dest, _descriptor())
        assert dest.stat().st_size == len(PAYLOAD)

    def test_overwrites_existing_file(self, tmp_path):
        dest = tmp_path / "server.jar"
        dest.write_bytes(b"old contents that are longer than nothing" * 10_000)
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            Downloader().download(dest, _descriptor())
        assert dest.read_bytes() == PAYLOAD

    def test_progress_sink_is_optional(self, tmp_path):
        dest = tmp_path / "server.jar"
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            Downloader().download(dest, _descriptor())
        assert dest.exists()

    def test_unknown_size_still_reports_once(self, tmp_path):
        dest = tmp_path / "server.jar"
        messages = []
        descriptor = ArtifactDescriptor(download_url="https://dl.example/server.jar", size_bytes=0, checksum="")
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            Downloader().download(dest, descriptor, messages.append)
        assert messages == ["Downloading server.jar"]

    def test_connection_failure_leaves_empty_file(self, tmp_path):
        dest = tmp_path / "server.jar"
        with patch("server_creator.downloader.open_url", side_effect=URLError("connection refused")):
            with pytest.raises(DownloadFailed):
                Downloader().download(dest, _descriptor())
        assert not dest.exists() or dest.stat().st_size == 0

    def test_malformed_url(self, tmp_path):
        descriptor = ArtifactDescriptor(download_url="not-a-url/server.jar", size_bytes=0, checksum="")
        with pytest.raises(DownloadFailed, match="not-a-url"):
            Downloader().download(tmp_path / "server.jar", descriptor)

    def test_unwritable_destination(self, tmp_path):
        dest = tmp_path / "server.jar"
        dest.mkdir()
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            with pytest.raises(DownloadFailed):
                Downloader().download(dest, _descriptor())


class TestVerification:

    def test_not_checked_by_default(self, tmp_path):
        dest = tmp_path / "server.jar"
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            Downloader().download(dest, _descriptor(checksum="0" * 40))
        assert dest.read_bytes() == PAYLOAD

    def test_matching_checksum(self, tmp_path):
        dest = tmp_path / "server.jar"
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            Downloader(verify=True).download(dest, _descriptor())
        assert dest.exists()

    def test_checksum_mismatch(self, tmp_path):
        dest = tmp_path / "server.jar"
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(PAYLOAD)):
            with pytest.raises(DownloadFailed, match="sha1 mismatch"):
                Downloader(verify=True).download(dest, _descriptor(checksum="0" * 40))

    def test_size_mismatch(self, tmp_path):
        dest = tmp_path / "server.jar"
        truncated = PAYLOAD[:1000]
        with patch("server_creator.downloader.open_url", return_value=io.BytesIO(truncated)):
            with pytest.raises(DownloadFailed, match="expected"):
                Downloader(verify=True).download(dest, _descriptor())


@pytest.mark.parametrize("n,expected", [
    (512, "512 B"),
    (1536, "1.5 KB"),
    (49150256, "46.9 MB"),
])
def test_human_readable_size(n, expected):
    assert human_readable_size(n) == expected
