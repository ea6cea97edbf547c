from __future__ import annotations
import hashlib
from http.client import HTTPException
from pathlib import Path
from typing import Callable, Optional
from .errors import DownloadFailed
from .models import ArtifactDescriptor
from .net import open_url
from .logging_setup import get_logger

log = get_logger("servercreator.download")

ProgressSink = Callable[[str], None]

CHUNK_SIZE = 64 * 1024


def human_readable_size(n: int) -> str:
    size = float(n)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024


class Downloader:
    def __init__(self, *, timeout: float = 30.0, verify: bool = False):
        self.timeout = timeout
        self.verify = verify

    def download(self, destination: Path, descriptor: ArtifactDescriptor,
                 progress: Optional[ProgressSink] = None) -> Path:
        """
        Stream ``descriptor.download_url`` into ``destination``.

        The destination is truncated before the request goes out, so a failed
        run leaves an empty or partial file behind rather than a stale one.
        Size and sha1 are only checked when ``verify`` is enabled.
        """
        report = progress or (lambda _msg: None)
        name = destination.name
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            out = open(destination, "wb")
        except OSError as e:
            raise DownloadFailed(f"Cannot create {destination}: {e}") from e

        written = 0
        sha1 = hashlib.sha1()
        with out:
            try:
                response = open_url(descriptor.download_url, self.timeout)
            except (OSError, HTTPException, ValueError) as e:
                raise DownloadFailed(f"Cannot download {descriptor.download_url}: {e}") from e

            log.info("Downloading %s -> %s", descriptor.download_url, destination)
            report(f"Downloading {name}")
            total = descriptor.size_bytes
            next_step = 10
            with response:
                while True:
                    try:
                        chunk = response.read(CHUNK_SIZE)
                    except (OSError, HTTPException) as e:
                        raise DownloadFailed(f"Connection lost while downloading {name}: {e}") from e
                    if not chunk:
                        break
                    try:
                        out.write(chunk)
                    except OSError as e:
                        raise DownloadFailed(f"Cannot write {destination}: {e}") from e
                    written += len(chunk)
                    if self.verify:
                        sha1.update(chunk)
                    if total > 0:
                        percent = written * 100 // total
                        if percent >= next_step:
                            report(f"Downloading {name} ({min(percent, 100)}%, "
                                   f"{human_readable_size(written)} of {human_readable_size(total)})")
                            next_step = (percent // 10 + 1) * 10

        log.info("Downloaded %s (%s)", destination, human_readable_size(written))
        if self.verify:
            self._verify(destination, descriptor, written, sha1.hexdigest())
        return destination

    def _verify(self, destination: Path, descriptor: ArtifactDescriptor, written: int, digest: str) -> None:
        if descriptor.size_bytes and written != descriptor.size_bytes:
            raise DownloadFailed(
                f"{destination.name}: expected {descriptor.size_bytes} bytes, got {written}")
        if descriptor.checksum and digest.lower() != descriptor.checksum.lower():
            raise DownloadFailed(
                f"{destination.name}: sha1 mismatch (expected {descriptor.checksum}, got {digest})")
        log.info("Verified %s (sha1=%s)", destination.name, digest)
