from __future__ import annotations
import json
from http.client import HTTPException
from pydantic import ValidationError
from .errors import MetadataUnavailable
from .models import ArtifactDescriptor, ReleaseEntry, VersionMetadata
from .net import fetch_json
from .logging_setup import get_logger

log = get_logger("servercreator.resolver")


class ArtifactResolver:
    """Turns a manifest entry into the concrete server download."""

    def __init__(self, *, timeout: float = 30.0, download_key: str = "server"):
        self.timeout = timeout
        self.download_key = download_key

    def resolve(self, candidate: ReleaseEntry) -> ArtifactDescriptor:
        log.info("Resolving metadata for %s: %s", candidate.id, candidate.metadata_url)
        try:
            data = fetch_json(candidate.metadata_url, self.timeout)
        except (OSError, HTTPException) as e:
            raise MetadataUnavailable(f"Metadata for {candidate.id} unreachable: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MetadataUnavailable(f"Metadata for {candidate.id} is not valid JSON: {e}") from e
        except ValueError as e:
            raise MetadataUnavailable(f"Invalid metadata URL for {candidate.id}: {candidate.metadata_url}") from e

        try:
            meta = VersionMetadata.model_validate(data)
        except ValidationError as e:
            raise MetadataUnavailable(f"Metadata for {candidate.id} has an unexpected format: {e}") from e

        dl = meta.downloads.get(self.download_key)
        if dl is None or not dl.url:
            raise MetadataUnavailable(f"Version {candidate.id} has no {self.download_key} download")

        java_major = meta.java_version.major_version if meta.java_version else None
        descriptor = ArtifactDescriptor(
            download_url=dl.url,
            size_bytes=dl.size,
            checksum=dl.sha1,
            java_major_version=java_major,
        )
        log.info("Resolved %s artifact: %s (%d bytes, sha1=%s, java=%s)",
                 candidate.id, dl.url, dl.size, dl.sha1 or "-", java_major or "?")
        return descriptor
