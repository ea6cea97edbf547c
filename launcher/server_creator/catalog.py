from __future__ import annotations
import json
from http.client import HTTPException
from typing import Iterable, Optional, Union
from pydantic import ValidationError
from .errors import CatalogUnavailable
from .models import CandidateList, ReleaseEntry, ReleaseKind, ReleaseManifest
from .net import fetch_json
from .logging_setup import get_logger

log = get_logger("servercreator.catalog")


def is_stable_release(version_id: str) -> bool:
    """
    True for plain dotted numeric ids such as ``1.20`` or ``1.20.1``.

    Pre-releases (``1.20.1-pre1``, ``1.20-rc1``) and weekly snapshots
    (``23w13a``) are rejected, as is anything with fewer than two components.
    """
    if not version_id or "-" in version_id or "w" in version_id:
        return False
    parts = version_id.split(".")
    if len(parts) < 2:
        return False
    return all(p and p.isascii() and p.isdigit() for p in parts)


class VersionCatalog:
    def __init__(self, manifest_url: str, *, timeout: float = 30.0):
        self.manifest_url = manifest_url
        self.timeout = timeout

    def fetch(self) -> ReleaseManifest:
        log.info("Fetching version manifest: %s", self.manifest_url)
        try:
            data = fetch_json(self.manifest_url, self.timeout)
        except (OSError, HTTPException) as e:
            raise CatalogUnavailable(f"Version manifest unreachable: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CatalogUnavailable(f"Version manifest is not valid JSON: {e}") from e
        except ValueError as e:
            # urllib rejects malformed urls with ValueError
            raise CatalogUnavailable(f"Invalid manifest URL {self.manifest_url}: {e}") from e

        try:
            manifest = ReleaseManifest.model_validate(data)
        except ValidationError as e:
            raise CatalogUnavailable(f"Version manifest has an unexpected format: {e}") from e
        log.info("Manifest lists %d versions (latest release=%s)", len(manifest.versions), manifest.latest.release)
        return manifest

    def filter(self, manifest: Union[ReleaseManifest, Iterable[ReleaseEntry]]) -> CandidateList:
        entries = manifest.versions if isinstance(manifest, ReleaseManifest) else manifest
        candidates = [e for e in entries if e.kind is ReleaseKind.release and is_stable_release(e.id)]
        if not candidates:
            log.warning("No installable releases found in manifest")
        else:
            log.debug("Filtered manifest down to %d candidates", len(candidates))
        return candidates

    def latest_release(self, manifest: ReleaseManifest) -> Optional[ReleaseEntry]:
        candidates = self.filter(manifest)
        for entry in candidates:
            if entry.id == manifest.latest.release:
                return entry
        return candidates[0] if candidates else None
