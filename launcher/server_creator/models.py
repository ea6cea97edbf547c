from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator


class ReleaseKind(str, Enum):
    release = "release"
    snapshot = "snapshot"
    other = "other"


class ReleaseEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: ReleaseKind = Field(validation_alias=AliasChoices("type", "kind"))
    metadata_url: str = Field(validation_alias=AliasChoices("url", "metadata_url"))
    release_time: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("releaseTime", "release_time"))

    @field_validator("kind", mode="before")
    @classmethod
    def coerce_kind(cls, value: Any) -> Any:
        # old_alpha, old_beta and anything the manifest adds later
        if isinstance(value, ReleaseKind):
            return value
        if value in ("release", "snapshot"):
            return value
        return ReleaseKind.other


class LatestReleases(BaseModel):
    model_config = ConfigDict(frozen=True)

    release: Optional[str] = None
    snapshot: Optional[str] = None


class ReleaseManifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    latest: LatestReleases = Field(default_factory=LatestReleases)
    versions: List[ReleaseEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_ids(self) -> "ReleaseManifest":
        seen = set()
        for entry in self.versions:
            if entry.id in seen:
                raise ValueError(f"duplicate version id {entry.id!r} in manifest")
            seen.add(entry.id)
        return self


CandidateList = List[ReleaseEntry]


class DownloadInfo(BaseModel):
    sha1: str = ""
    size: int = 0
    url: str


class JavaVersion(BaseModel):
    component: Optional[str] = None
    major_version: Optional[int] = Field(default=None, validation_alias=AliasChoices("majorVersion", "major_version"))


class VersionMetadata(BaseModel):
    """Subset of the per-version metadata document we care about."""
    id: str
    downloads: Dict[str, DownloadInfo] = Field(default_factory=dict)
    java_version: Optional[JavaVersion] = Field(default=None, validation_alias=AliasChoices("javaVersion", "java_version"))


@dataclass(frozen=True)
class ArtifactDescriptor:
    download_url: str
    size_bytes: int
    checksum: str
    java_major_version: Optional[int] = None


@dataclass(frozen=True)
class LaunchAttemptResult:
    tuned: bool
    succeeded: bool
    exit_status: Optional[int] = None


class Stage(str, Enum):
    idle = "idle"
    catalog = "catalog"
    resolved = "resolved"
    downloaded = "downloaded"
    launched = "launched"
    licensed = "licensed"
    done = "done"
    failed = "failed"


_STAGE_ORDER = [
    Stage.idle, Stage.catalog, Stage.resolved, Stage.downloaded,
    Stage.launched, Stage.licensed, Stage.done,
]


@dataclass
class ProvisioningState:
    """
    Top-level state of one provisioning run.

    Moves forward only; ``failed`` is reachable from any stage that is not
    terminal.
    """
    stage: Stage = Stage.idle
    version_id: Optional[str] = None
    artifact: Optional[ArtifactDescriptor] = None
    launch: Optional[LaunchAttemptResult] = None
    script_path: Optional[str] = None
    script_command: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.stage in (Stage.done, Stage.failed)

    def advance(self, stage: Stage) -> None:
        if self.finished:
            raise ValueError(f"run already finished in stage {self.stage.value!r}")
        if stage is Stage.failed:
            self.stage = stage
            return
        if _STAGE_ORDER.index(stage) <= _STAGE_ORDER.index(self.stage):
            raise ValueError(f"cannot move from {self.stage.value!r} back to {stage.value!r}")
        self.stage = stage

    def fail(self, message: str) -> None:
        self.advance(Stage.failed)
        self.error = message

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["stage"] = self.stage.value
        return data
