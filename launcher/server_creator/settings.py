from __future__ import annotations
import os
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MANIFEST_URL = "https://launchermeta.mojang.com/mc/game/version_manifest.json"

def _default_script_name() -> str:
    return "run.bat" if os.name == "nt" else "run.sh"

class Settings(BaseSettings):
    manifest_url: str = Field(default=DEFAULT_MANIFEST_URL, alias="MANIFEST_URL")
    server_dir: Path = Field(default=Path("server"), alias="SERVER_DIR")
    artifact_name: str = Field(default="server.jar", alias="ARTIFACT_NAME")
    license_name: str = Field(default="eula.txt", alias="LICENSE_NAME")
    script_name: str = Field(default_factory=_default_script_name, alias="SCRIPT_NAME")

    java_binary: str = Field(default="java", alias="JAVA_BINARY")
    heap_size: str = Field(default="10G", alias="HEAP_SIZE")

    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")
    verify_download: bool = Field(default=False, alias="VERIFY_DOWNLOAD")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_dir: Optional[Path] = Field(default=None, alias="LOG_DIR")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @property
    def artifact_path(self) -> Path:
        return self.server_dir / self.artifact_name

    @property
    def license_path(self) -> Path:
        return self.server_dir / self.license_name

    @property
    def script_path(self) -> Path:
        return self.server_dir / self.script_name

    @property
    def probe_log(self) -> Path:
        return self.server_dir / "launch-probe.log"
