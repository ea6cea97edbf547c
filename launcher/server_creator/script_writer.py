from __future__ import annotations
import os
import shlex
import subprocess
from pathlib import Path
from typing import List
from .errors import ScriptWriteFailed
from .jvm_flags import build_command, minimal_flags
from .logging_setup import get_logger

log = get_logger("servercreator.script")


def render_command(cmd: List[str]) -> str:
    if os.name == "nt":
        return subprocess.list2cmdline(cmd)
    return shlex.join(cmd)


class ScriptWriter:
    """Persists the command line that worked during the launch probe."""

    def __init__(self, *, java_binary: str, artifact_name: str, tuned_flags: List[str]):
        self.java_binary = java_binary
        self.artifact_name = artifact_name
        self.tuned_flags = list(tuned_flags)

    def command(self, tuned: bool) -> str:
        flags = self.tuned_flags if tuned else minimal_flags()
        return render_command(build_command(self.java_binary, flags, self.artifact_name))

    def write(self, script_path: Path, tuned: bool) -> str:
        line = self.command(tuned)
        try:
            script_path.parent.mkdir(parents=True, exist_ok=True)
            script_path.write_text(line + "\n", encoding="utf-8")
            if os.name != "nt":
                script_path.chmod(0o755)
        except OSError as e:
            raise ScriptWriteFailed(f"Cannot write launch script {script_path}: {e}") from e
        log.info("Wrote launch script %s: %s", script_path, line)
        return line
