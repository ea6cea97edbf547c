from __future__ import annotations
import subprocess
from pathlib import Path
from typing import List, Optional
from .logging_setup import get_logger

log = get_logger("servercreator.proc")

def _open_log_file(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "a", encoding="utf-8", buffering=1)

class ProcessRunner:
    """
    Runs one external process to completion.

    ``run`` blocks until the process exits and returns its exit status, or
    ``None`` when the process could not be started at all. Output goes to
    ``log_file`` (or is discarded); it is never interpreted.
    """

    def run(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None,
            log_file: Optional[Path] = None) -> Optional[int]:
        log.info("Starting %s: %s", name, " ".join(cmd))
        fh = None
        if log_file:
            try:
                fh = _open_log_file(log_file)
            except OSError as e:
                log.warning("Cannot open %s, discarding %s output: %s", log_file, name, e)
        try:
            stdout = fh if fh else subprocess.DEVNULL
            try:
                proc = subprocess.Popen(cmd, cwd=str(cwd) if cwd else None, stdout=stdout,
                                        stderr=subprocess.STDOUT, stdin=subprocess.DEVNULL)
            except OSError as e:
                log.warning("Could not start %s: %s", name, e)
                return None
            rc = proc.wait()
        finally:
            if fh:
                fh.close()
        log.info("%s exited with rc=%s", name, rc)
        return rc
