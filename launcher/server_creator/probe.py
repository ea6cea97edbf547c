"""
probe.py — one-shot launch of a freshly downloaded server
---------------------------------------------------------
Starts the server once with the tuned flag set. If the JVM refuses those
flags (or the process exits non-zero) the launch is repeated once with the
minimal flag set. The first start also makes the server write its eula.txt.
"""
from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import List, Optional
from .jvm_flags import build_command, minimal_flags
from .models import LaunchAttemptResult
from .process_runner import ProcessRunner
from .logging_setup import get_logger

log = get_logger("servercreator.probe")


class ProbeState(str, Enum):
    idle = "idle"
    tuned_attempt = "tuned_attempt"
    minimal_attempt = "minimal_attempt"
    success = "success"
    fatal = "fatal"
    done = "done"


class LaunchProbe:
    def __init__(self, runner: ProcessRunner, *, java_binary: str, artifact: Path,
                 tuned_flags: List[str], log_file: Optional[Path] = None):
        self.runner = runner
        self.java_binary = java_binary
        self.artifact = artifact
        self.tuned_flags = list(tuned_flags)
        self.log_file = log_file
        self.state = ProbeState.idle
        self.attempts: List[LaunchAttemptResult] = []

    def _attempt(self, tuned: bool) -> LaunchAttemptResult:
        flags = self.tuned_flags if tuned else minimal_flags()
        # run from the server directory so eula.txt and world data land next to the jar
        cmd = build_command(self.java_binary, flags, self.artifact.name)
        label = "server (tuned)" if tuned else "server (minimal)"
        rc = self.runner.run(label, cmd, cwd=self.artifact.parent, log_file=self.log_file)
        result = LaunchAttemptResult(tuned=tuned, succeeded=(rc == 0), exit_status=rc)
        self.attempts.append(result)
        return result

    def run(self) -> LaunchAttemptResult:
        if self.state is not ProbeState.idle:
            raise RuntimeError(f"probe already ran (state={self.state.value})")

        self.state = ProbeState.tuned_attempt
        result = self._attempt(tuned=True)
        if result.succeeded:
            self.state = ProbeState.success
        else:
            if result.exit_status is None:
                log.warning("Tuned launch could not start; retrying with minimal flags")
            else:
                log.warning("Tuned launch exited with rc=%s; retrying with minimal flags", result.exit_status)
            self.state = ProbeState.minimal_attempt
            result = self._attempt(tuned=False)
            if not result.succeeded:
                log.error("Minimal launch failed as well (rc=%s)", result.exit_status)
                self.state = ProbeState.fatal
                return result
            self.state = ProbeState.success

        log.info("Launch succeeded with %s flags", "tuned" if result.tuned else "minimal")
        self.state = ProbeState.done
        return result
