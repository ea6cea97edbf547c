from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, List, Optional
from .settings import Settings
from .logging_setup import get_logger
from .catalog import VersionCatalog
from .resolver import ArtifactResolver
from .downloader import Downloader, ProgressSink
from .process_runner import ProcessRunner
from .probe import LaunchProbe
from .license import LicenseAcceptor
from .script_writer import ScriptWriter
from .jvm_flags import tuned_flags as default_tuned_flags
from .errors import LaunchFatal, ProvisioningError, ScriptWriteFailed
from .models import CandidateList, ProvisioningState, ReleaseEntry, ReleaseManifest, Stage

log = get_logger("servercreator.orch")

# status(message, level) with level "ok" or "warn"
StatusSink = Callable[..., None]
Indicator = Callable[[str], ContextManager[ProgressSink]]


def _log_status(message: str, level: str = "ok") -> None:
    if level == "warn":
        log.warning(message)
    else:
        log.info(message)


@contextmanager
def log_indicator(message: str) -> Iterator[ProgressSink]:
    log.info(message)
    yield lambda msg: log.debug(msg)


class Provisioner:
    """
    Drives one provisioning run: resolve, download, probe, accept EULA, write script.

    Every collaborator can be injected; the defaults are built from settings.
    One instance handles exactly one run.
    """

    def __init__(self, settings: Settings, *,
                 catalog: Optional[VersionCatalog] = None,
                 resolver: Optional[ArtifactResolver] = None,
                 downloader: Optional[Downloader] = None,
                 runner: Optional[ProcessRunner] = None,
                 license_acceptor: Optional[LicenseAcceptor] = None,
                 status: Optional[StatusSink] = None,
                 indicator: Optional[Indicator] = None,
                 tuned_flags: Optional[List[str]] = None):
        self.settings = settings
        self.catalog = catalog or VersionCatalog(settings.manifest_url, timeout=settings.http_timeout)
        self.resolver = resolver or ArtifactResolver(timeout=settings.http_timeout)
        self.downloader = downloader or Downloader(timeout=settings.http_timeout, verify=settings.verify_download)
        self.runner = runner or ProcessRunner()
        self.license_acceptor = license_acceptor or LicenseAcceptor()
        self.status = status or _log_status
        self.indicator = indicator or log_indicator
        self.tuned_flags = tuned_flags if tuned_flags is not None else default_tuned_flags(settings.heap_size)
        self.state = ProvisioningState()
        self._manifest: Optional[ReleaseManifest] = None
        self._candidates: Optional[CandidateList] = None

    def candidates(self) -> CandidateList:
        if self._candidates is None:
            try:
                self._manifest = self.catalog.fetch()
            except ProvisioningError as e:
                self.state.fail(str(e))
                raise
            self._candidates = self.catalog.filter(self._manifest)
            self.state.advance(Stage.catalog)
        return self._candidates

    def find(self, version_id: str) -> Optional[ReleaseEntry]:
        for entry in self.candidates():
            if entry.id == version_id:
                return entry
        return None

    def latest(self) -> Optional[ReleaseEntry]:
        self.candidates()
        return self.catalog.latest_release(self._manifest)

    def provision(self, candidate: ReleaseEntry) -> ProvisioningState:
        state = self.state
        if state.stage not in (Stage.idle, Stage.catalog):
            raise RuntimeError(f"provisioner already used (stage={state.stage.value})")
        state.version_id = candidate.id
        log.info("Provisioning %s into %s", candidate.id, self.settings.server_dir)
        try:
            self._run(candidate)
        except ProvisioningError as e:
            log.error("Provisioning %s failed during %s: %s", candidate.id, e.stage, e)
            state.fail(str(e))
            raise
        return state

    def _run(self, candidate: ReleaseEntry) -> None:
        s = self.settings
        state = self.state
        artifact = s.artifact_path

        descriptor = self.resolver.resolve(candidate)
        state.artifact = descriptor
        state.advance(Stage.resolved)
        self.status(f"Resolved {s.artifact_name} for {candidate.id}")

        with self.indicator(f"Downloading {s.artifact_name}") as progress:
            self.downloader.download(artifact, descriptor, progress)
        state.advance(Stage.downloaded)
        self.status(f"Downloaded {s.artifact_name}")

        probe = LaunchProbe(self.runner, java_binary=s.java_binary, artifact=artifact,
                            tuned_flags=self.tuned_flags, log_file=s.probe_log)
        result = probe.run()
        state.launch = result
        if not result.succeeded:
            hint = ""
            if descriptor.java_major_version:
                hint = f" (this release needs Java {descriptor.java_major_version})"
            raise LaunchFatal(
                f"{s.artifact_name} failed to start with tuned and minimal flags "
                f"(rc={result.exit_status}){hint}")
        state.advance(Stage.launched)
        self.status(f"Launched {s.artifact_name} with {'tuned' if result.tuned else 'minimal'} flags")

        self.license_acceptor.accept(s.license_path)
        state.advance(Stage.licensed)
        self.status("Accepted EULA automatically.")

        writer = ScriptWriter(java_binary=s.java_binary, artifact_name=s.artifact_name,
                              tuned_flags=self.tuned_flags)
        try:
            state.script_command = writer.write(s.script_path, tuned=result.tuned)
            state.script_path = str(s.script_path)
            self.status(f"Wrote launch script {s.script_path}")
        except ScriptWriteFailed as e:
            log.warning("%s", e)
            state.warnings.append(str(e))
            self.status(str(e), "warn")
        state.advance(Stage.done)
        log.info("Provisioning %s finished", candidate.id)
