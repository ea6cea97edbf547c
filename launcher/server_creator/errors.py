"""
Typed failures of the provisioning stages.

Every stage converts its low-level exceptions (network, filesystem, parsing)
into one of these so the orchestrator can decide whether the run continues.
Only ``ScriptWriteFailed`` is non-fatal.
"""
from __future__ import annotations


class ProvisioningError(RuntimeError):
    stage = "provision"
    fatal = True


class CatalogUnavailable(ProvisioningError):
    stage = "catalog"


class MetadataUnavailable(ProvisioningError):
    stage = "resolve"


class DownloadFailed(ProvisioningError):
    stage = "download"


class LaunchFatal(ProvisioningError):
    stage = "launch"


class LicenseFileMissing(ProvisioningError):
    stage = "license"


class LicenseFileMalformed(ProvisioningError):
    stage = "license"


class ScriptWriteFailed(ProvisioningError):
    stage = "script"
    fatal = False
