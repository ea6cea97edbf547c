from __future__ import annotations
from pathlib import Path
from .errors import LicenseFileMalformed, LicenseFileMissing, ProvisioningError
from .logging_setup import get_logger

log = get_logger("servercreator.license")

EULA_LINE_INDEX = 2
EULA_ACCEPTED = "eula=true"


class LicenseAcceptor:
    """
    Flips the acceptance line of the eula.txt the server writes on first start.

    The server writes two comment lines followed by ``eula=false``; only that
    line is touched, everything else is written back unchanged.
    """

    def __init__(self, line_index: int = EULA_LINE_INDEX, accepted_line: str = EULA_ACCEPTED):
        self.line_index = line_index
        self.accepted_line = accepted_line

    def accept(self, license_path: Path) -> bool:
        """Returns True if the file was rewritten, False if it was already accepted."""
        if not license_path.is_file():
            raise LicenseFileMissing(f"{license_path} not found; the server did not finish its first start")

        try:
            # bytes: the date comment is written in the platform charset
            data = license_path.read_bytes()
        except OSError as e:
            raise LicenseFileMissing(f"Cannot read {license_path}: {e}") from e

        lines = data.split(b"\n")
        line_count = len(lines) - 1 if data.endswith(b"\n") else len(lines)
        if self.line_index >= line_count:
            raise LicenseFileMalformed(
                f"{license_path} has {line_count} line(s); expected the acceptance flag on line {self.line_index + 1}")

        current = lines[self.line_index]
        eol = b"\r" if current.endswith(b"\r") else b""
        if not current.strip().startswith(b"eula="):
            log.warning("Unexpected content on line %d of %s: %r", self.line_index + 1, license_path, current)

        wanted = self.accepted_line.encode("ascii") + eol
        if current == wanted:
            log.info("EULA already accepted in %s", license_path)
            return False

        lines[self.line_index] = wanted
        try:
            license_path.write_bytes(b"\n".join(lines))
        except OSError as e:
            raise ProvisioningError(f"Cannot rewrite {license_path}: {e}") from e
        log.info("Accepted EULA in %s", license_path)
        return True
