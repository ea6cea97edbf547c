from __future__ import annotations
import argparse
import json
from pathlib import Path
import uvicorn
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .orchestrator import Provisioner
from .console import Console
from .errors import ProvisioningError
from .api import create_app

log = get_logger("servercreator.cli")


def _versions(settings: Settings, console: Console, as_json: bool) -> int:
    prov = Provisioner(settings)
    try:
        candidates = prov.candidates()
    except ProvisioningError as e:
        console.error(str(e))
        return 1
    if as_json:
        print(json.dumps([{"id": c.id, "url": c.metadata_url} for c in candidates], indent=2))
    else:
        for c in candidates:
            print(c.id)
    return 0


def _create(settings: Settings, console: Console, version: str | None, latest: bool) -> int:
    prov = Provisioner(settings, status=console.status, indicator=console.indicator)
    try:
        if latest:
            candidate = prov.latest()
            if candidate is None:
                console.error("No installable server versions found.")
                return 1
        elif version:
            candidate = prov.find(version)
            if candidate is None:
                console.error(f"Version {version!r} is not an installable release.")
                return 1
        else:
            candidate = console.select(prov.candidates())
            if candidate is None:
                log.info("Selection cancelled")
                return 0

        state = prov.provision(candidate)
    except ProvisioningError as e:
        console.error(str(e))
        return 1

    for warning in state.warnings:
        log.warning("Finished with warning: %s", warning)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="servercreator")
    parser.add_argument("--server-dir", type=Path, help="Install directory (default: $SERVER_DIR or ./server)")
    parser.add_argument("--java", help="Java executable (default: $JAVA_BINARY or java)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    ver_p = sub.add_parser("versions", help="List installable server releases")
    ver_p.add_argument("--json", action="store_true", help="Print ids and metadata URLs as JSON")

    create_p = sub.add_parser("create", help="Download, probe and set up a server")
    pick = create_p.add_mutually_exclusive_group()
    pick.add_argument("--version", help="Release id to install, e.g. 1.20.1 (skips the selector)")
    pick.add_argument("--latest", action="store_true", help="Install the latest release")

    api_p = sub.add_parser("api", help="Run REST API (FastAPI)")
    api_p.add_argument("--host", default="127.0.0.1")
    api_p.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    settings = Settings()
    if args.server_dir:
        settings.server_dir = args.server_dir
    if args.java:
        settings.java_binary = args.java
    setup_logging(settings)
    console = Console()

    if args.cmd == "versions":
        return _versions(settings, console, args.json)

    if args.cmd == "create":
        return _create(settings, console, args.version, args.latest)

    if args.cmd == "api":
        app = create_app(settings)
        uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
        return 0

    return 2
