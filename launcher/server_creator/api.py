from __future__ import annotations
import threading
from typing import Callable
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel
from .settings import Settings
from .orchestrator import Provisioner
from .errors import ProvisioningError
from .logging_setup import get_logger
from . import __version__

log = get_logger("servercreator.api")

class ActionResult(BaseModel):
    ok: bool
    detail: str | None = None
    data: dict | None = None

def create_app(settings: Settings, provisioner_factory: Callable[[Settings], Provisioner] | None = None) -> FastAPI:
    app = FastAPI(title="Server Creator API", version=__version__)
    factory = provisioner_factory or Provisioner
    busy = threading.Lock()
    last = {"state": None}

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/versions")
    def versions():
        prov = factory(settings)
        try:
            candidates = prov.candidates()
            latest = prov.latest()
        except ProvisioningError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return {
            "ok": True,
            "latest": latest.id if latest else None,
            "versions": [{"id": c.id, "url": c.metadata_url} for c in candidates],
        }

    @app.post("/provision", response_model=ActionResult)
    def provision(version: str = Query(..., description="Release id, e.g. 1.20.1")):
        # one run at a time; the install directory is shared
        if not busy.acquire(blocking=False):
            raise HTTPException(status_code=409, detail="provisioning_in_progress")
        try:
            prov = factory(settings)
            try:
                candidate = prov.find(version)
            except ProvisioningError as e:
                raise HTTPException(status_code=502, detail=str(e))
            if candidate is None:
                raise HTTPException(status_code=404, detail="version_not_found")
            try:
                state = prov.provision(candidate)
            except ProvisioningError as e:
                last["state"] = prov.state.to_dict()
                raise HTTPException(status_code=500, detail=str(e))
            last["state"] = state.to_dict()
            return ActionResult(ok=True, detail="provisioned", data=last["state"])
        finally:
            busy.release()

    @app.get("/status", response_model=ActionResult)
    def status():
        return ActionResult(ok=True, data={"busy": busy.locked(), "last_run": last["state"]})

    return app
