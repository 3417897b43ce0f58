"""FastAPI routes exposing the grape engine."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request

from mavengrab.modules.grape import ClassPath, GrapeEngine
from mavengrab.modules.grape.exceptions import (
    DependencyResolutionFailedError,
    InvalidCoordinateError,
    InvalidRepositoryError,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/grape", tags=["grape"])


def get_engine(request: Request) -> GrapeEngine:
    container = getattr(request.app.state, "container", None)
    if not container or not getattr(container, "grape_engine", None):
        raise HTTPException(status_code=500, detail="Grape engine not initialized.")
    return container.grape_engine


def _ok(data: Any) -> Dict[str, Any]:
    return {"status": "true", "msg": "ok", "data": data}


@router.post("/grab")
def grab(payload: Dict[str, Any], engine: GrapeEngine = Depends(get_engine)):
    dependencies = payload.get("dependencies")
    if not isinstance(dependencies, list) or not dependencies:
        raise HTTPException(status_code=400, detail="dependencies must be a non-empty array")
    classpath = ClassPath(name="request")
    args: Dict[str, Any] = {"classLoader": classpath}
    if payload.get("excludes") is not None:
        args["excludes"] = payload["excludes"]
    try:
        engine.grab(args, *dependencies)
    except InvalidCoordinateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DependencyResolutionFailedError as exc:
        log.exception("grab failed")
        raise HTTPException(status_code=502, detail=str(exc))
    return _ok(classpath.urls)


@router.post("/resolvers")
def add_resolver(payload: Dict[str, Any], engine: GrapeEngine = Depends(get_engine)):
    try:
        engine.add_resolver(payload)
    except InvalidRepositoryError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _ok([repo.as_dict() for repo in engine.repositories])


@router.get("/repositories")
def list_repositories(engine: GrapeEngine = Depends(get_engine)):
    return _ok([repo.as_dict() for repo in engine.repositories])


@router.get("/managed")
def list_managed(engine: GrapeEngine = Depends(get_engine)):
    data: List[Dict[str, str]] = [
        {"group": entry.coordinate.group, "module": entry.coordinate.module, "version": entry.version}
        for entry in engine.managed
    ]
    return _ok(data)
