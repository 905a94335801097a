"""Catalog API endpoints (search, resolve, providers)."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from reelscout.domain.entities.catalog import SearchSession
from reelscout.interfaces.api.catalog.presenter import (
    ResolveRequest,
    descriptor_to_dict,
    title_from_payload,
    title_to_dict,
)
from reelscout.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["catalog"])

OUTCOME_OK = "ok"
OUTCOME_NO_RESULTS = "no_results"
OUTCOME_RESOLVED = "resolved"
OUTCOME_NO_SOURCE = "no_downloadable_source"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _session(state: AppState, session_id: str | None) -> SearchSession | None:
    if not session_id:
        return None
    return state.sessions.get(session_id)


@router.get("/search")
async def search(
    request: Request,
    q: str = Query(default="", description="Free-text title query."),
    master_title: str | None = Query(default=None),
    master_year: int | None = Query(default=None),
    session_id: str | None = Query(default=None),
) -> JSONResponse:
    """Fan out *q* to every configured provider and return ranked titles."""
    state = cast(AppState, request.app.state)

    if not q.strip():
        return _error(400, "query parameter 'q' must not be blank")

    session = _session(state, session_id)
    result = await state.aggregate_uc.run(
        q,
        master_title=master_title,
        master_year=master_year,
        session=session,
    )
    titles = result.titles

    payload: dict[str, Any] = {
        "query": result.query.text,
        "outcome": OUTCOME_OK if titles else OUTCOME_NO_RESULTS,
        "token": result.query.token if session is not None else None,
        "master_title": result.query.master_title,
        "master_year": result.query.master_year,
        "titles": [title_to_dict(t) for t in titles],
    }
    return JSONResponse(payload)


@router.post("/resolve")
async def resolve(request: Request, body: ResolveRequest) -> JSONResponse:
    """Run the fallback cascade for a Title whose links are empty."""
    state = cast(AppState, request.app.state)

    title = title_from_payload(body.title)
    session = _session(state, body.session_id)
    outcome = await state.resolve_uc.execute(
        title,
        session=session,
        token=body.token,
        master_title=body.master_title,
    )

    payload: dict[str, Any] = {
        "outcome": OUTCOME_RESOLVED if outcome.resolved else OUTCOME_NO_SOURCE,
        "state": outcome.state.value,
        "provider": outcome.provider,
        "attempts": [
            {"provider": a.provider, "links": a.links, "cached": a.cached}
            for a in outcome.attempts
        ],
        "title": title_to_dict(outcome.title),
    }
    return JSONResponse(payload)


@router.get("/providers")
async def providers(request: Request) -> JSONResponse:
    """Fan-out and fallback provider descriptors, plus everything discovered."""
    state = cast(AppState, request.app.state)
    return JSONResponse(
        {
            "fanout": [descriptor_to_dict(p.descriptor) for p in state.aggregate_uc.providers],
            "fallback": [descriptor_to_dict(p.descriptor) for p in state.resolve_uc.providers],
            "available": state.providers.list_names(),
        }
    )
