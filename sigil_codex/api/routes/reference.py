"""Reference Data Routes: read-only timeline node and universal law catalogs."""

from fastapi import APIRouter

from sigil_codex.api.routes.codex import law_response, node_response
from sigil_codex.core.timeline_nodes import DEFAULT_TIMELINE_NODES
from sigil_codex.core.universal_laws import UNIVERSAL_LAWS
from sigil_codex.schemas.codex import TimelineNodeResponse, UniversalLawResponse

router = APIRouter(prefix="/api/v1", tags=["reference"])


@router.get("/timeline-nodes", response_model=list[TimelineNodeResponse])
async def list_timeline_nodes():
    return [node_response(n) for n in DEFAULT_TIMELINE_NODES]


@router.get("/universal-laws", response_model=list[UniversalLawResponse])
async def list_universal_laws():
    return [law_response(law) for law in UNIVERSAL_LAWS]
