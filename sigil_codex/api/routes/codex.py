"""Codex Routes: per-user sigil store, alignment, and derived-metric endpoints.

Invariants:
    - CodexState is per-user, in-memory (module-level dict), loaded once from the DB
    - One CodexState per user: concurrent first requests share the registered
      container and only one of them performs the load
    - Every mutation goes through CodexService (remote write first, then state)
    - Unknown sigil or node ids -> 404; rejected remote writes -> 503
    - The path user_id is trusted: authentication happens upstream

Design Decisions:
    - _codex_states as module-level dict: single-process deployment, state is
      rebuilt from the DB on restart or via POST .../codex/refresh
    - Response builders live here, not on the schemas, so schemas stay declarative
"""

import asyncio
import logging
import random
from functools import lru_cache

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sigil_codex.config import get_settings
from sigil_codex.core.check_compliance import LawPadding, random_padding
from sigil_codex.core.classify_evolution import (
    can_evolve, evolution_progress, required_resonance,
)
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_types import (
    AmbientChakra, NumerologyProfile, Sigil, SigilParameters, TimelineNode,
    UniversalLaw,
)
from sigil_codex.core.domain_types import UserId
from sigil_codex.core.errors import (
    ErrorContext, PersistenceError, ResourceNotFoundError,
)
from sigil_codex.infrastructure.database import get_db
from sigil_codex.schemas.codex import (
    AlignmentRequest, AlignmentResponse, AmbientRequest, AmbientResponse,
    CodexResponse, EvolutionResponse, NumerologyProfileResponse,
    ResonanceScoreResponse, SigilCreate, SigilDetail, SigilEvolve,
    SigilResponse, TimelineNodeResponse, UniversalLawResponse,
)
from sigil_codex.services.codex_service import CodexService, XPAwards
from sigil_codex.services.sql_repositories import (
    SqlAlignmentRepository, SqlJournalRepository, SqlSigilRepository,
    SqlXPAwarder,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users/{user_id}", tags=["codex"])

# In-memory per-user state; lost on restart and rebuilt by load()
_codex_states: dict[str, CodexState] = {}
_load_locks: dict[str, asyncio.Lock] = {}


def _new_state(user_id: str) -> CodexState:
    return CodexState(
        user_id=UserId(user_id),
        ambient=AmbientChakra.for_chakra(get_settings().default_ambient_chakra),
    )


@lru_cache
def _law_padding() -> LawPadding:
    seed = get_settings().compliance_seed
    return random_padding(random.Random(seed) if seed is not None else None)


def _build_service(
    state: CodexState, db: AsyncSession,
) -> CodexService:
    settings = get_settings()
    return CodexService(
        state,
        sigils=SqlSigilRepository(db),
        alignments=SqlAlignmentRepository(db),
        journal=SqlJournalRepository(db),
        xp=SqlXPAwarder(db),
        padding=_law_padding(),
        xp_awards=XPAwards(
            sigil_creation=settings.xp_sigil_creation,
            sigil_evolution=settings.xp_sigil_evolution,
            sigil_alignment=settings.xp_sigil_alignment,
        ),
    )


async def get_codex_service(
    user_id: str, db: AsyncSession = Depends(get_db),
) -> CodexService:
    """Resolve the user's CodexState, loading it from the DB on first use.

    The state is registered before the load is awaited and first loads are
    serialized per user, so concurrent first requests share one container.
    """
    state = _codex_states.setdefault(user_id, _new_state(user_id))
    if not state.loaded:
        async with _load_locks.setdefault(user_id, asyncio.Lock()):
            # A failed load may have evicted the entry while we waited
            state = _codex_states.setdefault(user_id, state)
            if not state.loaded:
                if not await _build_service(state, db).load():
                    _codex_states.pop(user_id, None)
                    raise PersistenceError("load", ErrorContext(user_id=user_id))
    return _build_service(state, db)


def _require_sigil(service: CodexService, sigil_id: str) -> Sigil:
    sigil = service.state.get_sigil(sigil_id)
    if sigil is None:
        raise ResourceNotFoundError(
            "Sigil", sigil_id,
            ErrorContext(user_id=service.user_id, sigil_id=sigil_id),
        )
    return sigil


# ─── Response builders ──────────────────────────────────────────

def node_response(node: TimelineNode) -> TimelineNodeResponse:
    return TimelineNodeResponse(
        id=node.id, name=node.name, description=node.description,
        chakra=node.chakra, x=node.x, y=node.y, color=node.color,
    )


def law_response(law: UniversalLaw) -> UniversalLawResponse:
    return UniversalLawResponse(
        id=law.id, name=law.name, description=law.description,
    )


def sigil_response(sigil: Sigil) -> SigilResponse:
    params = sigil.parameters
    numerology = params.numerology
    return SigilResponse(
        id=sigil.id,
        user_id=sigil.user_id,
        chakra=params.chakra,
        frequency=params.frequency,
        intention=params.intention,
        numerology_profile=NumerologyProfileResponse(
            life_path=numerology.life_path,
            expression=numerology.expression,
            soul_urge=numerology.soul_urge,
            base_form=numerology.base_form,
            overlay=numerology.overlay,
            ornamentation=numerology.ornamentation,
        ),
        prime_multiplier=params.prime_multiplier,
        archetype_key=params.archetype_key,
        svg=params.svg,
        created_at=sigil.created_at,
        evolution_parent=params.evolution_parent,
        evolution_stage=params.evolution_stage,
        evolution_date=params.evolution_date,
    )


def sigil_detail(service: CodexService, sigil: Sigil) -> SigilDetail:
    state = service.state
    score = state.score_for(sigil.id)
    stage = state.stage_for(sigil.id)
    node = state.aligned_node(sigil.id)
    return SigilDetail(
        sigil=sigil_response(sigil),
        resonance=ResonanceScoreResponse(
            overall=score.overall,
            chakra_harmony=score.chakra_harmony,
            frequency_alignment=score.frequency_alignment,
            timeline_alignment=score.timeline_alignment,
            law_compliance=score.law_compliance,
        ),
        evolution=EvolutionResponse(
            stage=stage,
            level=stage.level,
            required_resonance=required_resonance(stage),
            progress=evolution_progress(stage, score.overall),
            can_evolve=can_evolve(stage, score.overall),
        ),
        alignment=node_response(node) if node else None,
        laws=[law_response(law) for law in state.laws.get(sigil.id, [])],
    )


def ambient_response(ambient: AmbientChakra) -> AmbientResponse:
    return AmbientResponse(
        chakra=ambient.chakra,
        frequency=ambient.frequency,
        intensity=ambient.intensity,
    )


def _codex_response(service: CodexService) -> CodexResponse:
    state = service.state
    return CodexResponse(
        user_id=state.user_id,
        ambient=ambient_response(state.ambient),
        sigils=[sigil_detail(service, s) for s in state.sigils],
        quantum_field=service.get_quantum_resonance(),
        stats=service.stats(),
    )


# ─── Endpoints ──────────────────────────────────────────────────

@router.get("/codex", response_model=CodexResponse)
async def get_codex(service: CodexService = Depends(get_codex_service)):
    """All sigils with their derived metrics, plus the quantum field."""
    return _codex_response(service)


@router.post("/codex/refresh", response_model=CodexResponse)
async def refresh_codex(service: CodexService = Depends(get_codex_service)):
    """Refetch the store from the DB (picks up writes from other sessions)."""
    if not await service.load():
        raise PersistenceError("load", ErrorContext(user_id=service.user_id))
    return _codex_response(service)


@router.post(
    "/sigils", response_model=SigilDetail,
    status_code=status.HTTP_201_CREATED,
)
async def record_sigil(
    body: SigilCreate, service: CodexService = Depends(get_codex_service),
):
    """Record a newly generated sigil."""
    numerology = body.numerology_profile
    params = SigilParameters(
        chakra=body.chakra,
        frequency=body.frequency,
        intention=body.intention,
        numerology=NumerologyProfile(
            life_path=numerology.life_path,
            expression=numerology.expression,
            soul_urge=numerology.soul_urge,
            base_form=numerology.base_form,
            overlay=numerology.overlay,
            ornamentation=numerology.ornamentation,
        ),
        prime_multiplier=body.prime_multiplier,
        archetype_key=body.archetype_key,
        svg=body.svg,
    )
    sigil = await service.record_sigil(params)
    if sigil is None:
        raise PersistenceError("insert", ErrorContext(user_id=service.user_id))
    return sigil_detail(service, sigil)


@router.post(
    "/sigils/{sigil_id}/evolve", response_model=SigilDetail,
    status_code=status.HTTP_201_CREATED,
)
async def evolve_sigil(
    sigil_id: str, body: SigilEvolve,
    service: CodexService = Depends(get_codex_service),
):
    """Fork a new sigil from an existing one with a new intention."""
    _require_sigil(service, sigil_id)
    child = await service.evolve_sigil(sigil_id, body.intention)
    if child is None:
        raise PersistenceError(
            "insert", ErrorContext(user_id=service.user_id, sigil_id=sigil_id),
        )
    return sigil_detail(service, child)


@router.put("/sigils/{sigil_id}/alignment", response_model=AlignmentResponse)
async def align_sigil(
    sigil_id: str, body: AlignmentRequest,
    service: CodexService = Depends(get_codex_service),
):
    """Align a sigil to a timeline node, replacing any prior alignment."""
    _require_sigil(service, sigil_id)
    context = ErrorContext(
        user_id=service.user_id, sigil_id=sigil_id, node_id=body.node_id,
    )
    if service.state.get_node(body.node_id) is None:
        raise ResourceNotFoundError("Timeline node", body.node_id, context)
    if not await service.align_to_timeline(sigil_id, body.node_id):
        raise PersistenceError("upsert", context)
    node = service.get_alignment(sigil_id)
    return AlignmentResponse(sigil_id=sigil_id, node=node_response(node))


@router.get("/sigils/{sigil_id}/alignment", response_model=AlignmentResponse)
async def get_alignment(
    sigil_id: str, service: CodexService = Depends(get_codex_service),
):
    _require_sigil(service, sigil_id)
    node = service.get_alignment(sigil_id)
    return AlignmentResponse(
        sigil_id=sigil_id, node=node_response(node) if node else None,
    )


@router.get(
    "/sigils/{sigil_id}/laws", response_model=list[UniversalLawResponse],
)
async def get_compliant_laws(
    sigil_id: str, service: CodexService = Depends(get_codex_service),
):
    """Fresh compliance check. Padded laws may vary between calls."""
    _require_sigil(service, sigil_id)
    return [
        law_response(law)
        for law in service.check_universal_law_compliance(sigil_id)
    ]


@router.put("/ambient", response_model=AmbientResponse)
async def set_ambient_chakra(
    body: AmbientRequest, service: CodexService = Depends(get_codex_service),
):
    """Activate a chakra as the scoring reference and recompute."""
    service.activate_chakra(body.chakra, body.intensity)
    return ambient_response(service.state.ambient)
