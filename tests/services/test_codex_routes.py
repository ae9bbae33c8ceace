"""Codex Routes: HTTP surface over the per-user codex.

Invariants:
    - POST /sigils returns 201 with derived metrics
    - PUT /alignment re-scores the sigil; unknown sigil or node -> 404
    - Validation failures -> 400 with field details
    - State is loaded from the DB on first access and cached per user
    - Concurrent first requests for a user share one loaded CodexState
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

import sigil_codex.api.routes.codex as codex_routes
from sigil_codex import __version__
from sigil_codex.api.routes.codex import (
    _codex_states, _load_locks, get_codex_service,
)
from sigil_codex.core.check_compliance import no_padding
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_types import NumerologyProfile, SigilParameters
from sigil_codex.core.domain_types import ChakraType
from sigil_codex.core.errors import DatabaseError, PersistenceError
from sigil_codex.services.codex_service import CodexService
from sigil_codex.services.sql_repositories import SqlSigilRepository

BASE = "/api/v1/users/u-1"
HEART_SIGIL = {
    "chakra": "Heart",
    "frequency": 639,
    "intention": "Find my center and my voice",
}


async def _create(client, body=None) -> dict:
    res = await client.post(f"{BASE}/sigils", json=body or HEART_SIGIL)
    assert res.status_code == 201
    return res.json()


async def test_empty_codex(client):
    res = await client.get(f"{BASE}/codex")
    assert res.status_code == 200
    body = res.json()
    assert body["sigils"] == []
    assert body["quantum_field"] == 0.0
    assert body["ambient"]["chakra"] == "Heart"
    assert "u-1" in _codex_states


async def test_record_sigil_returns_scored_detail(client):
    detail = await _create(client)

    assert detail["sigil"]["intention"] == "Find my center and my voice"
    assert detail["sigil"]["chakra"] == "Heart"
    assert detail["resonance"]["overall"] == 60
    assert detail["resonance"]["chakra_harmony"] == 100
    assert detail["resonance"]["timeline_alignment"] == 0
    assert detail["evolution"]["stage"] == "seed"
    assert detail["evolution"]["level"] == 1
    assert detail["alignment"] is None
    assert detail["laws"][0]["id"] == "law-of-vibration"


async def test_align_rescores_sigil(client):
    sigil_id = (await _create(client))["sigil"]["id"]

    res = await client.put(
        f"{BASE}/sigils/{sigil_id}/alignment", json={"node_id": "present-flow"},
    )
    assert res.status_code == 200
    assert res.json()["node"]["chakra"] == "Heart"

    codex = (await client.get(f"{BASE}/codex")).json()
    [detail] = codex["sigils"]
    assert detail["resonance"]["overall"] == 95
    assert detail["alignment"]["id"] == "present-flow"
    assert codex["stats"]["aligned_sigils"] == 1


async def test_get_alignment(client):
    sigil_id = (await _create(client))["sigil"]["id"]
    res = await client.get(f"{BASE}/sigils/{sigil_id}/alignment")
    assert res.status_code == 200
    assert res.json() == {"sigil_id": sigil_id, "node": None}


async def test_align_unknown_node_returns_404(client):
    sigil_id = (await _create(client))["sigil"]["id"]
    res = await client.put(
        f"{BASE}/sigils/{sigil_id}/alignment", json={"node_id": "nowhere"},
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_unknown_sigil_returns_404(client):
    res = await client.get(f"{BASE}/sigils/missing/laws")
    assert res.status_code == 404
    assert res.json()["error"]["context"]["sigil_id"] == "missing"


async def test_evolve_creates_child(client):
    parent_id = (await _create(client))["sigil"]["id"]
    res = await client.post(
        f"{BASE}/sigils/{parent_id}/evolve",
        json={"intention": "Speak my truth with an open heart"},
    )
    assert res.status_code == 201
    child = res.json()["sigil"]
    assert child["evolution_parent"] == parent_id
    assert child["evolution_stage"] == "seed"
    assert child["id"] != parent_id

    codex = (await client.get(f"{BASE}/codex")).json()
    assert [d["sigil"]["id"] for d in codex["sigils"]][1] == parent_id
    assert codex["stats"]["evolved_sigils"] == 1


async def test_compliant_laws_always_include_vibration(client):
    sigil_id = (await _create(client))["sigil"]["id"]
    res = await client.get(f"{BASE}/sigils/{sigil_id}/laws")
    assert res.status_code == 200
    ids = [law["id"] for law in res.json()]
    assert ids[0] == "law-of-vibration"
    assert "law-of-correspondence" not in ids
    assert len(ids) == len(set(ids))


async def test_set_ambient_recomputes_harmony(client):
    await _create(client)
    res = await client.put(f"{BASE}/ambient", json={"chakra": "Root", "intensity": 0.9})
    assert res.status_code == 200
    assert res.json() == {"chakra": "Root", "frequency": 396.0, "intensity": 0.9}

    codex = (await client.get(f"{BASE}/codex")).json()
    assert codex["sigils"][0]["resonance"]["chakra_harmony"] == 64


async def test_blank_intention_is_rejected(client):
    res = await client.post(f"{BASE}/sigils", json={**HEART_SIGIL, "intention": "   "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unknown_chakra_is_rejected(client):
    res = await client.post(f"{BASE}/sigils", json={**HEART_SIGIL, "chakra": "Spleen"})
    assert res.status_code == 400


async def test_codex_is_per_user(client):
    await _create(client)
    res = await client.get("/api/v1/users/u-2/codex")
    assert res.json()["sigils"] == []


async def test_refresh_picks_up_external_writes(client, test_db):
    await client.get(f"{BASE}/codex")
    await SqlSigilRepository(test_db).insert("u-1", SigilParameters(
        chakra=ChakraType.CROWN, frequency=963.0, intention="Elsewhere",
    ))

    cached = (await client.get(f"{BASE}/codex")).json()
    assert cached["sigils"] == []

    res = await client.post(f"{BASE}/codex/refresh")
    assert res.status_code == 200
    assert [d["sigil"]["intention"] for d in res.json()["sigils"]] == ["Elsewhere"]


async def test_reference_catalogs(client):
    nodes = (await client.get("/api/v1/timeline-nodes")).json()
    laws = (await client.get("/api/v1/universal-laws")).json()
    assert [n["id"] for n in nodes] == ["past-echo", "present-flow", "future-vision"]
    assert len(laws) == 9


async def test_health_probes(client):
    health = await client.get("/api/v1/health/")
    assert health.status_code == 200
    assert health.json()["version"] == __version__
    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "healthy"


async def test_stored_numerology_beyond_request_limits_still_renders(client, test_db):
    await SqlSigilRepository(test_db).insert("u-1", SigilParameters(
        chakra=ChakraType.SACRAL, frequency=417.0, intention="Imported",
        numerology=NumerologyProfile(life_path=111, base_form="x" * 150),
    ))

    res = await client.get(f"{BASE}/codex")

    assert res.status_code == 200
    profile = res.json()["sigils"][0]["sigil"]["numerology_profile"]
    assert profile["life_path"] == 111
    assert len(profile["base_form"]) == 150


# --- First-load registration ------------------------------------------------

@pytest.fixture
def fresh_codex_cache():
    _codex_states.clear()
    _load_locks.clear()
    yield
    _codex_states.clear()
    _load_locks.clear()


def _fake_builder(fetches: list, list_sigils):
    """Stand-in for _build_service that records each store fetch."""
    def build(state: CodexState, db) -> CodexService:
        sigils = AsyncMock()

        async def list_by_owner(user_id):
            fetches.append(user_id)
            return await list_sigils(user_id)

        sigils.list_by_owner.side_effect = list_by_owner
        alignments = AsyncMock()
        alignments.list_by_owner.return_value = []
        return CodexService(
            state, sigils=sigils, alignments=alignments, padding=no_padding,
        )
    return build


async def test_concurrent_first_requests_share_one_state(
    fresh_codex_cache, monkeypatch,
):
    async def slow_empty(user_id):
        await asyncio.sleep(0.01)
        return []

    fetches: list = []
    monkeypatch.setattr(
        codex_routes, "_build_service", _fake_builder(fetches, slow_empty),
    )

    first, second = await asyncio.gather(
        get_codex_service("u-9", db=None),
        get_codex_service("u-9", db=None),
    )

    assert first.state is second.state
    assert _codex_states["u-9"] is first.state
    assert first.state.loaded
    assert fetches == ["u-9"]


async def test_failed_first_load_evicts_state(fresh_codex_cache, monkeypatch):
    async def refused(user_id):
        raise DatabaseError("connection refused", "query")

    fetches: list = []
    monkeypatch.setattr(
        codex_routes, "_build_service", _fake_builder(fetches, refused),
    )

    with pytest.raises(PersistenceError):
        await get_codex_service("u-9", db=None)
    assert "u-9" not in _codex_states

    async def empty(user_id):
        return []

    monkeypatch.setattr(
        codex_routes, "_build_service", _fake_builder(fetches, empty),
    )
    service = await get_codex_service("u-9", db=None)
    assert service.state.loaded
    assert _codex_states["u-9"] is service.state
