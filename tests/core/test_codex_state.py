"""Codex State: store ordering, alignment map and lookup behavior.

Tests cover:
    - add_sigil prepends newest first and selects it
    - replace_contents drops alignments to unknown sigils or nodes
    - set_alignment overwrites (at most one node per sigil)
    - Derived lookups fall back to defaults
"""

from datetime import datetime, timezone

from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_types import (
    DEFAULT_RESONANCE_SCORE, Sigil, SigilParameters,
)
from sigil_codex.core.domain_types import ChakraType, EvolutionStage

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _sigil(sigil_id: str) -> Sigil:
    return Sigil(
        id=sigil_id, user_id="u-1",
        parameters=SigilParameters(
            chakra=ChakraType.THROAT, frequency=741.0, intention="speak",
        ),
        created_at=NOW,
    )


def test_new_state_is_empty_and_unloaded():
    state = CodexState(user_id="u-1")
    assert state.sigil_count == 0
    assert state.aligned_count == 0
    assert not state.loaded
    assert state.ambient.chakra is ChakraType.HEART
    assert len(state.nodes) == 3


def test_add_sigil_prepends_and_selects():
    state = CodexState(user_id="u-1")
    state.add_sigil(_sigil("a"))
    state.add_sigil(_sigil("b"))
    assert [s.id for s in state.sigils] == ["b", "a"]
    assert state.selected_sigil.id == "b"


def test_add_sigil_keeps_ids_unique():
    state = CodexState(user_id="u-1")
    state.add_sigil(_sigil("a"))
    state.add_sigil(_sigil("a"))
    assert state.sigil_count == 1


def test_replace_contents_filters_alignments():
    state = CodexState(user_id="u-1")
    state.replace_contents(
        [_sigil("a"), _sigil("b")],
        {"a": "past-echo", "b": "nowhere", "ghost": "present-flow"},
    )
    assert state.alignments == {"a": "past-echo"}
    assert state.loaded
    assert state.selected_sigil_id == "a"


def test_replace_contents_with_empty_store_clears_selection():
    state = CodexState(user_id="u-1", selected_sigil_id="old")
    state.replace_contents([], {})
    assert state.selected_sigil_id is None
    assert state.loaded


def test_set_alignment_overwrites_prior_node():
    state = CodexState(user_id="u-1")
    state.add_sigil(_sigil("a"))
    state.set_alignment("a", "past-echo")
    state.set_alignment("a", "future-vision")
    assert state.aligned_count == 1
    assert state.aligned_node("a").id == "future-vision"


def test_lookups_default_for_unknown_ids():
    state = CodexState(user_id="u-1")
    assert state.get_sigil("missing") is None
    assert state.get_sigil(None) is None
    assert state.get_node("missing") is None
    assert state.aligned_node("missing") is None
    assert state.score_for("missing") == DEFAULT_RESONANCE_SCORE
    assert state.stage_for("missing") is EvolutionStage.SEED
