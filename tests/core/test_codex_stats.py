"""Codex Stats: dashboard summary counts."""

from datetime import datetime, timezone

from sigil_codex.core.check_compliance import no_padding
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_stats import compute_codex_stats
from sigil_codex.core.codex_types import Sigil, SigilParameters
from sigil_codex.core.domain_types import ChakraType, EvolutionStage
from sigil_codex.core.recompute import recompute_state

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _sigil(sigil_id, chakra, parent=None) -> Sigil:
    return Sigil(
        id=sigil_id, user_id="u-1",
        parameters=SigilParameters(
            chakra=chakra, frequency=528.0, intention="x",
            evolution_parent=parent,
        ),
        created_at=NOW,
    )


def test_empty_state_has_zero_counts_and_every_key():
    stats = compute_codex_stats(CodexState(user_id="u-1"))
    assert stats["total_sigils"] == 0
    assert stats["aligned_sigils"] == 0
    assert stats["evolved_sigils"] == 0
    assert stats["quantum_field"] == 0.0
    assert set(stats["sigils_by_stage"]) == {s.value for s in EvolutionStage}
    assert set(stats["sigils_by_chakra"]) == {c.value for c in ChakraType}


def test_counts_reflect_store():
    state = CodexState(user_id="u-1", sigils=[
        _sigil("b", ChakraType.ROOT, parent="a"),
        _sigil("a", ChakraType.ROOT),
        _sigil("c", ChakraType.CROWN),
    ])
    state.set_alignment("a", "past-echo")
    recompute_state(state, now=NOW, padding=no_padding)

    stats = compute_codex_stats(state)
    assert stats["total_sigils"] == 3
    assert stats["aligned_sigils"] == 1
    assert stats["evolved_sigils"] == 1
    assert stats["sigils_by_chakra"]["Root"] == 2
    assert stats["sigils_by_chakra"]["Heart"] == 0
    assert stats["sigils_by_stage"]["seed"] == 3
    assert 0 < stats["quantum_field"] <= 100
