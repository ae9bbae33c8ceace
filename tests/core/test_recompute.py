"""Recomputation Pipeline: score, stage and laws derived for every sigil.

Tests cover:
    - Output maps keyed exactly by store ids
    - law_compliance reflects the compliance count
    - Alignment to an unknown node scores as unaligned
    - apply_recomputation prunes ids no longer stored
    - Stage may regress when the score drops
"""

from datetime import datetime, timedelta, timezone

import pytest

from sigil_codex.core.check_compliance import no_padding
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_types import (
    AmbientChakra, ResonanceScore, Sigil, SigilParameters,
)
from sigil_codex.core.domain_types import ChakraType, EvolutionStage
from sigil_codex.core.recompute import (
    Recomputation, apply_recomputation, recompute, recompute_state,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)
HEART = AmbientChakra.for_chakra(ChakraType.HEART)


def _sigil(sigil_id="s-1", age_days=0) -> Sigil:
    return Sigil(
        id=sigil_id, user_id="u-1",
        parameters=SigilParameters(
            chakra=ChakraType.HEART, frequency=639.0,
            intention="Find my center and my voice",
        ),
        created_at=NOW - timedelta(days=age_days),
    )


def test_empty_store_yields_empty_maps():
    result = recompute([], {}, HEART, now=NOW, padding=no_padding)
    assert result == Recomputation()


def test_maps_are_keyed_by_store_ids():
    sigils = [_sigil("a"), _sigil("b")]
    result = recompute(sigils, {}, HEART, now=NOW, padding=no_padding)
    assert set(result.scores) == set(result.stages) == set(result.laws) == {"a", "b"}


def test_unaligned_scenario():
    result = recompute([_sigil()], {}, HEART, now=NOW, padding=no_padding)
    score = result.scores["s-1"]
    assert score.overall == 60
    assert score.timeline_alignment == 0
    # Vibration, Polarity (" and "), Rhythm (639)
    assert len(result.laws["s-1"]) == 3
    assert score.law_compliance == 33
    assert result.stages["s-1"] is EvolutionStage.SEED


def test_aligned_scenario_adds_correspondence():
    result = recompute(
        [_sigil()], {"s-1": "present-flow"}, HEART, now=NOW, padding=no_padding,
    )
    assert result.scores["s-1"].overall == 95
    assert len(result.laws["s-1"]) == 4
    assert result.scores["s-1"].law_compliance == 44


def test_unknown_node_scores_as_unaligned():
    result = recompute(
        [_sigil()], {"s-1": "nowhere"}, HEART, now=NOW, padding=no_padding,
    )
    assert result.scores["s-1"].timeline_alignment == 0
    assert result.scores["s-1"].overall == 60


def test_stage_uses_fresh_score_and_can_regress():
    old = _sigil(age_days=30)
    aligned = recompute([old], {"s-1": "present-flow"}, HEART, now=NOW, padding=no_padding)
    unaligned = recompute([old], {}, HEART, now=NOW, padding=no_padding)
    assert aligned.stages["s-1"] is EvolutionStage.TRANSCENDENT
    assert unaligned.stages["s-1"] is EvolutionStage.SPROUT


def test_apply_prunes_unknown_ids():
    state = CodexState(user_id="u-1", sigils=[_sigil("a")])
    result = Recomputation(
        scores={"a": ResonanceScore(), "gone": ResonanceScore()},
        stages={"a": EvolutionStage.SEED, "gone": EvolutionStage.BLOOM},
        laws={"a": [], "gone": []},
    )
    apply_recomputation(state, result)
    assert set(state.scores) == {"a"}
    assert set(state.stages) == {"a"}
    assert set(state.laws) == {"a"}


def test_recompute_state_uses_state_ambient():
    state = CodexState(
        user_id="u-1", sigils=[_sigil()],
        ambient=AmbientChakra.for_chakra(ChakraType.ROOT),
    )
    recompute_state(state, now=NOW, padding=no_padding)
    score = state.score_for("s-1")
    assert score.chakra_harmony == 64
    assert score.frequency_alignment == pytest.approx(75.7)
