"""Codex Stats: pure summary counts for dashboards, computed from CodexState.

Invariants:
    - All inputs come from CodexState fields (no IO, no DB)
    - Returns a flat JSON-serializable dict
    - Never raises; empty state yields zero counts and a 0.0 field

Design Decisions:
    - Pure function, not a method on CodexState: state holds data, stats are presentation
    - Every stage and chakra key is present even when its count is 0
"""

from sigil_codex.core.aggregate_field import aggregate_quantum_field
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.domain_types import ChakraType, EvolutionStage


def compute_codex_stats(state: CodexState) -> dict:
    """Compute summary statistics from CodexState. Pure, no IO."""
    by_stage = {stage.value: 0 for stage in EvolutionStage}
    for sigil in state.sigils:
        by_stage[state.stage_for(sigil.id).value] += 1

    by_chakra = {chakra.value: 0 for chakra in ChakraType}
    for sigil in state.sigils:
        by_chakra[sigil.chakra.value] += 1

    return {
        "total_sigils": state.sigil_count,
        "aligned_sigils": sum(1 for s in state.sigils if s.id in state.alignments),
        "evolved_sigils": sum(1 for s in state.sigils if s.is_evolved),
        "sigils_by_stage": by_stage,
        "sigils_by_chakra": by_chakra,
        "quantum_field": aggregate_quantum_field(
            state.scores, state.alignments, state.sigils,
        ),
    }
