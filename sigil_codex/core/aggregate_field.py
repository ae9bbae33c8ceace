"""Quantum Field Aggregator: one percentage summarizing a user's whole codex.

Invariants:
    - Empty sigil collection yields exactly 0.0
    - Result capped at 100
    - Only ids present in `sigils` contribute; stale score or alignment
      entries for absent ids are ignored
"""

from typing import Iterable, Mapping

from sigil_codex.core.codex_types import (
    DEFAULT_RESONANCE_SCORE, ResonanceScore, Sigil,
)
from sigil_codex.core.domain_types import SCORE_MAX

ALIGNED_SIGIL_BONUS = 5
CHAKRA_DIVERSITY_BONUS = 3


def aggregate_quantum_field(
    scores: Mapping[str, ResonanceScore],
    alignments: Mapping[str, str],
    sigils: Iterable[Sigil],
) -> float:
    sigils = list(sigils)
    if not sigils:
        return 0.0

    # Sigils without a computed score count at the default overall
    overall = [
        scores.get(s.id, DEFAULT_RESONANCE_SCORE).overall for s in sigils
    ]
    base = sum(overall) / len(overall)

    aligned = sum(1 for s in sigils if s.id in alignments)
    distinct_chakras = len({s.chakra for s in sigils})

    total = (
        base
        + ALIGNED_SIGIL_BONUS * aligned
        + CHAKRA_DIVERSITY_BONUS * distinct_chakras
    )
    return min(SCORE_MAX, total)
