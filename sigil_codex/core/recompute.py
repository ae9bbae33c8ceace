"""Recomputation Pipeline: (sigils, alignments, ambient) -> (scores, stages, laws).

Invariants:
    - Output maps are keyed exactly by the ids of the input sigils
    - Per sigil: compliance, then score (law count), then stage from the fresh overall
    - Alignments to unknown nodes score as unaligned
    - Never raises for degenerate input; empty store yields empty maps

Design Decisions:
    - Explicit call after each mutation instead of an implicit watcher; callers
      own when recomputation happens and the cost is visible at the call site
    - `now` is a parameter so stage classification is testable
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Mapping

from sigil_codex.core.check_compliance import LawPadding, check_compliance
from sigil_codex.core.classify_evolution import classify_stage
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_types import (
    AmbientChakra, ResonanceScore, Sigil, TimelineNode, UniversalLaw,
)
from sigil_codex.core.domain_types import EvolutionStage
from sigil_codex.core.score_resonance import score_resonance
from sigil_codex.core.timeline_nodes import DEFAULT_TIMELINE_NODES, find_node


@dataclass(frozen=True)
class Recomputation:
    scores: dict[str, ResonanceScore] = field(default_factory=dict)
    stages: dict[str, EvolutionStage] = field(default_factory=dict)
    laws: dict[str, list[UniversalLaw]] = field(default_factory=dict)


def recompute(
    sigils: Iterable[Sigil],
    alignments: Mapping[str, str],
    ambient: AmbientChakra,
    now: datetime | None = None,
    nodes: tuple[TimelineNode, ...] = DEFAULT_TIMELINE_NODES,
    padding: LawPadding | None = None,
) -> Recomputation:
    """Derive score, stage and compliant laws for every sigil. Pure."""
    now = now or datetime.now(timezone.utc)
    scores: dict[str, ResonanceScore] = {}
    stages: dict[str, EvolutionStage] = {}
    laws: dict[str, list[UniversalLaw]] = {}

    for sigil in sigils:
        node = find_node(alignments.get(sigil.id), nodes)
        compliant = check_compliance(sigil, node is not None, padding)
        score = score_resonance(sigil, node, ambient, len(compliant))
        scores[sigil.id] = score
        stages[sigil.id] = classify_stage(sigil.created_at, score.overall, now)
        laws[sigil.id] = compliant

    return Recomputation(scores=scores, stages=stages, laws=laws)


def apply_recomputation(state: CodexState, result: Recomputation) -> None:
    """Replace the derived maps on `state`, dropping ids no longer stored."""
    known = {s.id for s in state.sigils}
    state.scores = {k: v for k, v in result.scores.items() if k in known}
    state.stages = {k: v for k, v in result.stages.items() if k in known}
    state.laws = {k: v for k, v in result.laws.items() if k in known}


def recompute_state(
    state: CodexState,
    now: datetime | None = None,
    padding: LawPadding | None = None,
) -> Recomputation:
    """Run the pipeline over `state` and store the result on it."""
    result = recompute(
        state.sigils, state.alignments, state.ambient,
        now=now, nodes=state.nodes, padding=padding,
    )
    apply_recomputation(state, result)
    return result
