"""Codex State: per-session container for the Sigil Store and Alignment Map.

Invariants:
    - sigils is ordered newest first; ids are unique
    - alignments holds at most one node id per sigil; set_alignment overwrites
    - alignments only reference sigil ids in the store and node ids in `nodes`
    - scores/stages/laws are derived; they are replaced wholesale by
      apply_recomputation and never hold ids absent from the store

Design Decisions:
    - Pure dataclass, no IO: the shell (services/codex_service.py) performs the
      remote write first and only then mutates this object
    - One instance per (process, user); no cross-session synchronization
"""

from dataclasses import dataclass, field

from sigil_codex.core.codex_types import (
    DEFAULT_RESONANCE_SCORE, AmbientChakra, ResonanceScore, Sigil,
    TimelineNode, UniversalLaw,
)
from sigil_codex.core.domain_types import EvolutionStage, UserId
from sigil_codex.core.timeline_nodes import DEFAULT_TIMELINE_NODES, find_node


@dataclass
class CodexState:
    """Per-user session state: store, alignments, ambient chakra, derived maps."""

    user_id: UserId

    # === Sigil Store (newest first) ===
    sigils: list[Sigil] = field(default_factory=list)

    # === Alignment Map: sigil id -> timeline node id ===
    alignments: dict[str, str] = field(default_factory=dict)

    # === Reference data ===
    nodes: tuple[TimelineNode, ...] = DEFAULT_TIMELINE_NODES

    # === Ambient chakra (scoring reference) ===
    ambient: AmbientChakra = field(default_factory=AmbientChakra)

    # === Derived maps (replaced by apply_recomputation) ===
    scores: dict[str, ResonanceScore] = field(default_factory=dict)
    stages: dict[str, EvolutionStage] = field(default_factory=dict)
    laws: dict[str, list[UniversalLaw]] = field(default_factory=dict)

    # === Selection ===
    selected_sigil_id: str | None = None
    selected_node_id: str | None = None

    loaded: bool = False
    last_error: str | None = None

    @property
    def sigil_count(self) -> int:
        return len(self.sigils)

    @property
    def aligned_count(self) -> int:
        return len(self.alignments)

    @property
    def selected_sigil(self) -> Sigil | None:
        return self.get_sigil(self.selected_sigil_id)

    @property
    def selected_node(self) -> TimelineNode | None:
        return find_node(self.selected_node_id, self.nodes)

    def get_sigil(self, sigil_id: str | None) -> Sigil | None:
        if not sigil_id:
            return None
        return next((s for s in self.sigils if s.id == sigil_id), None)

    def has_sigil(self, sigil_id: str) -> bool:
        return self.get_sigil(sigil_id) is not None

    def get_node(self, node_id: str | None) -> TimelineNode | None:
        return find_node(node_id, self.nodes)

    def aligned_node(self, sigil_id: str) -> TimelineNode | None:
        return self.get_node(self.alignments.get(sigil_id))

    def add_sigil(self, sigil: Sigil) -> None:
        """Prepend a newly persisted sigil and select it."""
        self.sigils = [sigil] + [s for s in self.sigils if s.id != sigil.id]
        self.selected_sigil_id = sigil.id

    def replace_contents(
        self, sigils: list[Sigil], alignments: dict[str, str],
    ) -> None:
        """Swap in a freshly fetched store. Drops alignments to unknown ids."""
        self.sigils = list(sigils)
        known = {s.id for s in self.sigils}
        self.alignments = {
            sigil_id: node_id
            for sigil_id, node_id in alignments.items()
            if sigil_id in known and self.get_node(node_id) is not None
        }
        if self.selected_sigil_id not in known:
            self.selected_sigil_id = self.sigils[0].id if self.sigils else None
        self.loaded = True

    def set_alignment(self, sigil_id: str, node_id: str) -> None:
        self.alignments[sigil_id] = node_id

    def score_for(self, sigil_id: str) -> ResonanceScore:
        return self.scores.get(sigil_id, DEFAULT_RESONANCE_SCORE)

    def stage_for(self, sigil_id: str) -> EvolutionStage:
        return self.stages.get(sigil_id, EvolutionStage.SEED)
