"""Codex Service: imperative shell around the pure codex core.

Invariants:
    - Remote write is awaited BEFORE CodexState is touched; on failure state is
      untouched and the caller gets None/False (never an exception)
    - Every successful mutation is followed by an explicit recompute_state()
    - XP award and journal append run after the local update and are best-effort:
      their failure is logged and never undoes the mutation
    - No automatic retries

Design Decisions:
    - Follows the impureim sandwich: await IO -> pure state update -> pure recompute
    - Repositories signal failure by raising CodexError subclasses (DatabaseError);
      this layer converts them to boolean/None results plus a log line
    - `clock` injected so evolution stages are testable
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sigil_codex.core.aggregate_field import aggregate_quantum_field
from sigil_codex.core.check_compliance import LawPadding, check_compliance_for
from sigil_codex.core.codex_state import CodexState
from sigil_codex.core.codex_stats import compute_codex_stats
from sigil_codex.core.codex_types import (
    AmbientChakra, ResonanceScore, Sigil, SigilParameters, TimelineNode,
    UniversalLaw,
)
from sigil_codex.core.domain_types import ChakraType, EvolutionStage, NodeId, SigilId
from sigil_codex.core.errors import CodexError
from sigil_codex.core.journal_entries import (
    alignment_entry, creation_entry, evolution_entry,
)
from sigil_codex.core.recompute import Recomputation, recompute_state
from sigil_codex.core.repository_protocols import (
    AlignmentRepository, JournalRepository, SigilRepository, XPAwarder,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class XPAwards:
    sigil_creation: int = 25
    sigil_evolution: int = 40
    sigil_alignment: int = 15


class CodexService:
    """Sigil mutations, timeline alignment, and derived-metric accessors for one user."""

    def __init__(
        self,
        state: CodexState,
        sigils: SigilRepository,
        alignments: AlignmentRepository,
        journal: JournalRepository | None = None,
        xp: XPAwarder | None = None,
        padding: LawPadding | None = None,
        xp_awards: XPAwards | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.state = state
        self.sigils = sigils
        self.alignments = alignments
        self.journal = journal
        self.xp = xp
        self.padding = padding
        self.xp_awards = xp_awards or XPAwards()
        self.clock = clock

    @property
    def user_id(self):
        return self.state.user_id

    def recompute(self) -> Recomputation:
        return recompute_state(self.state, now=self.clock(), padding=self.padding)

    # ─── Loading ────────────────────────────────────────────────

    async def load(self) -> bool:
        """Fetch the owner's sigils and alignments, then recompute."""
        try:
            sigils = await self.sigils.list_by_owner(self.user_id)
            pairs = await self.alignments.list_by_owner(self.user_id)
        except CodexError as e:
            logger.error(
                f"Failed to load codex: {e.message}",
                extra={"user_id": self.user_id, "error_code": e.code},
            )
            self.state.last_error = "Failed to load sigils"
            return False

        self.state.replace_contents(sigils, dict(pairs))
        self.state.last_error = None
        self.recompute()
        logger.info(
            f"Loaded {len(sigils)} sigils, {self.state.aligned_count} alignments",
            extra={"user_id": self.user_id},
        )
        return True

    # ─── Mutations ──────────────────────────────────────────────

    async def record_sigil(self, params: SigilParameters) -> Sigil | None:
        """Persist a newly generated sigil and add it to the store."""
        try:
            sigil = await self.sigils.insert(self.user_id, params)
        except CodexError as e:
            logger.error(
                f"Error recording sigil: {e.message}",
                extra={"user_id": self.user_id, "error_code": e.code},
            )
            self.state.last_error = "Failed to create sigil"
            return None

        self.state.add_sigil(sigil)
        self.recompute()

        amount = self.xp_awards.sigil_creation
        await self._award_xp(amount)
        await self._append_journal(creation_entry(sigil, amount, self.clock()))
        return sigil

    async def evolve_sigil(self, sigil_id: str, intention: str) -> Sigil | None:
        """Fork a new sigil from an existing one with a new intention."""
        parent = self.state.get_sigil(sigil_id)
        if parent is None:
            logger.warning(
                "Cannot evolve unknown sigil",
                extra={"user_id": self.user_id, "sigil_id": sigil_id},
            )
            return None

        params = parent.parameters.evolved(
            intention=intention,
            parent_id=parent.id,
            parent_stage=self.state.stage_for(parent.id),
            at=self.clock(),
        )
        try:
            child = await self.sigils.insert(self.user_id, params)
        except CodexError as e:
            logger.error(
                f"Error evolving sigil: {e.message}",
                extra={
                    "user_id": self.user_id, "sigil_id": sigil_id,
                    "error_code": e.code,
                },
            )
            self.state.last_error = "Failed to evolve sigil"
            return None

        self.state.add_sigil(child)
        self.recompute()

        amount = self.xp_awards.sigil_evolution
        await self._award_xp(amount)
        await self._append_journal(
            evolution_entry(parent, child, amount, self.clock()),
        )
        return child

    async def align_to_timeline(self, sigil_id: str, node_id: str) -> bool:
        """Align a sigil to a timeline node. Overwrites any prior alignment."""
        sigil = self.state.get_sigil(sigil_id)
        node = self.state.get_node(node_id)
        if sigil is None or node is None:
            logger.warning(
                "Sigil or node not found",
                extra={
                    "user_id": self.user_id, "sigil_id": sigil_id,
                    "node_id": node_id,
                },
            )
            return False

        try:
            await self.alignments.upsert(
                self.user_id, SigilId(sigil.id), NodeId(node.id),
            )
        except CodexError as e:
            logger.error(
                f"Error aligning sigil to timeline: {e.message}",
                extra={
                    "user_id": self.user_id, "sigil_id": sigil_id,
                    "node_id": node_id, "error_code": e.code,
                },
            )
            self.state.last_error = "Failed to align sigil"
            return False

        self.state.set_alignment(sigil.id, node.id)
        self.recompute()

        amount = self.xp_awards.sigil_alignment
        await self._award_xp(amount)
        await self._append_journal(
            alignment_entry(sigil, node, amount, self.clock()),
        )
        return True

    # ─── Ambient chakra & selection ─────────────────────────────

    def activate_chakra(self, chakra: ChakraType, intensity: float = 0.5) -> None:
        self.state.ambient = AmbientChakra.for_chakra(chakra, intensity)
        self.recompute()

    def select_sigil(self, sigil_id: str) -> Sigil | None:
        """Select a sigil; when aligned, also select its node and activate its chakra."""
        sigil = self.state.get_sigil(sigil_id)
        if sigil is None:
            return None
        self.state.selected_sigil_id = sigil.id
        node = self.state.aligned_node(sigil.id)
        if node is not None:
            self.select_timeline_node(node.id)
        return sigil

    def select_timeline_node(self, node_id: str) -> TimelineNode | None:
        node = self.state.get_node(node_id)
        if node is None:
            return None
        self.state.selected_node_id = node.id
        self.activate_chakra(node.chakra)
        return node

    # ─── Accessors ──────────────────────────────────────────────

    def get_alignment(self, sigil_id: str) -> TimelineNode | None:
        return self.state.aligned_node(sigil_id)

    def get_resonance_score(self, sigil_id: str) -> ResonanceScore:
        return self.state.score_for(sigil_id)

    def get_evolution_stage(self, sigil_id: str) -> EvolutionStage:
        return self.state.stage_for(sigil_id)

    def check_universal_law_compliance(self, sigil_id: str) -> list[UniversalLaw]:
        """Fresh compliance check; padded laws may differ between calls."""
        return check_compliance_for(
            sigil_id, self.state.sigils, self.state.alignments, self.padding,
        )

    def get_quantum_resonance(self) -> float:
        return aggregate_quantum_field(
            self.state.scores, self.state.alignments, self.state.sigils,
        )

    def stats(self) -> dict:
        return compute_codex_stats(self.state)

    # ─── Best-effort side effects ───────────────────────────────

    async def _award_xp(self, amount: int) -> None:
        if self.xp is None:
            return
        try:
            await self.xp.add_xp(self.user_id, amount)
        except CodexError as e:
            logger.warning(
                f"XP award failed: {e.message}",
                extra={"user_id": self.user_id, "error_code": e.code},
            )

    async def _append_journal(self, entry: dict) -> None:
        if self.journal is None:
            return
        try:
            await self.journal.append(entry)
        except CodexError as e:
            logger.warning(
                f"Journal append failed: {e.message}",
                extra={
                    "user_id": self.user_id,
                    "entry_type": entry["entry_type"],
                    "error_code": e.code,
                },
            )
