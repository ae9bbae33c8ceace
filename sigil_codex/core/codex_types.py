"""Codex Records: immutable value objects passed through the pure pipeline.

Invariants:
    - Sigil is frozen; evolution produces a new Sigil carrying evolution_parent
    - Sigil.svg is opaque and never interpreted by the core
    - created_at is timezone-aware UTC
    - ResonanceScore fields are 0–100 except chakra_harmony (see score_resonance)

Design Decisions:
    - Frozen dataclasses, not ORM rows: core never imports from models/ or db/
    - SigilParameters separates the user-supplied payload from identity, so the
      repository can assign id and created_at on insert
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from sigil_codex.core.domain_types import (
    ChakraType, EvolutionStage, NodeId, SigilId, UserId,
)


@dataclass(frozen=True)
class NumerologyProfile:
    life_path: int = 0
    expression: int = 0
    soul_urge: int = 0
    base_form: str = ""
    overlay: str = ""
    ornamentation: str = ""


@dataclass(frozen=True)
class SigilParameters:
    """User-supplied attributes of a sigil, before persistence assigns identity."""
    chakra: ChakraType
    frequency: float
    intention: str
    numerology: NumerologyProfile = field(default_factory=NumerologyProfile)
    prime_multiplier: int = 1
    archetype_key: str | None = None
    svg: str = ""
    evolution_parent: SigilId | None = None
    evolution_stage: EvolutionStage | None = None
    evolution_date: datetime | None = None

    def evolved(
        self, intention: str, parent_id: SigilId,
        parent_stage: EvolutionStage, at: datetime,
    ) -> "SigilParameters":
        """Copy with a new intention and a back-reference to the parent."""
        return replace(
            self,
            intention=intention,
            evolution_parent=parent_id,
            evolution_stage=parent_stage,
            evolution_date=at,
        )


@dataclass(frozen=True)
class Sigil:
    id: SigilId
    user_id: UserId
    parameters: SigilParameters
    created_at: datetime

    @property
    def chakra(self) -> ChakraType:
        return self.parameters.chakra

    @property
    def frequency(self) -> float:
        return self.parameters.frequency

    @property
    def intention(self) -> str:
        return self.parameters.intention

    @property
    def is_evolved(self) -> bool:
        return self.parameters.evolution_parent is not None


@dataclass(frozen=True)
class TimelineNode:
    """Fixed reference waypoint. Read-only catalog data."""
    id: NodeId
    name: str
    description: str
    chakra: ChakraType
    x: int
    y: int
    color: str


@dataclass(frozen=True)
class AmbientChakra:
    """The session's currently active chakra, used as the scoring reference."""
    chakra: ChakraType = ChakraType.HEART
    frequency: float = ChakraType.HEART.frequency
    intensity: float = 0.5

    @classmethod
    def for_chakra(cls, chakra: ChakraType, intensity: float = 0.5) -> "AmbientChakra":
        return cls(chakra=chakra, frequency=chakra.frequency, intensity=intensity)


@dataclass(frozen=True)
class ResonanceScore:
    overall: float = 50.0
    chakra_harmony: float = 50.0
    frequency_alignment: float = 50.0
    timeline_alignment: float = 0.0
    law_compliance: float = 70.0


DEFAULT_RESONANCE_SCORE = ResonanceScore()


@dataclass(frozen=True)
class UniversalLaw:
    id: str
    name: str
    description: str
