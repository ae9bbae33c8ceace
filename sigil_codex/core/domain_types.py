"""Domain Types: rich types that replace bare primitives across the codex.

Invariants:
    - SigilId, UserId, NodeId wrap str: ids are opaque, assigned by persistence
    - ChakraType has exactly 7 members in canonical order (Root=1 .. Crown=7)
    - EvolutionStage has exactly 5 members ordered seed < ... < transcendent
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SigilId = NewType("SigilId", str)
UserId = NewType("UserId", str)
NodeId = NewType("NodeId", str)


# ─── Value Types ─────────────────────────────────────────────────

ScorePercent = NewType("ScorePercent", float)   # 0.0–100.0
Frequency = NewType("Frequency", float)         # Hz


# ─── Constants ───────────────────────────────────────────────────

SCORE_MIN = 0.0
SCORE_MAX = 100.0
BASE_RESONANCE = 50
TESLA_DIGITS = ("3", "6", "9")


# ─── Enums ───────────────────────────────────────────────────────

class ChakraType(str, Enum):
    """The 7 chakra tags, declared in canonical order."""
    ROOT = "Root"
    SACRAL = "Sacral"
    SOLAR_PLEXUS = "SolarPlexus"
    HEART = "Heart"
    THROAT = "Throat"
    THIRD_EYE = "ThirdEye"
    CROWN = "Crown"

    @property
    def index(self) -> int:
        """Ordinal position 1–7."""
        return list(ChakraType).index(self) + 1

    @property
    def frequency(self) -> float:
        return CHAKRA_FREQUENCIES[self]


CHAKRA_FREQUENCIES: dict[ChakraType, float] = {
    ChakraType.ROOT: 396.0,
    ChakraType.SACRAL: 417.0,
    ChakraType.SOLAR_PLEXUS: 528.0,
    ChakraType.HEART: 639.0,
    ChakraType.THROAT: 741.0,
    ChakraType.THIRD_EYE: 852.0,
    ChakraType.CROWN: 963.0,
}


class EvolutionStage(str, Enum):
    """Ordered maturity stages. Derived, never persisted as current state."""
    SEED = "seed"
    SPROUT = "sprout"
    BLOOM = "bloom"
    MATURE = "mature"
    TRANSCENDENT = "transcendent"

    @property
    def level(self) -> int:
        return list(EvolutionStage).index(self) + 1


class JournalEntryType(str, Enum):
    """Event kinds appended to the journal after a successful mutation."""
    SIGIL_CREATION = "sigil_creation"
    SIGIL_EVOLUTION = "sigil_evolution"
    SIGIL_ALIGNMENT = "sigil_alignment"
