"""Codex Schemas: Pydantic models with field-level validation for the codex API.

Invariants:
    - SigilCreate.intention: 1-500 chars, stripped, non-empty
    - SigilCreate.frequency: positive Hz
    - Chakra fields only accept the 7 ChakraType values
    - Response models mirror core records and carry no input limits, so any
      stored row can be rendered

Design Decisions:
    - field_validator for side-effect-free transforms (strip), keeps models pure
    - Responses built explicitly in the route module from core records
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from sigil_codex.core.domain_types import ChakraType, EvolutionStage


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("intention cannot be empty or whitespace")
    return v


# --- Requests ------------------------------------------------------------------

class NumerologyProfileIn(BaseModel):
    life_path: int = Field(0, ge=0, le=99)
    expression: int = Field(0, ge=0, le=99)
    soul_urge: int = Field(0, ge=0, le=99)
    base_form: str = Field("", max_length=100)
    overlay: str = Field("", max_length=100)
    ornamentation: str = Field("", max_length=100)


class SigilCreate(BaseModel):
    """Sigil generation payload."""
    chakra: ChakraType
    frequency: float = Field(gt=0, le=100_000)
    intention: str = Field(min_length=1, max_length=500)
    numerology_profile: NumerologyProfileIn = NumerologyProfileIn()
    prime_multiplier: int = Field(1, ge=1)
    archetype_key: str | None = Field(None, max_length=100)
    svg: str = Field("", max_length=200_000)

    @field_validator("intention")
    @classmethod
    def strip_intention(cls, v: str) -> str:
        return _strip_required(v)


class SigilEvolve(BaseModel):
    intention: str = Field(min_length=1, max_length=500)

    @field_validator("intention")
    @classmethod
    def strip_intention(cls, v: str) -> str:
        return _strip_required(v)


class AlignmentRequest(BaseModel):
    node_id: str = Field(min_length=1, max_length=50)


class AmbientRequest(BaseModel):
    chakra: ChakraType
    intensity: float = Field(0.5, ge=0.0, le=1.0)


# --- Responses -----------------------------------------------------------------

class TimelineNodeResponse(BaseModel):
    id: str
    name: str
    description: str
    chakra: ChakraType
    x: int
    y: int
    color: str


class UniversalLawResponse(BaseModel):
    id: str
    name: str
    description: str


class NumerologyProfileResponse(BaseModel):
    """Stored numerology, echoed without the request-side limits."""
    life_path: int = 0
    expression: int = 0
    soul_urge: int = 0
    base_form: str = ""
    overlay: str = ""
    ornamentation: str = ""


class ResonanceScoreResponse(BaseModel):
    overall: float
    chakra_harmony: float
    frequency_alignment: float
    timeline_alignment: float
    law_compliance: float


class EvolutionResponse(BaseModel):
    stage: EvolutionStage
    level: int
    required_resonance: float
    progress: float
    can_evolve: bool


class SigilResponse(BaseModel):
    id: str
    user_id: str
    chakra: ChakraType
    frequency: float
    intention: str
    numerology_profile: NumerologyProfileResponse
    prime_multiplier: int
    archetype_key: str | None = None
    svg: str = ""
    created_at: datetime
    evolution_parent: str | None = None
    evolution_stage: EvolutionStage | None = None
    evolution_date: datetime | None = None


class SigilDetail(BaseModel):
    """A sigil with every derived metric the UI renders."""
    sigil: SigilResponse
    resonance: ResonanceScoreResponse
    evolution: EvolutionResponse
    alignment: TimelineNodeResponse | None = None
    laws: list[UniversalLawResponse] = []


class AmbientResponse(BaseModel):
    chakra: ChakraType
    frequency: float
    intensity: float


class CodexResponse(BaseModel):
    user_id: str
    ambient: AmbientResponse
    sigils: list[SigilDetail] = []
    quantum_field: float = 0.0
    stats: dict = {}


class AlignmentResponse(BaseModel):
    sigil_id: str
    node: TimelineNodeResponse | None = None
