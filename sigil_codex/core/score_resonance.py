"""Resonance Scorer: pure multi-factor score for one sigil.

Invariants:
    - Never raises; missing node or law count degrade to defaults
    - overall, frequency_alignment, timeline_alignment, law_compliance in [0, 100]
    - timeline_alignment is exactly 0 or 100
    - chakra_harmony is NOT clamped below; with 7 chakras its floor is 28

Design Decisions:
    - The aligned node is resolved by the caller (recompute.py), so an alignment
      pointing at an unknown node scores as unaligned
    - law_compliance is derived from the compliance checker's count of
      satisfied laws over the 9-law catalog, not computed here
"""

from sigil_codex.core.codex_types import (
    AmbientChakra, ResonanceScore, Sigil, TimelineNode,
)
from sigil_codex.core.domain_types import (
    BASE_RESONANCE, SCORE_MAX, SCORE_MIN, TESLA_DIGITS, ChakraType,
)
from sigil_codex.core.universal_laws import UNIVERSAL_LAWS

ALIGNMENT_BONUS = 20
CHAKRA_MATCH_BONUS = 15
TESLA_BONUS = 10
INTENTION_CLARITY_BONUS = 5
INTENTION_CLARITY_LENGTH = 30
HARMONY_STEP = 12
DEFAULT_LAW_COMPLIANCE = 70.0


def clamp_score(value: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def format_frequency(frequency: float) -> str:
    """Render like a JS number: 639.0 -> '639', 639.5 -> '639.5'."""
    value = float(frequency)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def has_tesla_digit(frequency: float) -> bool:
    rendered = format_frequency(frequency)
    return any(d in rendered for d in TESLA_DIGITS)


def compute_overall(sigil: Sigil, node: TimelineNode | None) -> float:
    base = BASE_RESONANCE
    if node is not None:
        base += ALIGNMENT_BONUS
        if node.chakra == sigil.chakra:
            base += CHAKRA_MATCH_BONUS
    if has_tesla_digit(sigil.frequency):
        base += TESLA_BONUS
    if len(sigil.intention) > INTENTION_CLARITY_LENGTH:
        base += INTENTION_CLARITY_BONUS
    return float(min(base, SCORE_MAX))


def chakra_harmony(sigil_chakra: ChakraType, ambient_chakra: ChakraType) -> float:
    if sigil_chakra == ambient_chakra:
        return SCORE_MAX
    distance = abs(sigil_chakra.index - ambient_chakra.index)
    return float(SCORE_MAX - HARMONY_STEP * distance)


def frequency_alignment(sigil_frequency: float, ambient_frequency: float) -> float:
    drift = abs(sigil_frequency - ambient_frequency) / 10
    return SCORE_MAX - min(SCORE_MAX, drift)


def law_compliance_from_count(law_count: int | None) -> float:
    if law_count is None:
        return DEFAULT_LAW_COMPLIANCE
    return clamp_score(round(SCORE_MAX * law_count / len(UNIVERSAL_LAWS)))


def score_resonance(
    sigil: Sigil,
    node: TimelineNode | None,
    ambient: AmbientChakra | None = None,
    law_count: int | None = None,
) -> ResonanceScore:
    """Score one sigil against its aligned node and the ambient chakra. Pure."""
    ambient = ambient or AmbientChakra()
    return ResonanceScore(
        overall=compute_overall(sigil, node),
        chakra_harmony=chakra_harmony(sigil.chakra, ambient.chakra),
        frequency_alignment=frequency_alignment(
            sigil.frequency, ambient.frequency,
        ),
        timeline_alignment=SCORE_MAX if node is not None else SCORE_MIN,
        law_compliance=law_compliance_from_count(law_count),
    )
