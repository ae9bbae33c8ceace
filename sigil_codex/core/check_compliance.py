"""Universal Law Compliance Checker: rule-based law subset for one sigil.

Invariants:
    - Result is an ordered subset of UNIVERSAL_LAWS with no duplicates
    - Vibration is always included
    - Correspondence is included iff is_aligned
    - Rule-triggered laws keep catalog order; padded laws follow them
    - Unknown sigil id yields [] (check_compliance_for)

Design Decisions:
    - Padding is pluggable: LawPadding chooses extra laws from the untriggered
      remainder. The default draws 2 at random, so results are non-deterministic
      unless a seeded Random or no_padding is supplied
    - Correspondence is never a padding candidate: it stays tied to alignment
"""

import random
from typing import Callable, Iterable, Mapping

from sigil_codex.core.codex_types import Sigil, UniversalLaw
from sigil_codex.core.domain_types import TESLA_DIGITS
from sigil_codex.core.score_resonance import format_frequency
from sigil_codex.core.universal_laws import (
    UNIVERSAL_LAWS,
    LAW_OF_VIBRATION,
    LAW_OF_CORRESPONDENCE,
    LAW_OF_POLARITY,
    LAW_OF_RHYTHM,
    LAW_OF_CAUSE_EFFECT,
)

PADDING_COUNT = 2
POLARITY_MARKERS = (" and ", " but ", " yet ")
ACTION_WORDS = ("create", "manifest", "generate")

LawPadding = Callable[[list[UniversalLaw], int], list[UniversalLaw]]


def random_padding(rng: random.Random | None = None) -> LawPadding:
    """Padding that samples without replacement. Seed `rng` for repeatable picks."""
    source = rng or random.Random()

    def pad(remaining: list[UniversalLaw], count: int) -> list[UniversalLaw]:
        return source.sample(remaining, min(count, len(remaining)))

    return pad


def no_padding(remaining: list[UniversalLaw], count: int) -> list[UniversalLaw]:
    return []


def triggered_laws(sigil: Sigil, is_aligned: bool) -> list[UniversalLaw]:
    """The deterministic part: laws whose rule the sigil satisfies."""
    intention = sigil.intention
    lowered = intention.lower()
    frequency = format_frequency(sigil.frequency)

    laws = [LAW_OF_VIBRATION]
    if is_aligned:
        laws.append(LAW_OF_CORRESPONDENCE)
    if any(marker in intention for marker in POLARITY_MARKERS):
        laws.append(LAW_OF_POLARITY)
    if any(d in frequency for d in TESLA_DIGITS):
        laws.append(LAW_OF_RHYTHM)
    if any(word in lowered for word in ACTION_WORDS):
        laws.append(LAW_OF_CAUSE_EFFECT)
    return laws


def check_compliance(
    sigil: Sigil,
    is_aligned: bool,
    padding: LawPadding | None = None,
) -> list[UniversalLaw]:
    """Laws the sigil complies with: triggered rules plus padded extras."""
    laws = triggered_laws(sigil, is_aligned)
    remaining = [
        law for law in UNIVERSAL_LAWS
        if law not in laws and law is not LAW_OF_CORRESPONDENCE
    ]
    pad = padding if padding is not None else random_padding()
    for law in pad(remaining, PADDING_COUNT)[:PADDING_COUNT]:
        if law in remaining and law not in laws:
            laws.append(law)
    return laws


def check_compliance_for(
    sigil_id: str,
    sigils: Iterable[Sigil],
    alignments: Mapping[str, str],
    padding: LawPadding | None = None,
) -> list[UniversalLaw]:
    """Lookup wrapper: [] when the sigil is not in the store."""
    sigil = next((s for s in sigils if s.id == sigil_id), None)
    if sigil is None:
        return []
    return check_compliance(sigil, sigil_id in alignments, padding)
