"""Universal Laws: the static 9-law catalog used by the compliance checker.

Invariants:
    - Exactly 9 laws, fixed order (the checker's rules index into this order)
    - Immutable reference data
"""

from sigil_codex.core.codex_types import UniversalLaw


LAW_OF_VIBRATION = UniversalLaw(
    "law-of-vibration", "Law of Vibration",
    "Everything vibrates at a specific frequency",
)
LAW_OF_CORRESPONDENCE = UniversalLaw(
    "law-of-correspondence", "Law of Correspondence",
    "As above, so below; as within, so without",
)
LAW_OF_POLARITY = UniversalLaw(
    "law-of-polarity", "Law of Polarity",
    "Everything has its opposite",
)
LAW_OF_RHYTHM = UniversalLaw(
    "law-of-rhythm", "Law of Rhythm",
    "All things rise and fall in a measured motion",
)
LAW_OF_CAUSE_EFFECT = UniversalLaw(
    "law-of-cause-effect", "Law of Cause & Effect",
    "Every action has a reaction",
)
LAW_OF_GENDER = UniversalLaw(
    "law-of-gender", "Law of Gender",
    "Masculine and feminine principles exist in all things",
)
LAW_OF_ATTRACTION = UniversalLaw(
    "law-of-attraction", "Law of Attraction",
    "Like attracts like",
)
LAW_OF_PERPETUAL_TRANSMUTATION = UniversalLaw(
    "law-of-perpetual-transmutation", "Law of Perpetual Transmutation",
    "Energy is always in motion and can be converted",
)
LAW_OF_RELATIVITY = UniversalLaw(
    "law-of-relativity", "Law of Relativity",
    "Everything is relative and connected",
)

UNIVERSAL_LAWS: tuple[UniversalLaw, ...] = (
    LAW_OF_VIBRATION,
    LAW_OF_CORRESPONDENCE,
    LAW_OF_POLARITY,
    LAW_OF_RHYTHM,
    LAW_OF_CAUSE_EFFECT,
    LAW_OF_GENDER,
    LAW_OF_ATTRACTION,
    LAW_OF_PERPETUAL_TRANSMUTATION,
    LAW_OF_RELATIVITY,
)
