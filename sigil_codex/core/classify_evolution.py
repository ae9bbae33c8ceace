"""Evolution Stage Classifier: pure function of (age, overall score) to a stage.

Invariants:
    - Total: every (age, score) pair maps to exactly one stage
    - Within an age bracket, stage level is non-decreasing in score
    - Age is measured in whole elapsed days (floor); negative ages count as 0
    - transcendent has no successor and always reports 100% progress

Design Decisions:
    - Stage is re-derived on every recomputation, never stored as current state,
      so an observed stage can regress when the overall score drops
    - Brackets as data (_BRACKETS) rather than nested conditionals
"""

from datetime import datetime, timezone

from sigil_codex.core.domain_types import EvolutionStage

_S = EvolutionStage

# (max_age_days_exclusive, [(score_strictly_above, stage), ...]) first match wins
_BRACKETS: tuple[tuple[float, tuple[tuple[float, EvolutionStage], ...]], ...] = (
    (1, ()),
    (3, ((70, _S.SPROUT),)),
    (7, ((80, _S.BLOOM), (60, _S.SPROUT))),
    (14, ((85, _S.MATURE), (70, _S.BLOOM), (50, _S.SPROUT))),
    (float("inf"), (
        (90, _S.TRANSCENDENT), (80, _S.MATURE),
        (65, _S.BLOOM), (40, _S.SPROUT),
    )),
)

_REQUIRED_RESONANCE: dict[EvolutionStage, float] = {
    _S.SEED: 40,
    _S.SPROUT: 60,
    _S.BLOOM: 75,
    _S.MATURE: 85,
    _S.TRANSCENDENT: 100,
}

SECONDS_PER_DAY = 86_400


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def age_in_days(created_at: datetime, now: datetime) -> int:
    created_at, now = _as_utc(created_at), _as_utc(now)
    elapsed = (now - created_at).total_seconds()
    return max(0, int(elapsed // SECONDS_PER_DAY))


def classify_by_age(age_days: int, overall: float) -> EvolutionStage:
    for max_age, thresholds in _BRACKETS:
        if age_days < max_age:
            for above, stage in thresholds:
                if overall > above:
                    return stage
            return _S.SEED
    return _S.SEED


def classify_stage(
    created_at: datetime, overall: float, now: datetime,
) -> EvolutionStage:
    """Classify a sigil's stage as observed at `now`."""
    return classify_by_age(age_in_days(created_at, now), overall)


def stage_level(stage: EvolutionStage) -> int:
    return stage.level


def required_resonance(stage: EvolutionStage) -> float:
    """Overall score needed to advance out of `stage`."""
    return _REQUIRED_RESONANCE[stage]


def next_stage(stage: EvolutionStage) -> EvolutionStage:
    stages = list(EvolutionStage)
    position = stages.index(stage)
    return stages[min(position + 1, len(stages) - 1)]


def evolution_progress(stage: EvolutionStage, overall: float) -> float:
    """Percent progress toward the next stage's threshold, clamped to [0, 100]."""
    if stage is _S.TRANSCENDENT:
        return 100.0
    current = required_resonance(stage)
    target = required_resonance(next_stage(stage))
    if overall >= target:
        return 100.0
    progress = (overall - current) / (target - current) * 100
    return max(0.0, min(100.0, progress))


def can_evolve(stage: EvolutionStage, overall: float) -> bool:
    if stage is _S.TRANSCENDENT:
        return False
    return overall >= required_resonance(stage)
