from __future__ import annotations

from dataclasses import dataclass

from .cognitive_core import MIN_MEASURABLE_S, GameMode, clamp_int, round_half_up

INDEX_CENTER = 100
INDEX_POINTS_PER_SD = 15
INDEX_MIN = 40
INDEX_MAX = 160

# Returned instead of an index when the session was too short to measure.
UNMEASURABLE = 0


@dataclass(frozen=True, slots=True)
class Norm:
    mean_per_min: float
    sd_per_min: float


# Baseline rates of net correct answers per minute for an average player.
NORMS: dict[GameMode, Norm] = {
    GameMode.MATCH: Norm(mean_per_min=45.0, sd_per_min=12.0),
    GameMode.CODING: Norm(mean_per_min=30.0, sd_per_min=8.0),
}


def is_measurable(elapsed_s: int) -> bool:
    return elapsed_s >= MIN_MEASURABLE_S


def net_rate_per_min(*, score: int, mistakes: int, elapsed_s: int) -> float:
    """Net correct answers per minute; each mistake cancels one correct answer."""

    raw = max(0, score - mistakes)
    return raw / float(elapsed_s) * 60.0


def processing_speed_index(*, score: int, mistakes: int, elapsed_s: int, mode: GameMode) -> int:
    """Convert raw session counters into the Processing Speed Index.

    The net rate is turned into a z-score against the mode's norm and mapped
    onto a scale centred at 100 with 15 points per standard deviation, then
    clamped to [40, 160]. Sessions shorter than 10 s return ``UNMEASURABLE``
    (0), which callers must present as "insufficient data", not as a score.
    """

    if score < 0 or mistakes < 0:
        raise ValueError("score and mistakes must be >= 0")
    if elapsed_s < 0:
        raise ValueError("elapsed_s must be >= 0")
    if not is_measurable(elapsed_s):
        return UNMEASURABLE

    norm = NORMS[GameMode(mode)]
    rate = net_rate_per_min(score=score, mistakes=mistakes, elapsed_s=elapsed_s)
    z = (rate - norm.mean_per_min) / norm.sd_per_min
    index = round_half_up(INDEX_CENTER + z * INDEX_POINTS_PER_SD)
    return clamp_int(index, INDEX_MIN, INDEX_MAX)
