from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .clock import Clock, wall_time_ms
from .coding import CodingConfig, CodingGenerator, CodingTrial
from .cognitive_core import (
    TIME_LIMIT_CHOICES,
    AnswerFeedback,
    Feedback,
    GameMode,
    Phase,
    RoundGenerator,
    SeededRng,
    SessionSnapshot,
    TrialEvent,
)
from .persistence import SummaryStore
from .results import SessionOutcome, SessionSummary, accuracy_pct, mean_response_time_s
from .scoring import is_measurable, processing_speed_index
from .session_timer import SessionTimer
from .symbol_search import SymbolSearchConfig, SymbolSearchGenerator, SymbolSearchTrial

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModeProfile:
    title: str
    feedback_delay_s: float
    make_generator: Callable[[SeededRng], RoundGenerator]


MODE_PROFILES: dict[GameMode, ModeProfile] = {
    GameMode.MATCH: ModeProfile(
        title="Symbol Search",
        feedback_delay_s=SymbolSearchConfig().feedback_delay_s,
        make_generator=lambda rng: SymbolSearchGenerator(rng=rng),
    ),
    GameMode.CODING: ModeProfile(
        title="Coding",
        feedback_delay_s=CodingConfig().feedback_delay_s,
        make_generator=lambda rng: CodingGenerator(rng=rng),
    ),
}


class _Stage(str, Enum):
    AWAIT_ANSWER = "await_answer"
    FEEDBACK = "feedback"


class SessionEngine:
    """Trial/session state machine: IDLE -> ACTIVE -> FINALIZED.

    - Deterministic: each session's trial stream comes from a SeededRng built
      from the seed factory.
    - Time is entirely via the injected Clock; ``update()`` is called once per
      frame and drives both the session timer and the post-answer delay.
    - Finalize runs at most once per session and appends at most one summary.
    """

    def __init__(
        self,
        *,
        clock: Clock,
        store: SummaryStore | None = None,
        seed_factory: Callable[[], int],
        on_finalize: Callable[[SessionOutcome], None] | None = None,
        wall_clock_ms: Callable[[], int] = wall_time_ms,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
        profiles: dict[GameMode, ModeProfile] | None = None,
    ) -> None:
        self._clock = clock
        self._store = store
        self._seed_factory = seed_factory
        self._on_finalize = on_finalize
        self._wall_clock_ms = wall_clock_ms
        self._id_factory = id_factory
        self._profiles = profiles or MODE_PROFILES

        self._token = 0
        self._clear_session()

    # ----- read-only state -------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def mode(self) -> GameMode | None:
        return self._mode

    @property
    def time_limit_s(self) -> int | None:
        return self._time_limit_s

    @property
    def score(self) -> int:
        return self._score

    @property
    def mistakes(self) -> int:
        return self._mistakes

    @property
    def current_trial(self) -> object | None:
        return self._current

    @property
    def outcome(self) -> SessionOutcome | None:
        return self._outcome

    def events(self) -> list[TrialEvent]:
        return list(self._events)

    def accepting_input(self) -> bool:
        return self._phase is Phase.ACTIVE and self._stage is _Stage.AWAIT_ANSWER

    def can_stop(self) -> bool:
        return self._phase is Phase.ACTIVE and self._time_limit_s is None

    # ----- commands --------------------------------------------------------

    def start_session(self, mode: GameMode, time_limit_s: int | None) -> None:
        if not isinstance(mode, GameMode):
            raise ValueError(f"unsupported mode: {mode!r}")
        if time_limit_s not in TIME_LIMIT_CHOICES:
            raise ValueError(f"time_limit_s must be one of {TIME_LIMIT_CHOICES}")
        if self._phase is Phase.ACTIVE:
            return
        if self._phase is Phase.FINALIZED:
            self.reset()

        profile = self._profiles[mode]
        self._token += 1
        token = self._token

        self._seed = int(self._seed_factory())
        self._generator = profile.make_generator(SeededRng(self._seed))
        self._mode = mode
        self._time_limit_s = time_limit_s
        self._feedback_delay_s = float(profile.feedback_delay_s)
        self._score = 0
        self._mistakes = 0
        self._events = []
        self._timer = SessionTimer(
            clock=self._clock,
            limit_s=time_limit_s,
            on_end=lambda elapsed_s: self._on_timer_end(token, elapsed_s),
        )
        self._phase = Phase.ACTIVE
        self._timer.start()
        self._deal_new_trial()
        logger.info("Session started: mode=%s limit=%s seed=%d", mode.value, time_limit_s, self._seed)

    def submit_answer(self, answer: bool | int) -> AnswerFeedback | None:
        """Record an answer for the current trial.

        Returns None when no answer is being accepted (not ACTIVE, or inside
        the post-answer feedback delay). Raises ValueError when the answer
        has the wrong shape for the mode (bool for match, digit 1-5 for coding).
        """

        if self._phase is not Phase.ACTIVE:
            return None
        assert self._generator is not None
        if not self._generator.accepts_answer(answer):
            raise ValueError(f"answer {answer!r} is not valid in {self._mode} mode")
        # Deliver any due tick first so a late answer cannot outlive the timer.
        self._pump_timer()
        if not self.accepting_input():
            return None

        assert self._current is not None
        assert self._presented_at_s is not None

        answered_at_s = self._clock.now()
        correct = bool(self._generator.is_correct(self._current, answer))
        index = len(self._events)

        self._events.append(
            TrialEvent(
                index=index,
                mode=self._mode,  # type: ignore[arg-type]
                expected=self._expected_text(self._current),
                response=self._response_text(answer),
                is_correct=correct,
                presented_at_s=self._presented_at_s,
                answered_at_s=answered_at_s,
                response_time_s=max(0.0, answered_at_s - self._presented_at_s),
            )
        )
        if correct:
            self._score += 1
        else:
            self._mistakes += 1

        self._feedback = Feedback.CORRECT if correct else Feedback.INCORRECT
        self._stage = _Stage.FEEDBACK
        self._feedback_until_s = answered_at_s + self._feedback_delay_s
        return AnswerFeedback(correct=correct, trial_index=index)

    def stop_session(self) -> bool:
        """Stop an unbounded session. No-op for countdown sessions."""

        if not self.can_stop():
            return False
        # Count ticks that elapsed since the last frame before freezing the time.
        self._pump_timer()
        if not self.can_stop():
            return False
        assert self._timer is not None
        return self._timer.stop()

    def update(self) -> None:
        if self._phase is not Phase.ACTIVE:
            return
        self._pump_timer()
        if self._phase is not Phase.ACTIVE:
            return
        if self._stage is _Stage.FEEDBACK:
            assert self._feedback_until_s is not None
            if self._clock.now() >= self._feedback_until_s:
                self._deal_new_trial()

    def abandon(self) -> None:
        """Leave an active session without scoring it and return to IDLE."""

        if self._phase is Phase.ACTIVE:
            logger.info("Session abandoned after %d s", self._timer.elapsed_s if self._timer else 0)
        self.reset()

    def reset(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        # Invalidate callbacks still holding the previous session's token.
        self._token += 1
        self._clear_session()

    def finalize(self, elapsed_s: int) -> SessionOutcome | None:
        """End the active session. A second call is a no-op returning None."""

        if self._phase is not Phase.ACTIVE:
            return None
        assert self._mode is not None
        if self._timer is not None:
            self._timer.cancel()

        self._phase = Phase.FINALIZED
        self._stage = None
        self._feedback = None
        self._feedback_until_s = None
        self._elapsed_s = int(elapsed_s)

        mode = self._mode
        index = processing_speed_index(
            score=self._score,
            mistakes=self._mistakes,
            elapsed_s=self._elapsed_s,
            mode=mode,
        )
        measurable = is_measurable(self._elapsed_s)
        summary = self._persist(index) if measurable else None

        outcome = SessionOutcome(
            mode=mode,
            index=index,
            measurable=measurable,
            score=self._score,
            mistakes=self._mistakes,
            elapsed_s=self._elapsed_s,
            time_limit_s=self._time_limit_s,
            accuracy_pct=accuracy_pct(self._score, self._mistakes),
            mean_response_time_s=mean_response_time_s(self._events),
            summary=summary,
        )
        self._outcome = outcome
        logger.info(
            "Session finalized: mode=%s elapsed=%ds score=%d mistakes=%d index=%d",
            mode.value,
            self._elapsed_s,
            self._score,
            self._mistakes,
            index,
        )
        if self._on_finalize is not None:
            self._on_finalize(outcome)
        return outcome

    # ----- view model ------------------------------------------------------

    def displayed_time_s(self) -> int:
        if self._phase is Phase.FINALIZED:
            if self._time_limit_s is None:
                return self._elapsed_s
            return max(0, self._time_limit_s - self._elapsed_s)
        if self._timer is None:
            return 0
        return self._timer.displayed_s

    def snapshot(self) -> SessionSnapshot:
        title = "" if self._mode is None else self._profiles[self._mode].title
        return SessionSnapshot(
            title=title,
            phase=self._phase,
            mode=self._mode,
            time_limit_s=self._time_limit_s,
            displayed_time_s=self.displayed_time_s(),
            score=self._score,
            mistakes=self._mistakes,
            trial=self._current,
            feedback=self._feedback,
            accepting_input=self.accepting_input(),
        )

    # ----- internals -------------------------------------------------------

    def _clear_session(self) -> None:
        self._phase: Phase = Phase.IDLE
        self._mode: GameMode | None = None
        self._time_limit_s: int | None = None
        self._seed: int | None = None
        self._generator: RoundGenerator | None = None
        self._timer: SessionTimer | None = None
        self._feedback_delay_s = 0.0

        self._stage: _Stage | None = None
        self._current: object | None = None
        self._presented_at_s: float | None = None
        self._feedback: Feedback | None = None
        self._feedback_until_s: float | None = None

        self._score = 0
        self._mistakes = 0
        self._elapsed_s = 0
        self._events: list[TrialEvent] = []
        self._outcome: SessionOutcome | None = None

    def _pump_timer(self) -> None:
        if self._timer is not None:
            self._timer.update()

    def _on_timer_end(self, token: int, elapsed_s: int) -> None:
        if token != self._token:
            return
        self.finalize(elapsed_s)

    def _deal_new_trial(self) -> None:
        assert self._generator is not None
        self._current = self._generator.next_trial()
        self._presented_at_s = self._clock.now()
        self._stage = _Stage.AWAIT_ANSWER
        self._feedback = None
        self._feedback_until_s = None

    def _persist(self, index: int) -> SessionSummary | None:
        assert self._mode is not None
        summary = SessionSummary(
            summary_id=self._id_factory(),
            timestamp_ms=int(self._wall_clock_ms()),
            mode=self._mode,
            index=index,
            score=self._score,
            mistakes=self._mistakes,
            time_limit_s=self._time_limit_s,
            elapsed_s=self._elapsed_s,
        )
        if self._store is None:
            return summary
        try:
            self._store.append_summary(summary)
        except Exception:
            logger.exception("Could not save session summary %s", summary.summary_id)
            return None
        return summary

    @staticmethod
    def _response_text(answer: object) -> str:
        if isinstance(answer, bool):
            return "present" if answer else "absent"
        return str(answer)

    @staticmethod
    def _expected_text(trial: object) -> str:
        if isinstance(trial, SymbolSearchTrial):
            return "present" if trial.is_match else "absent"
        if isinstance(trial, CodingTrial):
            return str(trial.target_digit)
        return ""
