from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple

from . import config
from .classifier import Classification, ReferenceAnchor, Tier
from .intervals import TimeInterval


class Status(Enum):
    STATIONARY = 1
    MOVING = 0


class Response(Enum):
    ACCEPT = 'accept'
    REJECT = 'reject'


class Provenance(Enum):
    AUTOMATIC_HIGH = 'automatic_high_confidence'
    AUTOMATIC_LOW = 'automatic_low_confidence'
    AUTOMATIC_DECISIVE = 'automatic_decisive'
    HUMAN_OVERRIDE = 'human_override'


_ACCEPT_WORDS = {'y', 'yes', '1', 'accept', 'a', 's', 'stationary'}
_REJECT_WORDS = {'n', 'no', '0', 'reject', 'r', 'm', 'moving'}


def coerce_response(value) -> Optional[Response]:
    """Map a provider's answer to a Response, or None when unrecognised."""
    if isinstance(value, Response):
        return value
    if isinstance(value, bool):
        return Response.ACCEPT if value else Response.REJECT
    if isinstance(value, (int, str)):
        word = str(value).strip().lower()
        if word in _ACCEPT_WORDS:
            return Response.ACCEPT
        if word in _REJECT_WORDS:
            return Response.REJECT
    return None


@dataclass(frozen=True)
class DecisionEvent:
    anchor: ReferenceAnchor
    stage: str              # 'candidate' or 'final'
    colour: str
    points: Tuple[Tuple[int, float], ...]


@dataclass(frozen=True)
class Decision:
    classification: Classification
    status: Status
    provenance: Provenance

    @property
    def anchor(self) -> ReferenceAnchor:
        return self.classification.anchor

    @property
    def flags(self):
        return self.classification.flags


@dataclass(frozen=True)
class IntervalResult:
    interval: TimeInterval
    decisions: Tuple[Decision, ...]

    @property
    def reference_count(self) -> int:
        return len(self.decisions)

    @property
    def stationary_count(self) -> int:
        return sum(1 for d in self.decisions if d.status is Status.STATIONARY)

    @property
    def stationary_fraction(self) -> float:
        if not self.decisions:
            return float('nan')
        return self.stationary_count / self.reference_count


@dataclass(frozen=True)
class RunResults:
    """Completed intervals of one run, ordered by interval index."""
    results: Tuple[IntervalResult, ...] = ()

    def with_result(self, result: IntervalResult) -> 'RunResults':
        kept = [r for r in self.results if r.interval.index != result.interval.index]
        kept.append(result)
        return RunResults(tuple(sorted(kept, key=lambda r: r.interval.index)))

    def get(self, index: int) -> Optional[IntervalResult]:
        for r in self.results:
            if r.interval.index == index:
                return r
        return None

    def __len__(self):
        return len(self.results)

    def __iter__(self):
        return iter(self.results)


def _emit(presenter, anchor, stage, colour, points):
    if presenter is not None:
        presenter(DecisionEvent(anchor, stage, colour, points))


def decide(classification: Classification, provider,
           presenter: Callable[[DecisionEvent], None] = None) -> Decision:
    """Finalise one object.

    High-confidence candidates stay stationary unless the provider
    explicitly rejects them; low-confidence candidates become moving unless
    explicitly accepted. Decisive objects are moving without a prompt.
    ``ConfirmationAbort`` raised by the provider propagates.
    """
    c = classification
    if c.tier is Tier.DECISIVE:
        decision = Decision(c, Status.MOVING, Provenance.AUTOMATIC_DECISIVE)
    else:
        high = c.tier is Tier.HIGH_CONFIDENCE
        colour = config.HIGH_CANDIDATE_COLOUR if high else config.LOW_CANDIDATE_COLOUR
        _emit(presenter, c.anchor, 'candidate', colour, c.points)

        answer = coerce_response(provider.confirm(c.anchor, c.tier, c.flags, c.points))
        if high:
            if answer is Response.REJECT:
                decision = Decision(c, Status.MOVING, Provenance.HUMAN_OVERRIDE)
            else:
                decision = Decision(c, Status.STATIONARY, Provenance.AUTOMATIC_HIGH)
        else:
            if answer is Response.ACCEPT:
                decision = Decision(c, Status.STATIONARY, Provenance.AUTOMATIC_LOW)
            elif answer is Response.REJECT:
                decision = Decision(c, Status.MOVING, Provenance.HUMAN_OVERRIDE)
            else:
                decision = Decision(c, Status.MOVING, Provenance.AUTOMATIC_LOW)

    colour = (config.STATIONARY_COLOUR if decision.status is Status.STATIONARY
              else config.MOVING_COLOUR)
    _emit(presenter, c.anchor, 'final', colour, c.points)
    if config.PRINT_DECISIONS:
        flags = ','.join(sorted(f.value for f in c.flags)) or '-'
        print(f"[Interval {c.anchor.interval}] x={c.anchor.position:.1f} "
              f"frac={c.fraction:.3f} tier={c.tier.value} flags={flags} "
              f"-> {decision.status.name.lower()} ({decision.provenance.value})")
    return decision


def arbitrate_interval(classifications: Iterable[Classification],
                       interval: TimeInterval,
                       provider,
                       presenter: Callable[[DecisionEvent], None] = None) -> IntervalResult:
    decisions = tuple(decide(c, provider, presenter) for c in classifications)
    return IntervalResult(interval, decisions)
