from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Tuple

import numpy as np
from scipy import ndimage

from . import config
from .intervals import TimeInterval
from .matrix import PositionMatrix


class Tier(Enum):
    HIGH_CONFIDENCE = 'high'
    LOW_CONFIDENCE = 'low'
    DECISIVE = 'decisive'


class Flag(Enum):
    ADJACENT = 'adjacent_object_proximity'
    MULTIPLICITY = 'high_multiplicity'
    LONG_GAP = 'long_gap'


@dataclass(frozen=True)
class ReferenceAnchor:
    """Position of an object in the first frame of an interval.

    Carries no identity beyond the interval it was taken from: the slot is
    only the object's rank by x in that one frame.
    """
    interval: int
    slot: int
    position: float


@dataclass(frozen=True)
class Classification:
    anchor: ReferenceAnchor
    window: Tuple[float, float]
    occupancy: np.ndarray = field(repr=False, compare=False)
    recorded: np.ndarray = field(repr=False, compare=False)
    fraction: float
    multiplicity: int
    longest_gap: int
    tier: Tier
    flags: FrozenSet[Flag]
    points: Tuple[Tuple[int, float], ...] = field(repr=False)

    @property
    def needs_confirmation(self) -> bool:
        return self.tier is not Tier.DECISIVE


def window_half_width(matrix: PositionMatrix) -> float:
    return config.WINDOW_FRACTION * matrix.max_x


def longest_false_run(occupied: np.ndarray) -> int:
    labels, n_runs = ndimage.label(~occupied)
    if n_runs == 0:
        return 0
    return int(np.bincount(labels.ravel())[1:].max())


def assign_tier(fraction: float, high_threshold: float, low_threshold: float) -> Tier:
    # first matching tier wins; both comparisons are strict
    if fraction > high_threshold:
        return Tier.HIGH_CONFIDENCE
    if fraction > low_threshold:
        return Tier.LOW_CONFIDENCE
    return Tier.DECISIVE


def adjacent_slots(anchors: np.ndarray, half_width: float) -> np.ndarray:
    """True for anchors closer than one window width to an immediate neighbour."""
    flagged = np.zeros(anchors.shape, dtype=bool)
    if anchors.size < 2:
        return flagged
    order = np.argsort(anchors, kind='mergesort')
    close = np.diff(anchors[order]) < 2 * half_width
    flagged[order[:-1]] |= close
    flagged[order[1:]] |= close
    return flagged


def classify_interval(matrix: PositionMatrix,
                      interval: TimeInterval,
                      half_width: float = None,
                      high_threshold: float = None,
                      low_threshold: float = None,
                      multiplicity_threshold: float = None,
                      gap_threshold: int = None) -> List[Classification]:
    """Classify every object present in the first frame of ``interval``.

    Each object defines an open window ``(x0 - half_width, x0 + half_width)``.
    A later frame is occupied when any object in it lies inside the window.
    The occupancy fraction over the frames after the first decides the tier;
    frames with no detections at all count neither as present nor absent.
    Warning flags are only computed for objects above ``low_threshold``.
    """
    _, _, high, low, mult, gap = config.check_settings(
        high_threshold=high_threshold,
        low_threshold=low_threshold,
        multiplicity_threshold=multiplicity_threshold,
        gap_threshold=gap_threshold,
    )
    if half_width is None:
        half_width = window_half_width(matrix)

    first = matrix.row(interval.start)
    slots = np.flatnonzero(~np.isnan(first))
    anchors = first[slots]
    if anchors.size == 0:
        return []

    later = matrix.rows(interval.start + 1, interval.end)
    # dropped frames carry no evidence either way
    recorded = ~np.isnan(matrix.counts[interval.start:interval.end])
    n_eval = int(recorded.sum())
    kept = np.concatenate([[True], recorded])
    lo = anchors - half_width
    hi = anchors + half_width

    # (anchor, frame, slot); NaN compares False so padding never counts
    with np.errstate(invalid='ignore'):
        inside = (later[None, :, :] > lo[:, None, None]) & (later[None, :, :] < hi[:, None, None])
        inside_first = (first[None, :] > lo[:, None]) & (first[None, :] < hi[:, None])
    hits = inside.sum(axis=2)
    occupied = np.concatenate([np.ones((anchors.size, 1), dtype=bool), hits > 0], axis=1)
    multiplicity = (hits > 1).sum(axis=1)
    adjacent = adjacent_slots(anchors, half_width)

    results = []
    for r, (slot, x0) in enumerate(zip(slots, anchors)):
        fraction = float(occupied[r, 1:][recorded].sum() / n_eval) if n_eval else 0.0
        tier = assign_tier(fraction, high, low)
        gap_len = longest_false_run(occupied[r][kept])

        flags = set()
        if fraction > low:
            if adjacent[r]:
                flags.add(Flag.ADJACENT)
            if multiplicity[r] > mult * n_eval:
                flags.add(Flag.MULTIPLICITY)
            if gap_len > gap:
                flags.add(Flag.LONG_GAP)

        points = [(interval.start, float(v)) for v in first[inside_first[r]]]
        f_idx, s_idx = np.nonzero(inside[r])
        points.extend(
            (interval.start + 1 + int(f), float(later[f, s]))
            for f, s in zip(f_idx, s_idx)
        )

        results.append(Classification(
            anchor=ReferenceAnchor(interval.index, int(slot), float(x0)),
            window=(float(lo[r]), float(hi[r])),
            occupancy=occupied[r].copy(),
            recorded=kept,
            fraction=fraction,
            multiplicity=int(multiplicity[r]),
            longest_gap=gap_len,
            tier=tier,
            flags=frozenset(flags),
            points=tuple(points),
        ))
    return results
