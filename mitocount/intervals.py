from dataclasses import dataclass
from typing import Optional, Tuple

from . import config
from .errors import ConfigurationError, IncompleteIntervalWarning


@dataclass(frozen=True)
class TimeInterval:
    index: int      # 1 = baseline
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def frames(self) -> range:
        return range(self.start, self.end + 1)


@dataclass(frozen=True)
class Segmentation:
    intervals: Tuple[TimeInterval, ...]
    incomplete: Optional[IncompleteIntervalWarning] = None

    def __len__(self):
        return len(self.intervals)

    def __iter__(self):
        return iter(self.intervals)

    def get(self, index: int) -> TimeInterval:
        for interval in self.intervals:
            if interval.index == index:
                return interval
        raise ConfigurationError(
            f'time interval {index} does not exist (have {len(self.intervals)})'
        )


def define_intervals(total_frames: int, kymo_size: int = None, drug_add: int = None) -> Segmentation:
    """Split frames 1..total_frames into at most MAX_INTERVALS contiguous intervals.

    The first interval ends at the drug addition frame (or is the only one
    when ``drug_add == 1``); the rest are ``kymo_size`` long, except for a
    final undersized interval which is kept when at least
    ``kymo_size - UNDERSIZE_ALLOWANCE`` frames remain.
    """
    kymo_size = config.KYMO_SIZE if kymo_size is None else kymo_size
    drug_add = config.DRUG_ADD if drug_add is None else drug_add
    kymo_size, drug_add, *_ = config.check_settings(kymo_size=kymo_size, drug_add=drug_add)
    if isinstance(total_frames, bool) or int(total_frames) != total_frames or total_frames < 1:
        raise ConfigurationError(f'total_frames must be a positive integer, got {total_frames!r}')
    total_frames = int(total_frames)
    if drug_add > total_frames:
        raise ConfigurationError(
            f'drug_add={drug_add} lies beyond the last image ({total_frames})'
        )

    if drug_add == 1:
        # no drug addition: a single interval, clipped to the data
        only = TimeInterval(1, 1, min(kymo_size, total_frames))
        return Segmentation((only,))

    if drug_add < kymo_size:
        first = TimeInterval(1, 1, drug_add)
    else:
        first = TimeInterval(1, drug_add - kymo_size + 1, drug_add)

    intervals = [first]
    incomplete = None
    while len(intervals) < config.MAX_INTERVALS:
        prev_end = intervals[-1].end
        if prev_end + kymo_size <= total_frames:
            intervals.append(TimeInterval(len(intervals) + 1, prev_end + 1, prev_end + kymo_size))
        elif prev_end + (kymo_size - config.UNDERSIZE_ALLOWANCE) <= total_frames and prev_end < total_frames:
            intervals.append(TimeInterval(len(intervals) + 1, prev_end + 1, total_frames))
            break
        else:
            if prev_end < total_frames:
                incomplete = IncompleteIntervalWarning(len(intervals), prev_end + 1, total_frames)
            break

    return Segmentation(tuple(intervals), incomplete)
