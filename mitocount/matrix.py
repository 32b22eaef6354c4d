import numpy as np
import pandas as pd

from .errors import DataError

SENTINEL = np.nan


class PositionMatrix:
    """Frame x slot matrix of object x-centres.

    Row ``f - 1`` holds the x-centres of frame ``f`` sorted ascending. The
    slot a value lands in depends only on the sort order within its frame,
    so a column is not an object identity across frames. Missing slots are
    NaN. The array is read-only once built.
    """

    def __init__(self, values: np.ndarray, counts: np.ndarray):
        values = np.array(values, dtype=float)
        values.flags.writeable = False
        counts = np.array(counts, dtype=float)
        counts.flags.writeable = False
        self.values = values
        self.counts = counts

    @property
    def n_frames(self) -> int:
        return self.values.shape[0]

    @property
    def n_slots(self) -> int:
        return self.values.shape[1]

    @property
    def max_x(self) -> float:
        return float(np.nanmax(self.values))

    @property
    def min_x(self) -> float:
        return float(np.nanmin(self.values))

    def _check_frame(self, frame: int):
        if not 1 <= frame <= self.n_frames:
            raise DataError(f'frame {frame} outside 1..{self.n_frames}')

    def row(self, frame: int) -> np.ndarray:
        self._check_frame(frame)
        return self.values[frame - 1]

    def rows(self, start: int, end: int) -> np.ndarray:
        """Rows for frames start..end inclusive (empty when end < start)."""
        if end < start:
            return self.values[0:0]
        self._check_frame(start)
        self._check_frame(end)
        return self.values[start - 1:end]

    def dropped_frames(self) -> np.ndarray:
        return np.flatnonzero(np.isnan(self.counts)) + 1

    def mean_count(self) -> float:
        if np.all(np.isnan(self.counts)):
            return float('nan')
        return float(np.nanmean(self.counts))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            'time_frame': np.arange(1, self.n_frames + 1),
            'n_objects': self.counts,
        })


def _as_observations(observations) -> pd.DataFrame:
    if isinstance(observations, pd.DataFrame):
        missing = {'frame', 'x'} - set(observations.columns)
        if missing:
            raise DataError(f'observations lack column(s): {sorted(missing)}')
        df = observations[['frame', 'x']].copy()
    else:
        try:
            df = pd.DataFrame(list(observations), columns=['frame', 'x'])
        except (TypeError, ValueError) as exc:
            raise DataError(f'observations must be (frame, x) pairs: {exc}') from exc
    if df.empty:
        raise DataError('no observations')
    try:
        df = df.apply(pd.to_numeric)
    except (TypeError, ValueError) as exc:
        raise DataError(f'non-numeric observation: {exc}') from exc
    return df


def build_position_matrix(observations, total_frames: int = None) -> PositionMatrix:
    df = _as_observations(observations)

    frames = df['frame'].to_numpy(dtype=float)
    xs = df['x'].to_numpy(dtype=float)
    if not np.all(np.isfinite(frames)) or np.any(frames != np.floor(frames)):
        raise DataError('frame indices must be integers')
    if np.any(frames < 1):
        raise DataError(f'frame indices must be positive, got min {frames.min():g}')
    if not np.all(np.isfinite(xs)):
        raise DataError('x coordinates must be finite numbers')
    if np.any(np.diff(frames) < 0):
        raise DataError('frame indices are not monotonically increasing')

    max_frame = int(frames.max())
    if total_frames is None:
        total_frames = max_frame
    elif max_frame > total_frames:
        raise DataError(f'frame {max_frame} exceeds total_frames={total_frames}')

    df = df.assign(frame=frames.astype(int)).sort_values(['frame', 'x'], kind='mergesort')
    df['slot'] = df.groupby('frame').cumcount()

    counts = (
        df.groupby('frame').size()
        .reindex(range(1, total_frames + 1))
        .to_numpy(dtype=float)
    )
    n_slots = int(np.nanmax(counts))

    values = np.full((total_frames, n_slots), SENTINEL)
    values[df['frame'].to_numpy() - 1, df['slot'].to_numpy()] = df['x'].to_numpy()

    # a zero beyond the first slot cannot be told apart from padding
    zero = values == 0
    zero[:, 0] = False
    values[zero] = SENTINEL

    return PositionMatrix(values, counts)
