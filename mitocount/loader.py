from pathlib import Path
from typing import Union

import pandas as pd

from . import config
from .errors import DataError


def _pick_column(df: pd.DataFrame, col: Union[int, str]) -> pd.Series:
    if isinstance(col, str) and not col.isdigit():
        if col not in df.columns:
            raise DataError(f'column {col!r} not found; have {list(df.columns)}')
        return df[col]
    pos = int(col)
    if not 1 <= pos <= df.shape[1]:
        raise DataError(f'column {pos} out of range (file has {df.shape[1]} columns)')
    return df.iloc[:, pos - 1]


def read_observations(csv_path: Union[str, Path],
                      image_num_col: Union[int, str] = None,
                      center_x_col: Union[int, str] = None) -> pd.DataFrame:
    """Read (image number, x-centre) pairs from a CellProfiler export.

    Columns are given 1-based or by name. The result is sorted by frame and
    then by x, with columns ``frame`` and ``x``.
    """
    image_num_col = config.IMAGE_NUM_COL if image_num_col is None else image_num_col
    center_x_col = config.CENTER_X_COL if center_x_col is None else center_x_col

    path = Path(csv_path)
    if not path.is_file():
        raise DataError(f'no such file: {path}')
    raw = pd.read_csv(path)
    if raw.empty:
        raise DataError(f'{path.name} has no data rows')

    df = pd.DataFrame({
        'frame': pd.to_numeric(_pick_column(raw, image_num_col), errors='coerce'),
        'x': pd.to_numeric(_pick_column(raw, center_x_col), errors='coerce'),
    })
    bad = df.isna().any(axis=1)
    if bad.any():
        first = int(bad.to_numpy().nonzero()[0][0]) + 2   # header is line 1
        raise DataError(f'{bad.sum()} malformed row(s) in {path.name}, first at line {first}')

    return df.sort_values(['frame', 'x'], kind='mergesort').reset_index(drop=True)
