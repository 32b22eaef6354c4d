import os
from pathlib import Path

from tqdm import tqdm

from . import config
from .arbiter import RunResults, arbitrate_interval
from .classifier import classify_interval, window_half_width
from .confirmation import ConsoleConfirmation
from .database import init_db, clear_dataset, save_interval, read_intervals, read_decisions, close_db
from .errors import ConfirmationAbort
from .intervals import define_intervals
from .loader import read_observations
from .matrix import build_position_matrix
from .visualization import KymographRecorder, plot_kymograph


def print_summary(dataset, matrix, segmentation):
    print('###############################')
    print(f'Filename: {dataset}')
    print(f'Number of images: {matrix.n_frames}')
    dropped = matrix.dropped_frames()
    if dropped.size:
        print(f'Images without objects (dropped/out of focus): {dropped.size}')
    print(f'Split into {len(segmentation)} time intervals ({config.KYMO_SIZE} images in each interval)')
    for iv in segmentation:
        print(f'  interval {iv.index}: images {iv.start}-{iv.end}')
    print(f'Average # objects at each timepoint: {matrix.mean_count():0.2f}')
    print('###############################')


def run_pipeline(csv_path, out_dir=None, provider=None, redo_interval=None, plot=True) -> RunResults:
    """Classify stationary objects interval by interval and save each interval as it completes.

    An operator abort stops the run; intervals saved before it are kept and
    the interrupted interval is dropped. ``redo_interval`` reruns a single
    interval and overwrites only its saved rows; a full run replaces
    everything saved earlier for the dataset.
    """
    config.check_settings()
    csv_path = Path(csv_path)
    dataset = csv_path.stem
    out_dir = Path(out_dir or config.DEFAULT_OUT_DIR)
    provider = provider or ConsoleConfirmation()

    obs = read_observations(csv_path)
    matrix = build_position_matrix(obs)
    segmentation = define_intervals(matrix.n_frames)
    todo = list(segmentation)
    if redo_interval is not None:
        todo = [segmentation.get(redo_interval)]

    os.makedirs(out_dir, exist_ok=True)
    if segmentation.incomplete is not None:
        print(f'[WARN] {segmentation.incomplete}')
    if config.PRINT_SUMMARY:
        print_summary(dataset, matrix, segmentation)
    matrix.to_frame().to_csv(out_dir / config.COUNTS_CSV, index=False)

    half_width = window_half_width(matrix)
    recorder = KymographRecorder()
    results = RunResults()
    conn = init_db(out_dir / config.DB_NAME)
    try:
        if redo_interval is None:
            clear_dataset(conn, dataset)
        interactive = isinstance(provider, ConsoleConfirmation)
        for interval in tqdm(todo, desc='Intervals', ncols=120, disable=interactive):
            recorder.clear()
            classes = classify_interval(matrix, interval, half_width=half_width)
            try:
                result = arbitrate_interval(classes, interval, provider, presenter=recorder)
            except ConfirmationAbort as exc:
                print(f'[WARN] {exc}; interval {interval.index} discarded, '
                      f'{len(results)} interval(s) kept')
                break

            save_interval(conn, dataset, result)
            results = results.with_result(result)
            if config.PRINT_SUMMARY:
                shown = sum(1 for e in recorder.events if e.stage == 'candidate')
                print(f'[Interval {interval.index}] {result.stationary_count}/'
                      f'{result.reference_count} stationary ({shown} candidate(s) reviewed)')
            if plot:
                plot_kymograph(matrix, interval, result,
                               out_path=str(out_dir / f'kymograph_{dataset}_{interval.index}.png'))

        summary = read_intervals(conn, dataset)
        decisions = read_decisions(conn, dataset)
    finally:
        close_db(conn)

    summary.to_csv(out_dir / config.SUMMARY_CSV, index=False)
    decisions.to_csv(out_dir / config.DECISIONS_CSV, index=False)
    print(f'Done. Results in {out_dir}')
    return results

