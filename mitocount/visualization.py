import os
from typing import List

import numpy as np
import matplotlib.pyplot as plt

from . import config
from .arbiter import DecisionEvent, IntervalResult, Status
from .intervals import TimeInterval
from .matrix import PositionMatrix


class KymographRecorder:
    """Collects arbiter events; the latest colour per anchor wins."""

    def __init__(self):
        self.events: List[DecisionEvent] = []

    def __call__(self, event: DecisionEvent):
        self.events.append(event)

    def final_colours(self):
        return {e.anchor: e.colour for e in self.events if e.stage == 'final'}

    def clear(self):
        self.events.clear()


def plot_kymograph(matrix: PositionMatrix, interval: TimeInterval,
                   result: IntervalResult = None, out_path: str = None,
                   title: str = None):
    # y axis runs from the interval length down to 0 so time goes top to bottom
    block = matrix.rows(interval.start, interval.end)
    n = block.shape[0]
    y = np.repeat((n - 1 - np.arange(n))[:, None], block.shape[1], axis=1)

    fig = plt.figure(figsize=(12, 6))
    plt.scatter(block.ravel(), y.ravel(), s=1, color=config.TRACE_COLOUR, edgecolors='none')

    if result is not None:
        for d in result.decisions:
            if d.status is Status.STATIONARY and d.classification.points:
                pts = np.array(d.classification.points, dtype=float)
                plt.scatter(pts[:, 1], n - 1 - (pts[:, 0] - interval.start),
                            s=2, color=config.STATIONARY_COLOUR, edgecolors='none')
        for status, colour in ((Status.MOVING, config.MOVING_COLOUR),
                               (Status.STATIONARY, config.STATIONARY_COLOUR)):
            xs = [d.anchor.position for d in result.decisions if d.status is status]
            plt.scatter(xs, [n - 1] * len(xs), s=100, marker='D',
                        color=colour, edgecolors='k', zorder=3,
                        label=status.name.title())
        plt.legend(loc='lower right', fontsize=10)

    plt.xlim(0, matrix.max_x)
    plt.xlabel('X coordinates', fontsize=14)
    plt.ylabel('Inverted image number (time goes from top to bottom)', fontsize=14)
    plt.title(title or f'Interval {interval.index} (images {interval.start}-{interval.end})')
    plt.tight_layout()
    if out_path:
        os.makedirs(os.path.dirname(os.path.abspath(out_path)), exist_ok=True)
        plt.savefig(out_path, dpi=300)
        plt.close(fig)
        return None
    return fig
