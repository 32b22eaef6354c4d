class MitoCountError(Exception):
    """Base class for every error raised by mitocount."""


class ConfigurationError(MitoCountError, ValueError):
    """Invalid window size, onset frame or threshold. Raised before any processing."""


class DataError(MitoCountError, ValueError):
    """Malformed, out of range or non-monotonic observations."""


class ConfirmationAbort(MitoCountError):
    """The operator aborted the run at a confirmation prompt."""


class IncompleteIntervalWarning(UserWarning):
    """Not enough frames left for another interval; returned, never raised."""

    def __init__(self, n_intervals: int, first_uncovered: int, total_frames: int):
        self.n_intervals = n_intervals
        self.first_uncovered = first_uncovered
        self.total_frames = total_frames
        super().__init__(
            f'only {n_intervals} time interval(s): frames '
            f'{first_uncovered}-{total_frames} are too few for another interval'
        )
