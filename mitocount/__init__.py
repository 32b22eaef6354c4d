from .intervals import TimeInterval, define_intervals
from .matrix import PositionMatrix, build_position_matrix
from .classifier import Classification, Flag, ReferenceAnchor, Tier, classify_interval
from .arbiter import Decision, IntervalResult, Provenance, Response, RunResults, Status, arbitrate_interval
from .confirmation import ConsoleConfirmation, DefaultConfirmation, ScriptedConfirmation
from .errors import ConfigurationError, ConfirmationAbort, DataError, IncompleteIntervalWarning

__all__ = [
    "TimeInterval", "define_intervals",
    "PositionMatrix", "build_position_matrix",
    "Classification", "Flag", "ReferenceAnchor", "Tier", "classify_interval",
    "Decision", "IntervalResult", "Provenance", "Response", "RunResults", "Status",
    "arbitrate_interval",
    "ConsoleConfirmation", "DefaultConfirmation", "ScriptedConfirmation",
    "ConfigurationError", "ConfirmationAbort", "DataError", "IncompleteIntervalWarning",
]
