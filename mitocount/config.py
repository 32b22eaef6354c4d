from .errors import ConfigurationError

DEFAULT_OUT_DIR: str        = './mitocount_out'
DB_NAME: str                = 'stationary.sqlite'
COUNTS_CSV: str             = 'object_counts.csv'
SUMMARY_CSV: str            = 'interval_summary.csv'
DECISIONS_CSV: str          = 'stationary_decisions.csv'

# Input columns (1-based, as exported by CellProfiler: ImageNumber, AreaShape_Center_X)
IMAGE_NUM_COL: int          = 1
CENTER_X_COL: int           = 2

# Time intervals
KYMO_SIZE: int              = 450     # 450 images at 4 images/s = 30 min
DRUG_ADD: int               = 1       # 1 = no drug addition
MAX_INTERVALS: int          = 5
UNDERSIZE_ALLOWANCE: int    = 100

# Stationary window
WINDOW_FRACTION: float      = 0.01
HIGH_THRESHOLD: float       = 0.9
LOW_THRESHOLD: float        = 0.7
MULTIPLICITY_THRESHOLD: float = 0.5
GAP_THRESHOLD: int          = 30

# Kymograph colours
STATIONARY_COLOUR: str      = 'red'
MOVING_COLOUR: str          = 'blue'
HIGH_CANDIDATE_COLOUR: str  = 'magenta'
LOW_CANDIDATE_COLOUR: str   = 'orange'
TRACE_COLOUR: str           = 'black'

# Debug line
PRINT_SUMMARY: bool         = True
PRINT_DECISIONS: bool       = False


def _is_integer(value) -> bool:
    return not isinstance(value, bool) and float(value).is_integer()


def check_settings(kymo_size=None, drug_add=None, high_threshold=None,
                   low_threshold=None, multiplicity_threshold=None,
                   gap_threshold=None):
    kymo_size = KYMO_SIZE if kymo_size is None else kymo_size
    drug_add = DRUG_ADD if drug_add is None else drug_add
    high = HIGH_THRESHOLD if high_threshold is None else high_threshold
    low = LOW_THRESHOLD if low_threshold is None else low_threshold
    mult = MULTIPLICITY_THRESHOLD if multiplicity_threshold is None else multiplicity_threshold
    gap = GAP_THRESHOLD if gap_threshold is None else gap_threshold

    if not _is_integer(kymo_size) or kymo_size <= 0:
        raise ConfigurationError(f'kymo_size must be a positive integer, got {kymo_size!r}')
    if not _is_integer(drug_add) or drug_add < 1:
        raise ConfigurationError(f'drug_add must be a positive integer, got {drug_add!r}')
    if not 0.0 <= low <= high <= 1.0:
        raise ConfigurationError(
            f'thresholds must satisfy 0 <= low <= high <= 1, got low={low!r} high={high!r}'
        )
    if not 0.0 <= mult <= 1.0:
        raise ConfigurationError(f'multiplicity_threshold must lie in [0, 1], got {mult!r}')
    if not _is_integer(gap) or gap < 0:
        raise ConfigurationError(f'gap_threshold must be a non-negative integer, got {gap!r}')
    return int(kymo_size), int(drug_add), float(high), float(low), float(mult), int(gap)
