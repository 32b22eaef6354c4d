from typing import List, Optional, Sequence

from .classifier import Tier
from .errors import ConfirmationAbort

_TIER_TEXT = {
    Tier.HIGH_CONFIDENCE: 'STATIONARY (high confidence) - Enter keeps it stationary, n = moving',
    Tier.LOW_CONFIDENCE: 'POSSIBLY STATIONARY (borderline) - y = stationary, Enter keeps it moving',
}


class ConsoleConfirmation:
    """Asks the operator at the terminal, one object at a time."""

    def __init__(self, input_fn=input):
        self.input_fn = input_fn

    def confirm(self, anchor, tier, flags, points):
        print(f"\nInterval {anchor.interval}: object at x = {anchor.position:.2f} "
              f"({len(points)} in-window points)")
        for flag in sorted(flags, key=lambda f: f.value):
            print(f"  [WARN] {flag.value.replace('_', ' ')}")
        try:
            return self.input_fn(f"  {_TIER_TEXT[tier]}: ")
        except EOFError:
            return None
        except KeyboardInterrupt as exc:
            raise ConfirmationAbort(f'aborted at interval {anchor.interval}') from exc


class ScriptedConfirmation:
    """Replays canned answers; ``abort_after`` raises ConfirmationAbort on that prompt count."""

    def __init__(self, responses: Sequence = (), abort_after: Optional[int] = None, default=None):
        self.responses = list(responses)
        self.abort_after = abort_after
        self.default = default
        self.prompts: List[tuple] = []

    def confirm(self, anchor, tier, flags, points):
        if self.abort_after is not None and len(self.prompts) >= self.abort_after:
            raise ConfirmationAbort(f'scripted abort after {self.abort_after} prompt(s)')
        self.prompts.append((anchor, tier, frozenset(flags)))
        if self.responses:
            return self.responses.pop(0)
        return self.default


class DefaultConfirmation(ScriptedConfirmation):
    """Never answers, so every candidate falls back to its default."""

    def __init__(self):
        super().__init__()
