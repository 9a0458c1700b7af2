# switchboard/core/cooldowns.py
"""Per-subject, per-user cooldown tracking.

Subject keys are command names, or ``"component:" + component_id`` for UI
callbacks. Entries are created lazily and never pruned; an expired entry is
treated as absent and overwritten by the next apply().
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

COMPONENT_KEY_PREFIX = "component:"


def component_key(component_id: str) -> str:
    """Build the ledger subject key for a component id."""
    return f"{COMPONENT_KEY_PREFIX}{component_id}"


@dataclass(frozen=True)
class CooldownResult:
    """Result of CooldownLedger.apply().

    Attributes:
        active: True if the user was already on cooldown.
        remaining: Whole seconds left when active, otherwise 0.
    """

    active: bool
    remaining: int = 0


class CooldownLedger:
    """Tracks cooldown expiry instants keyed by subject and user.

    check_remaining() and apply() never await, so under a cooperative
    scheduler the check-then-set in apply() cannot interleave with another
    invocation.

    Attributes:
        clock: Callable returning the current time in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._expiries: dict[str, dict[str, float]] = {}

    def check_remaining(self, subject_key: str, user_id: str) -> int:
        """Get the remaining cooldown in whole seconds.

        Args:
            subject_key: Command name or component key.
            user_id: Invoking user.

        Returns:
            0 if there is no active cooldown, otherwise the remaining
            seconds rounded up.
        """
        expiry = self._expiries.get(subject_key, {}).get(user_id)
        if expiry is None:
            return 0

        remaining = expiry - self.clock()
        return math.ceil(remaining) if remaining > 0 else 0

    def apply(self, subject_key: str, user_id: str, seconds: float) -> CooldownResult:
        """Check the cooldown and start a new one if none is active.

        Args:
            subject_key: Command name or component key.
            user_id: Invoking user.
            seconds: Cooldown length to record when none is active.

        Returns:
            CooldownResult(active=True, remaining=n) without touching the
            ledger if a cooldown is running, otherwise CooldownResult(False)
            after recording a new expiry.
        """
        remaining = self.check_remaining(subject_key, user_id)
        if remaining > 0:
            return CooldownResult(active=True, remaining=remaining)

        self._expiries.setdefault(subject_key, {})[user_id] = self.clock() + seconds
        logger.debug("Cooldown started for %s/%s (%ss)", subject_key, user_id, seconds)
        return CooldownResult(active=False)

