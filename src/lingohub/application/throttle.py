"""Daily throttle for remote update checks."""

from datetime import datetime, timedelta
from typing import Optional

from lingohub.domain.protocols import PreferencesStore
from lingohub.infrastructure.state import LAST_CHECK_KEY
from lingohub.logger import get_logger
from lingohub.utils import as_utc, utc_now

logger = get_logger(__name__)

DEFAULT_INTERVAL = timedelta(hours=24)


class UpdateThrottle:
    """Allows one remote check per interval, based on a persisted timestamp."""

    def __init__(self, preferences: PreferencesStore, interval: timedelta = DEFAULT_INTERVAL) -> None:
        self._preferences = preferences
        self.interval = interval

    def last_check(self) -> Optional[datetime]:
        raw = self._preferences.get(LAST_CHECK_KEY)
        if not raw:
            return None
        try:
            return as_utc(datetime.fromisoformat(raw))
        except ValueError:
            logger.warning(f"Ignoring unreadable last check time: {raw!r}")
            return None

    def should_check(self, now: Optional[datetime] = None) -> bool:
        last = self.last_check()
        if last is None:
            return True
        return as_utc(now or utc_now()) - last >= self.interval

    def record_check(self, now: Optional[datetime] = None) -> None:
        self._preferences.set(LAST_CHECK_KEY, as_utc(now or utc_now()).isoformat())

    def reset(self) -> None:
        self._preferences.remove(LAST_CHECK_KEY)
