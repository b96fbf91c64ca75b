"""Tests for the daily update check throttle."""

from datetime import datetime, timedelta, timezone

from lingohub.application import UpdateThrottle
from lingohub.infrastructure.state import LAST_CHECK_KEY, InMemoryPreferences

NOW = datetime(2025, 3, 13, 12, 0, tzinfo=timezone.utc)


class TestUpdateThrottle:
    """Test throttle decisions."""

    def test_first_check_allowed(self):
        """Test a check is due when none was recorded."""
        assert UpdateThrottle(InMemoryPreferences()).should_check(NOW)

    def test_recent_check_blocks(self):
        """Test a check within the interval is not due."""
        throttle = UpdateThrottle(InMemoryPreferences())
        throttle.record_check(NOW)

        assert throttle.last_check() == NOW
        assert not throttle.should_check(NOW + timedelta(hours=23, minutes=59))
        assert throttle.should_check(NOW + timedelta(hours=24))

    def test_custom_interval(self):
        """Test the interval is configurable."""
        throttle = UpdateThrottle(InMemoryPreferences(), interval=timedelta(minutes=5))
        throttle.record_check(NOW)

        assert throttle.should_check(NOW + timedelta(minutes=5))

    def test_unreadable_timestamp_ignored(self):
        """Test a garbage timestamp does not block checks."""
        throttle = UpdateThrottle(InMemoryPreferences({LAST_CHECK_KEY: "yesterday"}))

        assert throttle.last_check() is None
        assert throttle.should_check(NOW)

    def test_reset(self):
        """Test reset makes the next check due."""
        prefs = InMemoryPreferences()
        throttle = UpdateThrottle(prefs)
        throttle.record_check(NOW)
        throttle.reset()

        assert prefs.get(LAST_CHECK_KEY) is None
        assert throttle.should_check(NOW)

    def test_naive_times_treated_as_utc(self):
        """Test naive timestamps, passed in or stored, compare against aware ones."""
        naive_now = NOW.replace(tzinfo=None)
        throttle = UpdateThrottle(InMemoryPreferences({LAST_CHECK_KEY: naive_now.isoformat()}))

        assert throttle.last_check() == NOW
        assert not throttle.should_check(naive_now + timedelta(hours=1))
        assert throttle.should_check(NOW + timedelta(hours=24))

        throttle.record_check(naive_now)
        assert throttle.last_check() == NOW

    def test_other_offsets_normalized(self):
        """Test a time in another zone is compared as the same instant."""
        throttle = UpdateThrottle(InMemoryPreferences())
        throttle.record_check(NOW)
        berlin = timezone(timedelta(hours=1))

        assert not throttle.should_check(datetime(2025, 3, 14, 12, 59, tzinfo=berlin))
        assert throttle.should_check(datetime(2025, 3, 14, 13, 0, tzinfo=berlin))
