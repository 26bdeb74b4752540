# storefront/utils/schedule.py
"""
Harmonogramy jako zwykle obiekty: next_after(now) liczy nastepny slot,
zegar zawsze wstrzykiwany z zewnatrz (testy podaja staly czas).
"""
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _zone(tz: str | tzinfo) -> tzinfo:
    return ZoneInfo(tz) if isinstance(tz, str) else tz


class IntervalSchedule:
    """Every `hours` hours, slots aligned to local midnight (cron `0 */N * * *`)."""

    def __init__(self, hours: int, tz: str | tzinfo = "UTC"):
        if not 1 <= hours <= 24:
            raise ValueError("hours must be between 1 and 24")
        self.hours = hours
        self.tz = _zone(tz)

    @property
    def expression(self) -> str:
        if self.hours == 24:
            return "0 0 * * *"
        return f"0 */{self.hours} * * *"

    def next_after(self, now: datetime) -> datetime:
        local = now.astimezone(self.tz)
        midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
        step = timedelta(hours=self.hours)

        slot = (local - midnight) // step + 1
        candidate = midnight + slot * step

        # cron zaczyna od nowa o polnocy
        next_midnight = midnight + timedelta(days=1)
        if candidate.date() != midnight.date():
            return next_midnight
        return candidate


class WeeklySchedule:
    """Once a week at `hour`:00 local time. weekday: 0 = Monday ... 6 = Sunday."""

    def __init__(self, weekday: int, hour: int, tz: str | tzinfo = "UTC"):
        self.weekday = weekday
        self.hour = hour
        self.tz = _zone(tz)

    @property
    def expression(self) -> str:
        return f"0 {self.hour} * * {(self.weekday + 1) % 7}"

    def next_after(self, now: datetime) -> datetime:
        local = now.astimezone(self.tz)
        candidate = local.replace(hour=self.hour, minute=0, second=0, microsecond=0)
        candidate += timedelta(days=(self.weekday - local.weekday()) % 7)
        if candidate <= local:
            candidate += timedelta(days=7)
        return candidate
