from typing import NamedTuple


def normalize_name(text: str) -> str:
    """
    Canonical lookup key for a typed substance or route name:
    surrounding whitespace dropped, inner runs collapsed, upper-cased.
    """
    return " ".join(text.split()).upper()


class HoursBreakdown(NamedTuple):
    total_seconds: int
    days: int
    hours: int          # remainder after whole days
    minutes: int
    seconds: int

    @property
    def whole_hours(self) -> int:
        return self.total_seconds // 3600


def split_hours(hours: float) -> HoursBreakdown:
    """
    Break a duration in hours into whole seconds / days / hours / minutes / seconds.
    Fractions of a second are truncated.
    """
    total = int(hours * 3600.0)
    whole_hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    days, hours_rem = divmod(whole_hours, 24)
    return HoursBreakdown(total, days, hours_rem, minutes, seconds)
