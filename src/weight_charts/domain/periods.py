"""Chart time periods."""

from enum import Enum


class TimePeriod(str, Enum):
    """Selectable chart period."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    TOTAL = "total"

    @property
    def display_name(self) -> str:
        """Compact label for the period picker."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    TimePeriod.WEEK: "1W",
    TimePeriod.MONTH: "1M",
    TimePeriod.YEAR: "1Y",
    TimePeriod.TOTAL: "All",
}
