from __future__ import annotations

from datetime import timedelta, timezone, tzinfo
from enum import StrEnum


class StreakMode(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str | None) -> StreakMode:
        try:
            return cls(value)
        except ValueError:
            return cls.MONTHLY


class Theme(StrEnum):
    DARK = "dark"
    LIGHT = "light"

    @classmethod
    def parse(cls, value: str | None) -> Theme:
        try:
            return cls(value)
        except ValueError:
            return cls.DARK


_TIMEZONE_OFFSETS = {
    "IST": timedelta(hours=5, minutes=30),
    "PST": timedelta(hours=-8),
    "EST": timedelta(hours=-5),
    "GMT": timedelta(0),
    "JST": timedelta(hours=9),
}


class Timezone(StrEnum):
    """Fixed-offset zones offered in settings. No DST handling."""

    IST = "IST"
    PST = "PST"
    EST = "EST"
    GMT = "GMT"
    JST = "JST"

    @property
    def offset(self) -> timedelta:
        return _TIMEZONE_OFFSETS[self.value]

    @property
    def tzinfo(self) -> tzinfo:
        return timezone(self.offset, self.value)

    @classmethod
    def parse(cls, value: str | None) -> Timezone:
        try:
            return cls(value)
        except ValueError:
            return cls.IST
