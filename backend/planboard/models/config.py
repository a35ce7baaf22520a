import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


LoadMode = Literal["calculated", "reported"]

# Weekday indices run 0=Sunday .. 6=Saturday
SUNDAY = 0
SATURDAY = 6


class Holiday(BaseModel):
    """A non-working day. Recurring holidays match on month and day only."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    date: dt.date
    reason: str = ""
    recurring: bool = False


class DateRange(BaseModel):
    """Inclusive calendar window."""

    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


class AppConfig(BaseModel):
    """Board-wide calendar and effort settings."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    hours_per_day: float = 9
    weekend_days: frozenset[int] = frozenset({SUNDAY, SATURDAY})
    holidays: tuple[Holiday, ...] = ()
    load_mode: LoadMode = "calculated"


MEXICO_HOLIDAYS: tuple[Holiday, ...] = (
    Holiday(date=dt.date(2025, 1, 1), reason="Año Nuevo", recurring=True),
    Holiday(date=dt.date(2025, 2, 3), reason="Día de la Constitución", recurring=True),
    Holiday(date=dt.date(2025, 3, 17), reason="Natalicio de Benito Juárez", recurring=True),
    Holiday(date=dt.date(2025, 5, 1), reason="Día del Trabajo", recurring=True),
    Holiday(date=dt.date(2025, 9, 16), reason="Día de la Independencia", recurring=True),
    Holiday(date=dt.date(2025, 11, 17), reason="Revolución Mexicana", recurring=True),
    Holiday(date=dt.date(2025, 12, 25), reason="Navidad", recurring=True),
)


def default_config(hours_per_day: float | None = None) -> AppConfig:
    """Configuration a fresh board starts with."""
    if hours_per_day is None:
        from planboard.config import get_settings

        hours_per_day = get_settings().default_hours_per_day
    return AppConfig(
        hours_per_day=hours_per_day,
        weekend_days=frozenset({SUNDAY, SATURDAY}),
        holidays=MEXICO_HOLIDAYS,
        load_mode="calculated",
    )
