from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True)
class Period:
    """One budgeting cycle: a calendar month of one user."""

    user_id: str
    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be 1..12, got {self.month}")

    @classmethod
    def of(cls, user_id: str, day: date) -> "Period":
        return cls(user_id=user_id, month=day.month, year=day.year)

    @classmethod
    def current(cls, user_id: str, today: Optional[date] = None) -> "Period":
        return cls.of(user_id, today or date.today())

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(self.user_id, 12, self.year - 1)
        return Period(self.user_id, self.month - 1, self.year)

    def bounds(self) -> Tuple[date, date]:
        """First day of the month and first day of the next month (exclusive)."""
        start = date(self.year, self.month, 1)
        if self.month == 12:
            return start, date(self.year + 1, 1, 1)
        return start, date(self.year, self.month + 1, 1)

    def label(self) -> str:
        return f"{self.year}-{self.month:02d}"
