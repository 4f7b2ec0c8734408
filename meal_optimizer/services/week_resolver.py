# meal_optimizer/services/week_resolver.py
"""
Maps a calendar instant to the week bucket a weekly meal plan is filed under.

Every field of the result is derived from the Monday that opens the week, so
any two instants inside the same Monday..Sunday span resolve to the same key,
including weeks that straddle a month or year boundary.
"""

import math
from datetime import datetime, timedelta
from typing import Dict, NamedTuple, Tuple

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class WeekInfo(NamedTuple):
    year: int
    month: int
    week_of_month: int
    week_number: int
    start_date: datetime
    end_date: datetime

    def key(self) -> Dict[str, int]:
        """Fields that identify the week among one user's plans"""
        return {"year": self.year, "month": self.month, "week_of_month": self.week_of_month}


def week_of_month(day: datetime) -> int:
    return math.ceil(day.day / 7)


def week_number(day: datetime) -> int:
    jan_first = day.replace(month=1, day=1)
    day_of_year = (day.date() - jan_first.date()).days
    # Sunday = 0 .. Saturday = 6
    first_weekday = jan_first.isoweekday() % 7
    return math.ceil((day_of_year + first_weekday + 1) / 7)


def week_boundaries(day: datetime) -> Tuple[datetime, datetime]:
    """Monday 00:00:00.000 through Sunday 23:59:59.999 around ``day``"""
    monday = day - timedelta(days=day.weekday())
    start = monday.replace(hour=0, minute=0, second=0, microsecond=0)
    end = (start + timedelta(days=6)).replace(hour=23, minute=59, second=59, microsecond=999000)
    return start, end


def resolve_week(day: datetime) -> WeekInfo:
    start, end = week_boundaries(day)
    return WeekInfo(
        year=start.year,
        month=start.month,
        week_of_month=week_of_month(start),
        week_number=week_number(start),
        start_date=start,
        end_date=end,
    )


def weekday_name(day: datetime) -> str:
    return WEEKDAY_NAMES[day.weekday()]
