"""Common types used across cookieCOGS."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class SalesChannel(str, Enum):
    """
    Fixed set of sales channels.

    The value is the DailyRecord field the channel is counted in.
    STAFF is consumption, not revenue.
    """
    LOCATION = "verkauft_location"
    UBEREATS = "verkauft_ubereats"
    WOLT = "verkauft_wolt"
    LIEFERANDO = "verkauft_lieferando"
    WEBSITE = "verkauft_website"
    STAFF = "mitarbeiter_verbrauch"

    @property
    def is_revenue(self) -> bool:
        return self is not SalesChannel.STAFF

    @property
    def label(self) -> str:
        return CHANNEL_LABELS[self]

    @classmethod
    def revenue_channels(cls) -> list:
        return [c for c in cls if c.is_revenue]


CHANNEL_LABELS = {
    SalesChannel.LOCATION: "Vor Ort",
    SalesChannel.UBEREATS: "Uber Eats",
    SalesChannel.WOLT: "Wolt",
    SalesChannel.LIEFERANDO: "Lieferando",
    SalesChannel.WEBSITE: "Website",
    SalesChannel.STAFF: "Mitarbeiter",
}


class StockStatus(str, Enum):
    """Stock level relative to a warn threshold."""
    CRITICAL = "critical"
    LOW = "low"
    GOOD = "good"


class Priority(str, Enum):
    """Due-date priority of a task or production plan."""
    DONE = "done"
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    UPCOMING = "upcoming"


class DateRange(BaseModel):
    """An inclusive date range."""
    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, day: str) -> bool:
        d = date.fromisoformat(day)
        if self.start and d < self.start:
            return False
        if self.end and d > self.end:
            return False
        return True


def today_iso() -> str:
    """Today's date as YYYY-MM-DD."""
    return date.today().isoformat()


def tomorrow() -> date:
    return date.today() + timedelta(days=1)


def utcnow() -> datetime:
    return datetime.utcnow()


def priority_for(due: date, done: bool, reference: Optional[date] = None) -> Priority:
    """Classify a due date against today (or a reference date)."""
    if done:
        return Priority.DONE
    reference = reference or date.today()
    if due < reference:
        return Priority.OVERDUE
    if due == reference:
        return Priority.TODAY
    if due == reference + timedelta(days=1):
        return Priority.TOMORROW
    return Priority.UPCOMING


def iso_day(value=None) -> str:
    """
    Normalise a day to YYYY-MM-DD.

    Accepts a date or an ISO date string; empty means today. Raises
    ValueError for anything else.
    """
    if value is None or value == "":
        return today_iso()
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value).strip()).isoformat()
