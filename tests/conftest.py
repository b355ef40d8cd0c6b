"""Shared fixtures and fakes for the test suite."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from mindthegap.calculations.numeric import NumberFormatter
from mindthegap.config import AppSettings
from mindthegap.models.donation import Donation, DonationFields
from mindthegap.notifications import MessageCenter
from mindthegap.services.persistence import InMemoryClientEnvironment


BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_fields(
    charity_name: str = "Red Cross",
    amount: int = 100,
    frequency: str = "monthly",
) -> DonationFields:
    return DonationFields(charity_name=charity_name, amount=amount, frequency=frequency)


def make_donation(
    charity_name: str = "Red Cross",
    amount: int = 100,
    frequency: str = "monthly",
    donation_id: str = "d-1",
    minutes: int = 0,
) -> Donation:
    return Donation.create(
        donation_id,
        make_fields(charity_name, amount, frequency),
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class FakeTimer:
    """Stands in for threading.Timer; fires only when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


class FakeTimerFactory:
    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None) -> FakeTimer:
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> Optional[FakeTimer]:
        return self.timers[-1] if self.timers else None


@pytest.fixture
def timers() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def messages(timers) -> MessageCenter:
    return MessageCenter(timeout_seconds=3.2, timer_factory=timers)


@pytest.fixture
def formatter() -> NumberFormatter:
    return NumberFormatter()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        persistence_mode="local",
        public_url="http://localhost:8501/",
        share_param="d",
        cookie_name="mindthegap_household",
        storage_key="mindthegap_snapshot",
    )


@pytest.fixture
def environment() -> InMemoryClientEnvironment:
    return InMemoryClientEnvironment()
