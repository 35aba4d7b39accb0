"""Shared test fixtures."""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from itertools import count

import pytest

from club_attendance.config import Settings
from club_attendance.containers import AppContainer, build_container
from club_attendance.domain.models import Group, Ledger, Person
from club_attendance.domain.seed import seed_ledger
from club_attendance.services.ledger import LedgerService, LedgerStore
from club_attendance.services.reports import ReportService


@dataclass
class InMemoryLedgerStore(LedgerStore):
    """In-memory ledger store for tests."""

    saved: Ledger | None = None
    saves: list[Ledger] = field(default_factory=list)

    def load(self) -> Ledger:
        return self.saved if self.saved is not None else seed_ledger()

    def save(self, ledger: Ledger) -> bool:
        self.saved = ledger
        self.saves.append(ledger)
        return True


@dataclass
class FailingLedgerStore(LedgerStore):
    """Store whose writes always fail."""

    initial: Ledger = field(default_factory=seed_ledger)
    attempts: int = 0

    def load(self) -> Ledger:
        return self.initial

    def save(self, ledger: Ledger) -> bool:
        self.attempts += 1
        return False


def sequential_ids(prefix: str = "id") -> Callable[[], str]:
    """Return an id factory producing id-1, id-2, ..."""
    counter = count(1)
    return lambda: f"{prefix}-{next(counter)}"


def club_ledger() -> Ledger:
    """Two groups: g1 with p1 and p2, g2 with p3."""
    return Ledger(
        groups=(Group(id="g1", name="Juniorzy"), Group(id="g2", name="Seniorzy")),
        people=(
            Person(id="p1", group_id="g1", first_name="Jan", last_name="Nowak"),
            Person(id="p2", group_id="g1", first_name="Ewa", last_name="Kowalska"),
            Person(id="p3", group_id="g2", first_name="Adam", last_name="Zieliński"),
        ),
    )


@pytest.fixture(autouse=True)
def _reset_app_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("club_attendance")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore(saved=club_ledger())


@pytest.fixture
def ledger_service(store: InMemoryLedgerStore) -> LedgerService:
    return LedgerService(store, id_factory=sequential_ids())


@pytest.fixture
def report_service(ledger_service: LedgerService) -> ReportService:
    return ReportService(ledger_service)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(ledger_path=tmp_path / "ledger.json")


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)
