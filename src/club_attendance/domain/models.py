"""Domain models for the attendance ledger."""

from dataclasses import dataclass, field
from enum import StrEnum


class SessionType(StrEnum):
    """Kind of a dated group session."""

    CLASS = "CLASS"
    COMPETITION = "COMPETITION"


class AttendanceStatus(StrEnum):
    """Attendance of a person at a session."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


@dataclass(frozen=True)
class Group:
    """A training group of the club."""

    id: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class Person:
    """A club member assigned to exactly one group."""

    id: str
    group_id: str
    first_name: str
    last_name: str
    birth_year: str | None = None


@dataclass(frozen=True)
class Session:
    """A dated training or competition of one group."""

    id: str
    group_id: str
    date: str
    type: SessionType = SessionType.CLASS
    topic: str | None = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Attendance of one person at one session."""

    id: str
    session_id: str
    person_id: str
    status: AttendanceStatus


@dataclass(frozen=True)
class Ledger:
    """Immutable snapshot of all groups, people, sessions and records."""

    groups: tuple[Group, ...] = field(default_factory=tuple)
    people: tuple[Person, ...] = field(default_factory=tuple)
    sessions: tuple[Session, ...] = field(default_factory=tuple)
    records: tuple[AttendanceRecord, ...] = field(default_factory=tuple)

    def get_group(self, group_id: str) -> Group | None:
        """Return a group by id, if present."""
        return next((group for group in self.groups if group.id == group_id), None)

    def get_person(self, person_id: str) -> Person | None:
        """Return a person by id, if present."""
        return next((person for person in self.people if person.id == person_id), None)

    def find_session(self, group_id: str, date: str) -> Session | None:
        """Return the session of a group on a date, if present."""
        for session in self.sessions:
            if session.group_id == group_id and session.date == date:
                return session
        return None

    def members_of(self, group_id: str) -> list[Person]:
        """Return the people of a group in insertion order."""
        return [person for person in self.people if person.group_id == group_id]

    def records_for(self, session_id: str) -> list[AttendanceRecord]:
        """Return the records of a session."""
        return [record for record in self.records if record.session_id == session_id]
