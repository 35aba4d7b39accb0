"""Domain models for attendance reporting."""

from dataclasses import dataclass

from club_attendance.domain.models import Person, Session


@dataclass(frozen=True)
class PersonAttendance:
    """Attendance summary of one person over a report window."""

    person: Person
    present_session_ids: frozenset[str]
    present_count: int
    percentage: int

    def was_present(self, session_id: str) -> bool:
        """Return True when the person was marked present at the session."""
        return session_id in self.present_session_ids


@dataclass(frozen=True)
class AttendanceReport:
    """Presence matrix of a group over a date window."""

    group_id: str
    start_date: str | None
    end_date: str | None
    sessions: list[Session]
    rows: list[PersonAttendance]

    @property
    def total_sessions(self) -> int:
        return len(self.sessions)


@dataclass(frozen=True)
class DashboardSummary:
    """Entity counts shown on the dashboard."""

    groups: int
    people: int
    sessions: int


@dataclass(frozen=True)
class RosterEntry:
    """A person listed together with the name of their group."""

    person: Person
    group_name: str
