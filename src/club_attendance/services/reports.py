"""Attendance reporting and export."""

import csv
import io
import unicodedata
from collections import Counter
from dataclasses import dataclass

from club_attendance.domain.models import AttendanceStatus, Ledger, Person
from club_attendance.domain.reports import (
    AttendanceReport,
    DashboardSummary,
    PersonAttendance,
    RosterEntry,
)
from club_attendance.services.calendar import validate_iso_date
from club_attendance.services.ledger import LedgerService

MISSING_LABEL = "-"
PRESENT_MARK = "X"
BOM = "\ufeff"
CSV_HEADER = ["Nazwisko", "Imię", "Rocznik"]

_UNDECOMPOSED = str.maketrans("ŁłØøĐđ", "LlOoDd")

_STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Obecny",
    AttendanceStatus.ABSENT: "Nieobecny",
}


def build_report(
    ledger: Ledger,
    group_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> AttendanceReport:
    """Aggregate a group's attendance over an inclusive date window.

    Dates are ``YYYY-MM-DD`` strings, so lexical comparison matches calendar
    order. A missing bound leaves that side of the window open.
    """
    if start_date is not None:
        validate_iso_date(start_date)
    if end_date is not None:
        validate_iso_date(end_date)
    sessions = sorted(
        (
            session
            for session in ledger.sessions
            if session.group_id == group_id
            and (start_date is None or session.date >= start_date)
            and (end_date is None or session.date <= end_date)
        ),
        key=lambda session: session.date,
    )
    session_ids = {session.id for session in sessions}
    present_by_person: dict[str, set[str]] = {}
    seen: set[tuple[str, str]] = set()
    for record in ledger.records:
        if record.session_id not in session_ids:
            continue
        key = (record.session_id, record.person_id)
        if key in seen:
            continue
        seen.add(key)
        if record.status == AttendanceStatus.PRESENT:
            present_by_person.setdefault(record.person_id, set()).add(
                record.session_id
            )

    total = len(sessions)
    rows = []
    for person in sort_people(ledger.members_of(group_id)):
        present = frozenset(present_by_person.get(person.id, set()))
        rows.append(
            PersonAttendance(
                person=person,
                present_session_ids=present,
                present_count=len(present),
                percentage=attendance_percentage(len(present), total),
            )
        )
    return AttendanceReport(
        group_id=group_id,
        start_date=start_date,
        end_date=end_date,
        sessions=sessions,
        rows=rows,
    )


def attendance_percentage(present: int, total: int) -> int:
    """Return the rounded (half up) share of sessions attended, 0 if none."""
    if total <= 0:
        return 0
    return (200 * present + total) // (2 * total)


def export_csv(report: AttendanceReport) -> str:
    """Render a report as semicolon-separated text with a byte-order mark."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    writer.writerow(CSV_HEADER + [session.date for session in report.sessions])
    for row in report.rows:
        writer.writerow(
            [
                row.person.last_name,
                row.person.first_name,
                row.person.birth_year or "",
            ]
            + [
                PRESENT_MARK if row.was_present(session.id) else ""
                for session in report.sessions
            ]
        )
    return BOM + buffer.getvalue()


def sort_people(people: list[Person]) -> list[Person]:
    """Sort people by last name, keeping insertion order for ties."""
    return sorted(people, key=lambda person: _collation_key(person.last_name))


def status_label(status: AttendanceStatus | str | None) -> str:
    """Return the display label for an attendance status."""
    try:
        return _STATUS_LABELS[AttendanceStatus(status)]
    except (KeyError, ValueError):
        return MISSING_LABEL


def _collation_key(value: str) -> str:
    # Ł has no canonical decomposition, so NFKD alone would sort it after Z
    decomposed = unicodedata.normalize("NFKD", value.translate(_UNDECOMPOSED))
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.casefold()


@dataclass
class ReportService:
    """Read-only views over the current ledger."""

    ledger_service: LedgerService

    def attendance_report(
        self, group_id: str, start_date: str | None, end_date: str | None
    ) -> AttendanceReport:
        """Return the attendance report of a group for a date window."""
        return build_report(self.ledger_service.ledger, group_id, start_date, end_date)

    def full_report(self, group_id: str) -> AttendanceReport:
        """Return the attendance report over every session of a group."""
        return build_report(self.ledger_service.ledger, group_id)

    def export_csv(
        self,
        group_id: str,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> str:
        """Return the CSV export of a group's report."""
        return export_csv(
            build_report(self.ledger_service.ledger, group_id, start_date, end_date)
        )

    def dashboard_summary(self) -> DashboardSummary:
        """Return entity counts."""
        ledger = self.ledger_service.ledger
        return DashboardSummary(
            groups=len(ledger.groups),
            people=len(ledger.people),
            sessions=len(ledger.sessions),
        )

    def group_sizes(self) -> dict[str, int]:
        """Return the number of people per group id."""
        ledger = self.ledger_service.ledger
        counts = Counter(person.group_id for person in ledger.people)
        return {group.id: counts.get(group.id, 0) for group in ledger.groups}

    def group_name(self, group_id: str) -> str:
        """Return a group's name, or a placeholder when it no longer exists."""
        group = self.ledger_service.ledger.get_group(group_id)
        return group.name if group else MISSING_LABEL

    def roster(self, group_id: str | None = None) -> list[RosterEntry]:
        """Return people sorted by last name with their group names."""
        ledger = self.ledger_service.ledger
        people = [
            person
            for person in ledger.people
            if group_id is None or person.group_id == group_id
        ]
        return [
            RosterEntry(person=person, group_name=self.group_name(person.group_id))
            for person in sort_people(people)
        ]
