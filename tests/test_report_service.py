"""Tests for attendance reporting."""

import pytest

from club_attendance.domain.errors import ValidationError
from club_attendance.domain.models import (
    AttendanceRecord,
    AttendanceStatus,
    Group,
    Ledger,
    Person,
    Session,
)
from club_attendance.services.ledger import LedgerService
from club_attendance.services.reports import (
    ReportService,
    attendance_percentage,
    build_report,
    export_csv,
    sort_people,
    status_label,
)


def _percentages(report) -> dict[str, int]:
    return {row.person.id: row.percentage for row in report.rows}


def test_report_scenario_after_resave(
    ledger_service: LedgerService, report_service: ReportService
) -> None:
    ledger_service.apply_reconciliation("g1", "2024-03-01", {"p1": True, "p2": False})
    ledger_service.apply_reconciliation("g1", "2024-03-01", {"p1": False, "p2": False})

    report = report_service.attendance_report("g1", "2024-03-01", "2024-03-01")

    assert report.total_sessions == 1
    assert _percentages(report) == {"p1": 0, "p2": 0}


def test_report_filters_range_and_sorts_sessions(
    ledger_service: LedgerService, report_service: ReportService
) -> None:
    for day in ("2024-03-15", "2024-02-28", "2024-03-01", "2024-04-01"):
        ledger_service.apply_reconciliation("g1", day, {"p1": True, "p2": False})
    ledger_service.apply_reconciliation("g2", "2024-03-05", {"p3": True})

    report = report_service.attendance_report("g1", "2024-03-01", "2024-03-31")

    assert [s.date for s in report.sessions] == ["2024-03-01", "2024-03-15"]
    assert _percentages(report) == {"p1": 100, "p2": 0}


def test_report_without_sessions_is_zero_percent(
    report_service: ReportService,
) -> None:
    report = report_service.attendance_report("g1", "2024-01-01", "2024-12-31")

    assert report.sessions == []
    assert _percentages(report) == {"p1": 0, "p2": 0}


def test_missing_record_counts_as_absent(
    ledger_service: LedgerService, report_service: ReportService
) -> None:
    ledger_service.apply_reconciliation("g1", "2024-03-01", {"p1": True})
    ledger_service.apply_reconciliation("g1", "2024-03-02", {"p1": True, "p2": True})

    report = report_service.full_report("g1")

    rows = {row.person.id: row for row in report.rows}
    assert rows["p2"].present_count == 1
    assert rows["p2"].percentage == 50
    assert rows["p1"].percentage == 100


def test_people_sorted_by_last_name_with_stable_ties() -> None:
    people = [
        Person(id="a", group_id="g", first_name="A", last_name="Nowak"),
        Person(id="b", group_id="g", first_name="B", last_name="Śliwa"),
        Person(id="c", group_id="g", first_name="C", last_name="kowalski"),
        Person(id="d", group_id="g", first_name="D", last_name="Nowak"),
        Person(id="e", group_id="g", first_name="E", last_name="Zając"),
    ]

    assert [p.id for p in sort_people(people)] == ["c", "a", "d", "b", "e"]


def test_people_sorted_with_polish_stroke_letters() -> None:
    people = [
        Person(id="a", group_id="g", first_name="A", last_name="Łukasik"),
        Person(id="b", group_id="g", first_name="B", last_name="Zając"),
        Person(id="c", group_id="g", first_name="C", last_name="Mazur"),
        Person(id="d", group_id="g", first_name="D", last_name="łoś"),
        Person(id="e", group_id="g", first_name="E", last_name="Kowal"),
    ]

    assert [p.last_name for p in sort_people(people)] == [
        "Kowal",
        "łoś",
        "Łukasik",
        "Mazur",
        "Zając",
    ]


def test_percentage_rounds_half_up() -> None:
    assert attendance_percentage(0, 0) == 0
    assert attendance_percentage(1, 8) == 13
    assert attendance_percentage(1, 3) == 33
    assert attendance_percentage(2, 3) == 67
    assert attendance_percentage(3, 3) == 100


def test_report_rejects_malformed_dates(report_service: ReportService) -> None:
    with pytest.raises(ValidationError):
        report_service.attendance_report("g1", "01.03.2024", "2024-03-31")


def test_report_ignores_stale_records_of_moved_people() -> None:
    ledger = Ledger(
        groups=(Group(id="g1", name="A"), Group(id="g2", name="B")),
        people=(Person(id="p1", group_id="g2", first_name="Jan", last_name="Nowak"),),
        sessions=(Session(id="s1", group_id="g1", date="2024-03-01"),),
        records=(
            AttendanceRecord(
                id="r1",
                session_id="s1",
                person_id="p1",
                status=AttendanceStatus.PRESENT,
            ),
        ),
    )

    assert build_report(ledger, "g1").rows == []
    assert build_report(ledger, "g2").rows[0].percentage == 0


def test_export_csv_format(ledger_service: LedgerService) -> None:
    ledger_service.create_person("Ola", "Adamska", "g1", "2012")
    ledger_service.apply_reconciliation("g1", "2024-03-08", {"p1": True, "p2": False})
    ledger_service.apply_reconciliation("g1", "2024-03-01", {"p2": True})

    text = export_csv(build_report(ledger_service.ledger, "g1"))

    assert text.startswith("\ufeff")
    assert text[1:].splitlines() == [
        "Nazwisko;Imię;Rocznik;2024-03-01;2024-03-08",
        "Adamska;Ola;2012;;",
        "Kowalska;Ewa;;X;",
        "Nowak;Jan;;;X",
    ]


def test_views(ledger_service: LedgerService, report_service: ReportService) -> None:
    ledger_service.apply_reconciliation("g1", "2024-03-01", {"p1": True})

    summary = report_service.dashboard_summary()
    roster = report_service.roster()

    assert (summary.groups, summary.people, summary.sessions) == (2, 3, 1)
    assert report_service.group_sizes() == {"g1": 2, "g2": 1}
    assert [entry.person.id for entry in roster] == ["p2", "p1", "p3"]
    assert roster[-1].group_name == "Seniorzy"
    assert report_service.group_name("missing") == "-"
    assert [e.person.id for e in report_service.roster("g2")] == ["p3"]


def test_status_label() -> None:
    assert status_label(AttendanceStatus.PRESENT) == "Obecny"
    assert status_label("ABSENT") == "Nieobecny"
    assert status_label("LATE") == "-"
    assert status_label(None) == "-"
