"""Command-line entry point for the attendance ledger."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from club_attendance.app_logging import configure_logging
from club_attendance.config import Settings
from club_attendance.containers import AppContainer, build_container
from club_attendance.domain.errors import LedgerError
from club_attendance.domain.models import AttendanceStatus, SessionType
from club_attendance.services.calendar import (
    is_polish_holiday,
    month_days,
    session_days,
)
from club_attendance.services.reports import sort_people, status_label

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="club-attendance",
        description="Club Attendance: group rosters and session attendance.",
    )
    parser.add_argument("--data", type=Path, help="Path of the ledger JSON file")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("summary", help="Show group, people and session counts")

    roster = commands.add_parser("roster", help="List people by last name")
    roster.add_argument("--group", help="Only list people of this group id")

    mark = commands.add_parser("mark", help="Save attendance for a group and date")
    mark.add_argument("group")
    mark.add_argument("date", help="YYYY-MM-DD")
    mark.add_argument(
        "--present", nargs="*", default=[], help="Ids of people who were present"
    )
    mark.add_argument(
        "--absent", nargs="*", default=[], help="Ids of people who were absent"
    )
    mark.add_argument(
        "--type",
        choices=[session_type.value for session_type in SessionType],
        default=SessionType.CLASS.value,
    )

    day = commands.add_parser("day", help="Show attendance of a group on a date")
    day.add_argument("group")
    day.add_argument("date", help="YYYY-MM-DD")

    month = commands.add_parser(
        "calendar", help="List the days of a month with sessions and holidays"
    )
    month.add_argument("year", type=int)
    month.add_argument("month", type=int, choices=range(1, 13), metavar="MONTH")
    month.add_argument("--group", help="Only mark sessions of this group id")

    for name, help_text in (
        ("report", "Show attendance percentages of a group"),
        ("export", "Export a group's attendance as CSV"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("group")
        command.add_argument("--start", help="First date, YYYY-MM-DD")
        command.add_argument("--end", help="Last date, YYYY-MM-DD")
        if name == "export":
            command.add_argument("--output", type=Path, help="CSV file to write")

    commands.add_parser("reset", help="Erase all data and restore the starter data")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)
    settings = Settings(ledger_path=args.data) if args.data else Settings()
    configure_logging(settings.log_level)
    container = build_container(settings)
    try:
        _dispatch(container, args)
    except LedgerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _dispatch(container: AppContainer, args: argparse.Namespace) -> None:
    ledger_service = container.ledger_service
    reports = container.report_service
    if args.command == "summary":
        summary = reports.dashboard_summary()
        print(
            f"Club Attendance: {summary.groups} groups, "
            f"{summary.people} people, {summary.sessions} sessions"
        )
        sizes = reports.group_sizes()
        for group in ledger_service.ledger.groups:
            print(f"  {group.id}  {group.name}  ({sizes[group.id]})")
    elif args.command == "roster":
        for entry in reports.roster(args.group):
            person = entry.person
            print(f"{person.last_name} {person.first_name}  {entry.group_name}")
    elif args.command == "mark":
        # starts from the saved checklist, so unlisted people keep their status
        attendance = ledger_service.attendance_checklist(args.group, args.date)
        changes = dict.fromkeys(args.absent, False) | dict.fromkeys(args.present, True)
        unknown = set(changes) - set(attendance)
        if unknown:
            missing = ", ".join(sorted(unknown))
            raise LedgerError(f"Not in group {args.group}: {missing}")
        attendance.update(changes)
        session = ledger_service.apply_reconciliation(
            args.group, args.date, attendance, args.type
        )
        print(f"Saved session {session.id} ({session.date}, {session.type})")
    elif args.command == "day":
        ledger = ledger_service.ledger
        session = ledger_service.find_session(args.group, args.date)
        statuses: dict[str, AttendanceStatus] = {}
        if session is not None:
            statuses = {r.person_id: r.status for r in ledger.records_for(session.id)}
        kind = session.type if session is not None else "no session"
        print(f"{reports.group_name(args.group)} {args.date}: {kind}")
        for person in sort_people(ledger.members_of(args.group)):
            label = status_label(statuses.get(person.id))
            print(f"{person.last_name} {person.first_name}  {label}")
    elif args.command == "calendar":
        marked = session_days(ledger_service.ledger, args.year, args.month, args.group)
        for day in month_days(args.year, args.month):
            notes = []
            if day.day in marked:
                notes.append("session")
            if is_polish_holiday(day):
                notes.append("holiday")
            print(f"{day.isoformat()}  {', '.join(notes)}".rstrip())
    elif args.command == "report":
        if args.start is None and args.end is None:
            report = reports.full_report(args.group)
        else:
            report = reports.attendance_report(args.group, args.start, args.end)
        print(f"{reports.group_name(args.group)}: {report.total_sessions} sessions")
        for row in report.rows:
            person = row.person
            print(
                f"{person.last_name} {person.first_name}  "
                f"{row.present_count}/{report.total_sessions}  {row.percentage}%"
            )
    elif args.command == "export":
        text = reports.export_csv(args.group, args.start, args.end)
        if args.output is None:
            sys.stdout.write(text)
        else:
            args.output.write_text(text, encoding="utf-8", newline="")
            _logger.info("Exported attendance to %s", args.output)
    elif args.command == "reset":
        ledger_service.reset()
        print("Data reset to starter groups and people.")


if __name__ == "__main__":
    raise SystemExit(main())
