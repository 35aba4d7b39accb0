"""Ledger commands: editing, session reconciliation and cascade deletion."""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol

from club_attendance.domain.errors import (
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from club_attendance.domain.models import (
    AttendanceRecord,
    AttendanceStatus,
    Group,
    Ledger,
    Person,
    Session,
    SessionType,
)
from club_attendance.domain.seed import seed_ledger
from club_attendance.services.calendar import validate_iso_date
from club_attendance.services.ids import generate_id

_logger = logging.getLogger(__name__)

_COLLECTIONS: dict[str, type] = {
    "groups": Group,
    "people": Person,
    "sessions": Session,
    "records": AttendanceRecord,
}

IdFactory = Callable[[], str]


class LedgerStore(Protocol):
    """Persistence interface for whole-ledger snapshots."""

    def load(self) -> Ledger:
        """Return the last saved ledger, or the seed ledger."""

    def save(self, ledger: Ledger) -> bool:
        """Persist the ledger and return True when it was written."""


def add_group(
    ledger: Ledger,
    name: str,
    description: str | None = None,
    id_factory: IdFactory = generate_id,
) -> tuple[Ledger, Group]:
    """Return a ledger with a new group appended."""
    group = Group(
        id=id_factory(),
        name=_required(name, "Group name"),
        description=_optional(description),
    )
    return replace(ledger, groups=(*ledger.groups, group)), group


def edit_group(
    ledger: Ledger, group_id: str, name: str, description: str | None = None
) -> tuple[Ledger, Group]:
    """Return a ledger with a group's name and description replaced."""
    current = ledger.get_group(group_id)
    if current is None:
        raise NotFoundError(f"Unknown group: {group_id}")
    updated = replace(
        current, name=_required(name, "Group name"), description=_optional(description)
    )
    groups = tuple(
        updated if group.id == group_id else group for group in ledger.groups
    )
    return replace(ledger, groups=groups), updated


def add_person(  # noqa: PLR0913
    ledger: Ledger,
    first_name: str,
    last_name: str,
    group_id: str,
    birth_year: str | None = None,
    id_factory: IdFactory = generate_id,
) -> tuple[Ledger, Person]:
    """Return a ledger with a new person appended to an existing group."""
    if ledger.get_group(group_id) is None:
        raise ReferentialIntegrityError(f"Unknown group for new person: {group_id}")
    person = Person(
        id=id_factory(),
        group_id=group_id,
        first_name=_required(first_name, "First name"),
        last_name=_required(last_name, "Last name"),
        birth_year=_optional(birth_year),
    )
    return replace(ledger, people=(*ledger.people, person)), person


def edit_person(  # noqa: PLR0913
    ledger: Ledger,
    person_id: str,
    first_name: str,
    last_name: str,
    group_id: str,
    birth_year: str | None = None,
) -> tuple[Ledger, Person]:
    """Return a ledger with a person's details replaced.

    Reassigning the group keeps the person's existing attendance records.
    """
    current = ledger.get_person(person_id)
    if current is None:
        raise NotFoundError(f"Unknown person: {person_id}")
    if ledger.get_group(group_id) is None:
        raise ReferentialIntegrityError(f"Unknown group for person: {group_id}")
    updated = replace(
        current,
        group_id=group_id,
        first_name=_required(first_name, "First name"),
        last_name=_required(last_name, "Last name"),
        birth_year=_optional(birth_year),
    )
    people = tuple(
        updated if person.id == person_id else person for person in ledger.people
    )
    return replace(ledger, people=people), updated


def reconcile_attendance(  # noqa: PLR0913
    ledger: Ledger,
    group_id: str,
    date: str,
    attendance: Mapping[str, bool],
    session_type: SessionType | str = SessionType.CLASS,
    id_factory: IdFactory = generate_id,
) -> tuple[Ledger, Session]:
    """Commit one day's checklist for a group.

    Finds or creates the session for ``(group_id, date)`` and replaces all of
    its records with one record per entry of ``attendance``.
    """
    validate_iso_date(date)
    resolved_type = _session_type(session_type)
    if ledger.get_group(group_id) is None:
        raise ReferentialIntegrityError(f"Unknown group: {group_id}")
    members = {person.id for person in ledger.members_of(group_id)}
    outsiders = [person_id for person_id in attendance if person_id not in members]
    if outsiders:
        raise ReferentialIntegrityError(
            f"People not in group {group_id}: {', '.join(sorted(outsiders))}"
        )

    existing = ledger.find_session(group_id, date)
    if existing is None:
        session = Session(
            id=id_factory(), group_id=group_id, date=date, type=resolved_type
        )
        sessions = (*ledger.sessions, session)
    else:
        session = replace(existing, type=resolved_type)
        sessions = tuple(
            session if item.id == existing.id else item for item in ledger.sessions
        )

    kept = [record for record in ledger.records if record.session_id != session.id]
    fresh = [
        AttendanceRecord(
            id=id_factory(),
            session_id=session.id,
            person_id=person_id,
            status=AttendanceStatus.PRESENT if present else AttendanceStatus.ABSENT,
        )
        for person_id, present in attendance.items()
    ]
    return replace(ledger, sessions=sessions, records=(*kept, *fresh)), session


def remove_group(ledger: Ledger, group_id: str) -> Ledger:
    """Return a ledger without the group, its people, sessions and records."""
    dropped_sessions = {
        session.id for session in ledger.sessions if session.group_id == group_id
    }
    return Ledger(
        groups=tuple(group for group in ledger.groups if group.id != group_id),
        people=tuple(person for person in ledger.people if person.group_id != group_id),
        sessions=tuple(
            session for session in ledger.sessions if session.id not in dropped_sessions
        ),
        records=tuple(
            record
            for record in ledger.records
            if record.session_id not in dropped_sessions
        ),
    )


def remove_person(ledger: Ledger, person_id: str) -> Ledger:
    """Return a ledger without the person and their attendance records."""
    return replace(
        ledger,
        people=tuple(person for person in ledger.people if person.id != person_id),
        records=tuple(
            record for record in ledger.records if record.person_id != person_id
        ),
    )


def merge_ledger(ledger: Ledger, **collections: object) -> Ledger:
    """Shallow-merge whole replacement collections into a ledger."""
    unknown = set(collections) - set(_COLLECTIONS)
    if unknown:
        raise ValidationError(f"Unknown ledger fields: {', '.join(sorted(unknown))}")
    merged: dict[str, tuple[object, ...]] = {}
    for name, items in collections.items():
        if isinstance(items, str | bytes | Mapping) or not isinstance(items, Iterable):
            raise ValidationError(f"Ledger field {name} must be a sequence")
        entity_type = _COLLECTIONS[name]
        values = tuple(items)
        if not all(isinstance(item, entity_type) for item in values):
            raise ValidationError(
                f"Ledger field {name} only accepts {entity_type.__name__} items"
            )
        merged[name] = values
    return replace(ledger, **merged)


@dataclass
class LedgerService:
    """Owns the current ledger and applies commands to it."""

    store: LedgerStore
    id_factory: IdFactory = generate_id
    ledger: Ledger = field(init=False)

    def __post_init__(self) -> None:
        self.ledger = self.store.load()

    def create_group(self, name: str, description: str | None = None) -> Group:
        """Create a group."""
        ledger, group = add_group(self.ledger, name, description, self.id_factory)
        self._commit(ledger, "create_group")
        return group

    def edit_group(
        self, group_id: str, name: str, description: str | None = None
    ) -> Group:
        """Rename a group or change its description."""
        ledger, group = edit_group(self.ledger, group_id, name, description)
        self._commit(ledger, "edit_group")
        return group

    def delete_group(self, group_id: str) -> None:
        """Delete a group together with everything that references it."""
        self._commit(remove_group(self.ledger, group_id), "delete_group")

    def create_person(
        self,
        first_name: str,
        last_name: str,
        group_id: str,
        birth_year: str | None = None,
    ) -> Person:
        """Create a person in an existing group."""
        ledger, person = add_person(
            self.ledger, first_name, last_name, group_id, birth_year, self.id_factory
        )
        self._commit(ledger, "create_person")
        return person

    def edit_person(
        self,
        person_id: str,
        first_name: str,
        last_name: str,
        group_id: str,
        birth_year: str | None = None,
    ) -> Person:
        """Update a person's details, including their group."""
        ledger, person = edit_person(
            self.ledger, person_id, first_name, last_name, group_id, birth_year
        )
        self._commit(ledger, "edit_person")
        return person

    def delete_person(self, person_id: str) -> None:
        """Delete a person and their attendance records."""
        self._commit(remove_person(self.ledger, person_id), "delete_person")

    def apply_reconciliation(
        self,
        group_id: str,
        date: str,
        attendance: Mapping[str, bool],
        session_type: SessionType | str = SessionType.CLASS,
    ) -> Session:
        """Save a day's attendance checklist and return its session."""
        ledger, session = reconcile_attendance(
            self.ledger, group_id, date, attendance, session_type, self.id_factory
        )
        self._commit(ledger, "apply_reconciliation")
        _logger.info(
            "Attendance saved: group=%s date=%s people=%s",
            group_id,
            date,
            len(attendance),
        )
        return session

    def update_data(self, **collections: object) -> Ledger:
        """Replace whole collections of the ledger and persist the result."""
        self._commit(merge_ledger(self.ledger, **collections), "update_data")
        return self.ledger

    def reset(self) -> Ledger:
        """Discard all data and start again from the seed ledger."""
        self._commit(seed_ledger(), "reset")
        return self.ledger

    def find_session(self, group_id: str, date: str) -> Session | None:
        """Return the session of a group on a date, if present."""
        return self.ledger.find_session(group_id, validate_iso_date(date))

    def attendance_checklist(self, group_id: str, date: str) -> dict[str, bool]:
        """Return the initial present/absent checklist for a group and date."""
        session = self.find_session(group_id, date)
        present: set[str] = set()
        if session is not None:
            present = {
                record.person_id
                for record in self.ledger.records_for(session.id)
                if record.status == AttendanceStatus.PRESENT
            }
        return {
            person.id: person.id in present
            for person in self.ledger.members_of(group_id)
        }

    def _commit(self, ledger: Ledger, action: str) -> None:
        if not self.store.save(ledger):
            _logger.warning("Ledger not persisted, keeping in-memory state: %s", action)
        self.ledger = ledger


def _required(value: str, label: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} must not be empty")
    return cleaned


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _session_type(value: SessionType | str) -> SessionType:
    try:
        return SessionType(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown session type: {value!r}") from exc
