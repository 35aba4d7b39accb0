"""Pydantic models for the persisted ledger document."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from club_attendance.domain.models import (
    AttendanceRecord,
    AttendanceStatus,
    Group,
    Ledger,
    Person,
    Session,
    SessionType,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GroupDocument(_CamelModel):
    """Persisted group."""

    id: str
    name: str
    description: str | None = None


class PersonDocument(_CamelModel):
    """Persisted person."""

    id: str
    group_id: str
    first_name: str
    last_name: str
    birth_year: str | None = None


class SessionDocument(_CamelModel):
    """Persisted session."""

    id: str
    group_id: str
    date: str
    type: SessionType = SessionType.CLASS
    topic: str | None = None


class RecordDocument(_CamelModel):
    """Persisted attendance record."""

    id: str
    session_id: str
    person_id: str
    status: AttendanceStatus


class LedgerDocument(_CamelModel):
    """Whole persisted ledger snapshot."""

    groups: list[GroupDocument]
    people: list[PersonDocument]
    sessions: list[SessionDocument]
    records: list[RecordDocument]
    is_pro: bool = True

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> "LedgerDocument":
        """Build a document from a domain ledger."""
        return cls(
            groups=[
                GroupDocument(id=g.id, name=g.name, description=g.description)
                for g in ledger.groups
            ],
            people=[
                PersonDocument(
                    id=p.id,
                    group_id=p.group_id,
                    first_name=p.first_name,
                    last_name=p.last_name,
                    birth_year=p.birth_year,
                )
                for p in ledger.people
            ],
            sessions=[
                SessionDocument(
                    id=s.id,
                    group_id=s.group_id,
                    date=s.date,
                    type=s.type,
                    topic=s.topic,
                )
                for s in ledger.sessions
            ],
            records=[
                RecordDocument(
                    id=r.id,
                    session_id=r.session_id,
                    person_id=r.person_id,
                    status=r.status,
                )
                for r in ledger.records
            ],
            is_pro=True,
        )

    def to_ledger(self) -> Ledger:
        """Convert the document into a domain ledger."""
        return Ledger(
            groups=tuple(
                Group(id=g.id, name=g.name, description=g.description)
                for g in self.groups
            ),
            people=tuple(
                Person(
                    id=p.id,
                    group_id=p.group_id,
                    first_name=p.first_name,
                    last_name=p.last_name,
                    birth_year=p.birth_year,
                )
                for p in self.people
            ),
            sessions=tuple(
                Session(
                    id=s.id,
                    group_id=s.group_id,
                    date=s.date,
                    type=s.type,
                    topic=s.topic,
                )
                for s in self.sessions
            ),
            records=tuple(
                AttendanceRecord(
                    id=r.id,
                    session_id=r.session_id,
                    person_id=r.person_id,
                    status=r.status,
                )
                for r in self.records
            ),
        )

    def to_json_dict(self) -> dict[str, object]:
        """Return the camelCase JSON payload, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
