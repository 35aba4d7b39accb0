"""Default ledger used when no saved state can be loaded."""

from club_attendance.domain.models import Group, Ledger, Person


def seed_ledger() -> Ledger:
    """Return the starter ledger with two groups and four people."""
    return Ledger(
        groups=(
            Group(id="g1", name="Rocznik 2012", description="Trening piłkarski"),
            Group(id="g2", name="Seniorzy", description="Pierwszy skład"),
        ),
        people=(
            Person(
                id="p1",
                group_id="g1",
                first_name="Jan",
                last_name="Kowalski",
                birth_year="2012",
            ),
            Person(
                id="p2",
                group_id="g1",
                first_name="Anna",
                last_name="Nowak",
                birth_year="2012",
            ),
            Person(
                id="p3",
                group_id="g1",
                first_name="Piotr",
                last_name="Wiśniewski",
                birth_year="2013",
            ),
            Person(
                id="p4",
                group_id="g2",
                first_name="Adam",
                last_name="Lewandowski",
                birth_year="1995",
            ),
        ),
    )
