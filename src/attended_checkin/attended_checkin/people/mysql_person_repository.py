from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional, Sequence

import mysql.connector

from ..core.enums import FamilyRole, Gender
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import TransactionScope, fetchone
from .model import GroupMember, HouseholdGroup, Person
from .repository import PersonStore

_PERSON_COLUMNS = """
    person_id, first_name, last_name, nick_name, suffix_value_id, birth_date, gender,
    grade_offset, ability_level, is_special_needs, allergy,
    connection_status_value_id, record_status_value_id, record_type_value_id
"""


def _to_person(row: dict) -> Person:
    return Person(
        person_id=int(row["person_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        nick_name=row.get("nick_name"),
        suffix_value_id=row.get("suffix_value_id"),
        birth_date=row.get("birth_date"),
        gender=Gender(row.get("gender") or Gender.UNKNOWN.value),
        grade_offset=row.get("grade_offset"),
        ability_level=row.get("ability_level"),
        is_special_needs=bool(row.get("is_special_needs", False)),
        allergy=row.get("allergy"),
        connection_status_value_id=row.get("connection_status_value_id"),
        record_status_value_id=row.get("record_status_value_id"),
        record_type_value_id=row.get("record_type_value_id"),
    )


def _person_params(person: Person) -> tuple:
    return (
        person.first_name,
        person.last_name,
        person.nick_name,
        person.suffix_value_id,
        person.birth_date,
        person.gender.value,
        person.grade_offset,
        person.ability_level,
        int(bool(person.is_special_needs)),
        person.allergy,
        person.connection_status_value_id,
        person.record_status_value_id,
        person.record_type_value_id,
    )


class MySQLPersonRepository(PersonStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._scope = TransactionScope(conn_factory)

    @contextmanager
    def _cursor(self):
        try:
            with self._scope.cursor() as pair:
                yield pair
        except mysql.connector.Error as e:
            raise StoreError(f"person store unavailable: {e}") from e

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        try:
            with self._scope.begin():
                yield
        except mysql.connector.Error as e:
            raise StoreError(f"person store transaction failed: {e}") from e

    def get_person(self, person_id: int) -> Optional[Person]:
        with self._cursor() as (_, cur):
            cur.execute(f"SELECT {_PERSON_COLUMNS} FROM people WHERE person_id=%s", (int(person_id),))
            row = fetchone(cur)
            return _to_person(row) if row else None

    def create_person(self, person: Person) -> Person:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO people(
                    first_name, last_name, nick_name, suffix_value_id, birth_date, gender,
                    grade_offset, ability_level, is_special_needs, allergy,
                    connection_status_value_id, record_status_value_id, record_type_value_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _person_params(person),
            )
            return replace(person, person_id=int(cur.lastrowid))

    def update_person(self, person: Person) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE people
                SET first_name=%s, last_name=%s, nick_name=%s, suffix_value_id=%s, birth_date=%s, gender=%s,
                    grade_offset=%s, ability_level=%s, is_special_needs=%s, allergy=%s,
                    connection_status_value_id=%s, record_status_value_id=%s, record_type_value_id=%s
                WHERE person_id=%s
                """,
                _person_params(person) + (int(person.person_id),),
            )
            return cur.rowcount > 0

    def create_household_group(self, *, name: str, campus_id: Optional[int] = None) -> HouseholdGroup:
        with self._cursor() as (_, cur):
            cur.execute(
                "INSERT INTO household_groups(name, campus_id, is_active) VALUES(%s,%s,1)",
                (name, campus_id),
            )
            return HouseholdGroup(group_id=int(cur.lastrowid), name=name, campus_id=campus_id)

    def add_group_members(self, group: HouseholdGroup, members: Sequence[GroupMember]) -> None:
        if not members:
            return
        with self._cursor() as (_, cur):
            cur.executemany(
                "INSERT INTO household_members(group_id, person_id, role) VALUES(%s,%s,%s)",
                [(int(group.group_id), int(m.person_id), m.role.value) for m in members],
            )

    def get_household_membership(self, person_id: int) -> Optional[GroupMember]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT group_id, person_id, role
                FROM household_members
                WHERE person_id=%s
                ORDER BY member_id
                LIMIT 1
                """,
                (int(person_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return GroupMember(group_id=int(row["group_id"]), person_id=int(row["person_id"]), role=FamilyRole(row["role"]))

    def move_household_member(self, *, person_id: int, group_id: int) -> bool:
        membership = self.get_household_membership(person_id)
        if membership is None:
            return False
        with self._cursor() as (_, cur):
            cur.execute(
                "UPDATE household_members SET group_id=%s WHERE person_id=%s AND group_id=%s",
                (int(group_id), int(person_id), int(membership.group_id)),
            )
            return cur.rowcount > 0

    def create_checkin_relationship(self, *, adult_id: int, visitor_id: int) -> None:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO checkin_relationships(adult_id, visitor_id)
                VALUES(%s,%s)
                """,
                (int(adult_id), int(visitor_id)),
            )
