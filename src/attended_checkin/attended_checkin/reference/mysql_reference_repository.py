from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import ReferenceType
from ..core.exceptions import ReferenceDataError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ReferenceValue
from .repository import ReferenceDataLookup


def _to_value(row: dict) -> ReferenceValue:
    return ReferenceValue(
        value_id=int(row["value_id"]),
        reference_type=ReferenceType(row["reference_type"]),
        key=row["value_key"],
        value=row["value"],
        order=int(row.get("sort_order") or 0),
    )


class MySQLReferenceRepository(ReferenceDataLookup):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, reference_type: ReferenceType, key: str) -> Optional[ReferenceValue]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT value_id, reference_type, value_key, value, sort_order
                    FROM reference_values
                    WHERE reference_type=%s AND value_key=%s AND is_active=1
                    """,
                    (reference_type.value, key),
                )
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise ReferenceDataError(f"reference data unavailable: {e}") from e
        return _to_value(row) if row else None

    def list_values(self, reference_type: ReferenceType) -> Sequence[ReferenceValue]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT value_id, reference_type, value_key, value, sort_order
                    FROM reference_values
                    WHERE reference_type=%s AND is_active=1
                    ORDER BY sort_order, value
                    """,
                    (reference_type.value,),
                )
                rows = fetchall(cur)
        except mysql.connector.Error as e:
            raise ReferenceDataError(f"reference data unavailable: {e}") from e
        return [_to_value(r) for r in rows]
