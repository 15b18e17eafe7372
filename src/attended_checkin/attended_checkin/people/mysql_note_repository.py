from __future__ import annotations

from typing import Optional

import mysql.connector

from ..core.constants import CHECKIN_NOTE_TYPE
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import NoteStore


class MySQLNoteRepository(NoteStore):
    def __init__(self, conn_factory: DatabaseConnection, *, note_type: str = CHECKIN_NOTE_TYPE):
        self._conn_factory = conn_factory
        self._note_type = note_type

    def get_checkin_note(self, person_id: int) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT text FROM notes WHERE person_id=%s AND note_type=%s",
                    (int(person_id), self._note_type),
                )
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise StoreError(f"note store unavailable: {e}") from e
        return row["text"] if row else None

    def save_checkin_note(self, person_id: int, text: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO notes(person_id, note_type, text, is_system)
                    VALUES(%s,%s,%s,0)
                    ON DUPLICATE KEY UPDATE text=VALUES(text)
                    """,
                    (int(person_id), self._note_type, text),
                )
        except mysql.connector.Error as e:
            raise StoreError(f"note store unavailable: {e}") from e
