"""
Lift Record Store implementations.

The ranking functions never touch storage themselves; callers read a
snapshot from a LiftStore and pass it in.
"""

import json
import logging
import os
import threading
import uuid
from abc import ABC, abstractmethod
from tempfile import NamedTemporaryFile
from typing import Any, Dict, List

import psycopg2
import psycopg2.extras

from .db import get_db_connection, release_db_connection
from .groups import normalize_members
from .models import LiftEntry

logger = logging.getLogger(__name__)

LIFTS_KEY = "lifts"
GROUPS_KEY = "groups"  # group name -> member names


class LiftStore(ABC):
    """Durable storage of lift entries and group rosters."""

    @abstractmethod
    def get_all_lift_entries(self) -> List[LiftEntry]:
        ...

    @abstractmethod
    def get_group_members(self, group_name: str) -> List[str]:
        """Members of a group; an unknown group has none."""

    @abstractmethod
    def append_lift_entry(self, fields: Dict[str, Any]) -> LiftEntry:
        """Validate and store a new entry, assigning its id."""

    @abstractmethod
    def save_group(self, group_name: str, members: List[str]) -> None:
        """Replace the whole roster of a group."""


class JsonFileLiftStore(LiftStore):
    """
    Local persisted map: one JSON document holding every lift and group.
    With path=None the document only lives in memory.
    """

    def __init__(self, path: str | None = None):
        self.path = path
        self._lock = threading.Lock()
        self._memory: Dict[str, Any] = {LIFTS_KEY: [], GROUPS_KEY: {}}

    def _load(self) -> Dict[str, Any]:
        if self.path is None:
            return self._memory
        if not os.path.exists(self.path):
            return {LIFTS_KEY: [], GROUPS_KEY: {}}
        with open(self.path, encoding="utf-8") as fh:
            data = json.load(fh)
        data.setdefault(LIFTS_KEY, [])
        data.setdefault(GROUPS_KEY, {})
        return data

    def _dump(self, data: Dict[str, Any]) -> None:
        if self.path is None:
            self._memory = data
            return
        # Serialise first so a bad document never touches the disk
        payload = json.dumps(data, ensure_ascii=False, indent=2) + "\n"
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            with NamedTemporaryFile("w", dir=directory, suffix=".tmp", delete=False, encoding="utf-8") as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
            os.replace(tmp_path, self.path)
        except OSError:
            logger.error(f"Could not write lift store {self.path}", exc_info=True)
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_all_lift_entries(self) -> List[LiftEntry]:
        with self._lock:
            raw = list(self._load()[LIFTS_KEY])
        return [LiftEntry.from_dict(item) for item in raw]

    def get_group_members(self, group_name: str) -> List[str]:
        with self._lock:
            return list(self._load()[GROUPS_KEY].get(group_name, []))

    def append_lift_entry(self, fields: Dict[str, Any]) -> LiftEntry:
        entry = LiftEntry.from_dict(fields, entry_id=str(uuid.uuid4()))
        with self._lock:
            data = self._load()
            data[LIFTS_KEY].append(entry.to_dict())
            self._dump(data)
        logger.info(f"Stored lift {entry.id} ({entry.exercise.value}) for user {entry.user_id}")
        return entry

    def save_group(self, group_name: str, members: List[str]) -> None:
        roster = normalize_members(members)
        with self._lock:
            data = self._load()
            data[GROUPS_KEY][group_name] = roster
            self._dump(data)
        logger.info(f"Saved group '{group_name}' with {len(roster)} members")


class PostgresLiftStore(LiftStore):
    """Hosted relational backend; see database/create_schema.py for the tables."""

    def __init__(self, get_connection=get_db_connection, release_connection=release_db_connection):
        self._get_connection = get_connection
        self._release_connection = release_connection

    @staticmethod
    def _row_to_entry(row) -> LiftEntry:
        data = dict(row)
        data["weight_kg"] = float(data["weight_kg"])
        data["date"] = data.pop("performed_at")
        return LiftEntry.from_dict(data)

    def get_all_lift_entries(self) -> List[LiftEntry]:
        conn = None
        try:
            conn = self._get_connection()
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(
                    """
                    SELECT id::text AS id, user_id, user_name, exercise, reps, weight_kg,
                           performed_at, gym_id, gender, age, equipment, verification
                    FROM lift_entries
                    ORDER BY created_at ASC, id ASC;
                    """
                )
                rows = cur.fetchall()
            return [self._row_to_entry(row) for row in rows]
        except psycopg2.Error as e:
            logger.error(f"Database error reading lift entries: {e}", exc_info=True)
            raise
        finally:
            if conn:
                self._release_connection(conn)

    def get_group_members(self, group_name: str) -> List[str]:
        conn = None
        try:
            conn = self._get_connection()
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(
                    """
                    SELECT member_name FROM group_members
                    WHERE group_name = %s
                    ORDER BY position ASC;
                    """,
                    (group_name,)
                )
                return [row["member_name"] for row in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Database error reading group '{group_name}': {e}", exc_info=True)
            raise
        finally:
            if conn:
                self._release_connection(conn)

    def append_lift_entry(self, fields: Dict[str, Any]) -> LiftEntry:
        entry = LiftEntry.from_dict(fields, entry_id=str(uuid.uuid4()))
        conn = None
        try:
            conn = self._get_connection()
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO lift_entries (id, user_id, user_name, exercise, reps, weight_kg,
                                              performed_at, gym_id, gender, age, equipment, verification)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s);
                    """,
                    (
                        entry.id, entry.user_id, entry.user_name, entry.exercise.value,
                        entry.reps, entry.weight_kg, entry.date, entry.gym_id,
                        entry.gender.value if entry.gender else None, entry.age,
                        entry.equipment, entry.verification.value,
                    )
                )
            conn.commit()
            logger.info(f"Stored lift {entry.id} ({entry.exercise.value}) for user {entry.user_id}")
            return entry
        except psycopg2.Error as e:
            logger.error(f"Database error storing lift for user {entry.user_id}: {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                self._release_connection(conn)

    def save_group(self, group_name: str, members: List[str]) -> None:
        roster = normalize_members(members)
        conn = None
        try:
            conn = self._get_connection()
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO lift_groups (name, updated_at) VALUES (%s, NOW())
                    ON CONFLICT (name) DO UPDATE SET updated_at = NOW();
                    """,
                    (group_name,)
                )
                cur.execute("DELETE FROM group_members WHERE group_name = %s;", (group_name,))
                for position, name in enumerate(roster):
                    cur.execute(
                        "INSERT INTO group_members (group_name, position, member_name) VALUES (%s, %s, %s);",
                        (group_name, position, name)
                    )
            conn.commit()
            logger.info(f"Saved group '{group_name}' with {len(roster)} members")
        except psycopg2.Error as e:
            logger.error(f"Database error saving group '{group_name}': {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                self._release_connection(conn)
