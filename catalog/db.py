# catalog/db.py
import logging
import os
import sqlite3
import threading
from typing import List, Sequence, Union

from catalog.models import WriteResult

logger = logging.getLogger(__name__)

class StorageError(Exception):
    """Any failure reported by the database driver."""
    pass

class Database:
    """
    Owns a single sqlite3 connection, opened on first use and reused for the
    lifetime of the object. There is no pool and no reconnect: once the
    connection is broken every query fails with StorageError.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._con = None
        self._lock = threading.Lock()
        parent = os.path.dirname(db_path)
        if parent and db_path != ":memory:":
            os.makedirs(parent, exist_ok=True)

    def _connect_locked(self) -> sqlite3.Connection:
        # caller holds self._lock
        if self._con is None:
            try:
                con = sqlite3.connect(self.db_path, check_same_thread=False)
            except sqlite3.Error as e:
                logger.error("Failed to open database %s: %s", self.db_path, e)
                raise StorageError(str(e)) from e
            con.row_factory = sqlite3.Row
            self._con = con
            logger.info("Opened database connection to %s", self.db_path)
        return self._con

    @property
    def connection(self) -> sqlite3.Connection:
        with self._lock:
            return self._connect_locked()

    def query(self, sql: str, params: Sequence = ()) -> Union[List[sqlite3.Row], WriteResult]:
        """
        Execute one parameterized statement.
        Returns the fetched rows for statements producing a result set,
        otherwise a committed WriteResult.
        """
        with self._lock:
            con = self._connect_locked()
            try:
                cur = con.execute(sql, tuple(params))
                if cur.description is not None:
                    return cur.fetchall()
                con.commit()
                return WriteResult(affected_rows=cur.rowcount, last_row_id=cur.lastrowid)
            except sqlite3.Error as e:
                if con.in_transaction:
                    con.rollback()
                logger.error("Query failed: %s | sql=%s", e, " ".join(sql.split()))
                raise StorageError(str(e)) from e

    def executescript(self, script: str) -> None:
        with self._lock:
            con = self._connect_locked()
            try:
                con.executescript(script)
            except sqlite3.Error as e:
                logger.error("Script failed: %s", e)
                raise StorageError(str(e)) from e

    def close(self) -> None:
        with self._lock:
            if self._con is not None:
                self._con.close()
                self._con = None
                logger.info("Closed database connection to %s", self.db_path)
