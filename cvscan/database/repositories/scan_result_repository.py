import psycopg
from psycopg.rows import dict_row

from cvscan.database.connection import get_connection
from cvscan.database.exceptions import PersistenceError
from cvscan.database.models import NewScanResult, ScanResultRecord
from cvscan.logging.logger import Log


class ScanResultRepository:
    """Database operations for the scan_results table."""

    def insert_results(
        self, scan_id: int, rows: list[NewScanResult]
    ) -> list[ScanResultRecord]:
        """Bulk insert enrichment hits for a scan, in the given order.

        All rows share one transaction; each row runs in its own savepoint so a
        rejected row is logged and skipped without losing the others.

        Returns:
            The rows that were persisted, in insertion order.

        Raises:
            PersistenceError: if the transaction as a whole fails.
        """
        if not rows:
            return []

        inserted: list[ScanResultRecord] = []
        try:
            with get_connection() as conn:
                with conn.transaction():
                    with conn.cursor(row_factory=dict_row) as cur:
                        for position, row in enumerate(rows):
                            record = self._insert_one(conn, cur, scan_id, position, row)
                            if record is not None:
                                inserted.append(record)
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Failed to insert results for scan {scan_id}: {exc}"
            ) from exc
        return inserted

    @staticmethod
    def _insert_one(
        conn: psycopg.Connection,  # type: ignore[type-arg]
        cur: psycopg.Cursor,  # type: ignore[type-arg]
        scan_id: int,
        position: int,
        row: NewScanResult,
    ) -> ScanResultRecord | None:
        try:
            with conn.transaction():
                cur.execute(
                    """
                    INSERT INTO scan_results (scan_id, title, url, content, score)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, scan_id, title, url, content, score, created_at
                    """,
                    (scan_id, row.title, row.url, row.content, row.score),
                )
                created = cur.fetchone()
        except psycopg.Error as exc:
            Log.warning(
                "Skipping scan result that failed to insert",
                scan_id=scan_id,
                position=position,
                url=row.url,
                error=str(exc),
            )
            return None
        if created is None:
            return None
        return ScanResultRecord.from_row(created)

    def find_by_scan_id(self, scan_id: int) -> list[ScanResultRecord]:
        """Return the results of a scan in provider order."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, scan_id, title, url, content, score, created_at
                        FROM scan_results
                        WHERE scan_id = %s
                        ORDER BY id
                        """,
                        (scan_id,),
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to load results for scan {scan_id}: {exc}") from exc
        return [ScanResultRecord.from_row(row) for row in rows]
