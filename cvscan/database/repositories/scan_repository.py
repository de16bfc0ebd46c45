import psycopg
from psycopg.rows import dict_row

from cvscan.database.connection import get_connection
from cvscan.database.exceptions import PersistenceError, ScanNotFoundError
from cvscan.database.models import ScanRecord, ScanStatus, ScanWithResults
from cvscan.database.repositories.scan_result_repository import ScanResultRepository

SCAN_COLUMNS = """
    id, file_name, file_path, file_size, extracted_name, extracted_text,
    search_query, summary, status, error_message, created_at, updated_at
"""


class ScanRepository:
    """Database operations for the scans table."""

    def __init__(self, result_repo: ScanResultRepository | None = None) -> None:
        self._result_repo = result_repo if result_repo is not None else ScanResultRepository()

    def insert_scan(self, file_name: str, file_path: str, file_size: int) -> ScanRecord:
        """Create the scan row for an upload whose bytes are already stored.

        Raises:
            PersistenceError: if the row cannot be inserted.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO scans (file_name, file_path, file_size, status)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {SCAN_COLUMNS}
                        """,
                        (file_name, file_path, file_size, ScanStatus.PROCESSING.value),
                    )
                    row = cur.fetchone()
                if row is None:
                    raise PersistenceError(f"Insert of scan for {file_path} returned no row")
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to insert scan for {file_path}: {exc}") from exc
        return ScanRecord.from_row(row)

    def complete_scan(
        self,
        scan_id: int,
        *,
        extracted_name: str | None,
        extracted_text: str,
        search_query: str,
        summary: str,
    ) -> ScanRecord:
        """Move a processing scan to completed and store its artifacts."""
        return self._finish(
            scan_id,
            ScanStatus.COMPLETED,
            extracted_name=extracted_name,
            extracted_text=extracted_text,
            search_query=search_query,
            summary=summary,
            error_message=None,
        )

    def fail_scan(
        self,
        scan_id: int,
        error_message: str,
        *,
        extracted_name: str | None = None,
        extracted_text: str | None = None,
        search_query: str | None = None,
    ) -> ScanRecord:
        """Move a processing scan to failed, keeping whatever artifacts exist."""
        return self._finish(
            scan_id,
            ScanStatus.FAILED,
            extracted_name=extracted_name,
            extracted_text=extracted_text,
            search_query=search_query,
            summary=None,
            error_message=error_message,
        )

    def _finish(
        self,
        scan_id: int,
        status: ScanStatus,
        *,
        extracted_name: str | None,
        extracted_text: str | None,
        search_query: str | None,
        summary: str | None,
        error_message: str | None,
    ) -> ScanRecord:
        """Single terminal update, guarded on status so it applies at most once.

        Raises:
            ScanNotFoundError: if the scan does not exist or is already terminal.
            PersistenceError: on any database failure.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        UPDATE scans
                        SET status = %s,
                            extracted_name = %s,
                            extracted_text = %s,
                            search_query = %s,
                            summary = %s,
                            error_message = %s,
                            updated_at = NOW()
                        WHERE id = %s
                          AND status = %s
                        RETURNING {SCAN_COLUMNS}
                        """,
                        (
                            status.value,
                            extracted_name,
                            extracted_text,
                            search_query,
                            summary,
                            error_message,
                            scan_id,
                            ScanStatus.PROCESSING.value,
                        ),
                    )
                    row = cur.fetchone()
                if row is None:
                    raise ScanNotFoundError(f"Scan {scan_id} not found or not processing")
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Failed to mark scan {scan_id} as {status.value}: {exc}"
            ) from exc
        return ScanRecord.from_row(row)

    def delete_scan(self, scan_id: int) -> None:
        """Delete a scan and, by cascade, its results.

        Raises:
            ScanNotFoundError: if no scan with this ID exists.
        """
        try:
            with get_connection() as conn:
                cur = conn.execute("DELETE FROM scans WHERE id = %s", (scan_id,))
                deleted = cur.rowcount
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to delete scan {scan_id}: {exc}") from exc
        if deleted == 0:
            raise ScanNotFoundError(f"Scan {scan_id} not found")

    def find_by_id(self, scan_id: int) -> ScanWithResults:
        """Load a scan with its results.

        Raises:
            ScanNotFoundError: if no scan with this ID exists.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {SCAN_COLUMNS} FROM scans WHERE id = %s",
                        (scan_id,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to load scan {scan_id}: {exc}") from exc

        if row is None:
            raise ScanNotFoundError(f"Scan {scan_id} not found")

        return ScanWithResults(
            scan=ScanRecord.from_row(row),
            results=self._result_repo.find_by_scan_id(scan_id),
        )

    def fail_stale_scans(self, older_than_minutes: int, error_message: str) -> int:
        """Mark scans stuck in processing longer than the cutoff as failed.

        Returns the number of rows moved to failed.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE scans
                        SET status = %s, error_message = %s, updated_at = NOW()
                        WHERE status = %s
                          AND updated_at < NOW() - make_interval(mins => %s)
                        """,
                        (
                            ScanStatus.FAILED.value,
                            error_message,
                            ScanStatus.PROCESSING.value,
                            older_than_minutes,
                        ),
                    )
                    affected = cur.rowcount
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to sweep stale scans: {exc}") from exc
        return max(affected, 0)
