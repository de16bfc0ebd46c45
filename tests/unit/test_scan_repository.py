from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from cvscan.database.exceptions import PersistenceError, ScanNotFoundError
from cvscan.database.models import ScanRecord, ScanResultRecord, ScanStatus
from cvscan.database.repositories.scan_repository import ScanRepository
from cvscan.database.repositories.scan_result_repository import ScanResultRepository

PATCH_TARGET = "cvscan.database.repositories.scan_repository.get_connection"


def _make_row(**overrides: object) -> dict:
    row = {
        "id": 7,
        "file_name": "cv.pdf",
        "file_path": "abc-cv.pdf",
        "file_size": 2048,
        "extracted_name": None,
        "extracted_text": None,
        "search_query": None,
        "summary": None,
        "status": "processing",
        "error_message": None,
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestInsertScan:
    @patch(PATCH_TARGET)
    def test_inserts_processing_row_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row()

        scan = ScanRepository().insert_scan("cv.pdf", "abc-cv.pdf", 2048)

        sql, params = mock_cursor.execute.call_args.args
        assert "INSERT INTO scans" in sql
        assert params == ("cv.pdf", "abc-cv.pdf", 2048, "processing")
        mock_conn.commit.assert_called_once()
        assert isinstance(scan, ScanRecord)
        assert scan.id == 7
        assert scan.status is ScanStatus.PROCESSING

    @patch(PATCH_TARGET)
    def test_wraps_database_errors(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(PersistenceError, match="connection lost"):
            ScanRepository().insert_scan("cv.pdf", "abc-cv.pdf", 2048)
        mock_conn.commit.assert_not_called()

    @patch(PATCH_TARGET)
    def test_missing_returning_row_is_an_error(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(PersistenceError, match="returned no row"):
            ScanRepository().insert_scan("cv.pdf", "abc-cv.pdf", 2048)


class TestCompleteScan:
    @patch(PATCH_TARGET)
    def test_updates_only_processing_scans(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(
            status="completed", extracted_name="Jordan Lee", summary="s"
        )

        scan = ScanRepository().complete_scan(
            7,
            extracted_name="Jordan Lee",
            extracted_text="text",
            search_query="query",
            summary="s",
        )

        sql, params = mock_cursor.execute.call_args.args
        assert "UPDATE scans" in sql
        assert "AND status = %s" in sql
        assert params == ("completed", "Jordan Lee", "text", "query", "s", None, 7, "processing")
        mock_conn.commit.assert_called_once()
        assert scan.status is ScanStatus.COMPLETED

    @patch(PATCH_TARGET)
    def test_raises_not_found_when_no_row_updated(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(ScanNotFoundError, match="Scan 99 not found or not processing"):
            ScanRepository().complete_scan(
                99, extracted_name=None, extracted_text="", search_query="", summary=""
            )
        mock_conn.commit.assert_not_called()


class TestFailScan:
    @patch(PATCH_TARGET)
    def test_sets_failed_status_and_message(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(status="failed", error_message="boom")

        scan = ScanRepository().fail_scan(7, "boom")

        _sql, params = mock_cursor.execute.call_args.args
        assert params == ("failed", None, None, None, None, "boom", 7, "processing")
        assert scan.status is ScanStatus.FAILED
        assert scan.error_message == "boom"

    @patch(PATCH_TARGET)
    def test_keeps_collected_artifacts(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(status="failed")

        ScanRepository().fail_scan(
            7, "boom", extracted_name="Jordan Lee", extracted_text="t", search_query="q"
        )

        _sql, params = mock_cursor.execute.call_args.args
        assert params[:4] == ("failed", "Jordan Lee", "t", "q")


class TestDeleteScan:
    @patch(PATCH_TARGET)
    def test_deletes_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value.rowcount = 1

        ScanRepository().delete_scan(7)

        mock_conn.execute.assert_called_once_with("DELETE FROM scans WHERE id = %s", (7,))
        mock_conn.commit.assert_called_once()

    @patch(PATCH_TARGET)
    def test_wraps_database_errors(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.side_effect = psycopg.OperationalError("down")

        with pytest.raises(PersistenceError):
            ScanRepository().delete_scan(7)

    @patch(PATCH_TARGET)
    def test_missing_scan_raises_not_found(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value.rowcount = 0

        with pytest.raises(ScanNotFoundError):
            ScanRepository().delete_scan(7)


class TestFindById:
    @patch(PATCH_TARGET)
    def test_returns_scan_with_results(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(status="completed")
        result_repo = MagicMock(spec=ScanResultRepository)
        result_repo.find_by_scan_id.return_value = [
            ScanResultRecord(id=1, scan_id=7, title="t", url="https://u")
        ]

        found = ScanRepository(result_repo=result_repo).find_by_id(7)

        assert found.scan.id == 7
        assert [r.id for r in found.results] == [1]
        result_repo.find_by_scan_id.assert_called_once_with(7)

    @patch(PATCH_TARGET)
    def test_raises_not_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(ScanNotFoundError, match="Scan 404 not found"):
            ScanRepository(result_repo=MagicMock()).find_by_id(404)


class TestFailStaleScans:
    @patch(PATCH_TARGET)
    def test_returns_affected_row_count(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 3

        count = ScanRepository().fail_stale_scans(30, "stale")

        sql, params = mock_cursor.execute.call_args.args
        assert "make_interval" in sql
        assert params == ("failed", "stale", "processing", 30)
        mock_conn.commit.assert_called_once()
        assert count == 3
