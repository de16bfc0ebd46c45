from pathlib import Path
from typing import Optional

import typer

from cvscan.config.settings import Settings
from cvscan.database.connection import close_pool, get_connection, init_pool
from cvscan.database.exceptions import PersistenceError, ScanNotFoundError
from cvscan.database.models import ScanWithResults
from cvscan.database.repositories.scan_repository import ScanRepository
from cvscan.logging.logger import Log
from cvscan.pipeline.models import UploadedFile
from cvscan.pipeline.scanner import build_scanner
from cvscan.storage.exceptions import StoreError
from cvscan.storage.local_store import LocalObjectStore

SCHEMA_PATH = Path(__file__).parent / "database" / "schema.sql"
STALE_SCAN_MESSAGE = "Scan did not finish in time"

app = typer.Typer(
    name="cvscan",
    help="Scan uploaded CVs, enrich them with web search and record the outcome.",
    add_completion=False,
)


def _bootstrap() -> Settings:
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)
    return settings


def _print_scan(result: ScanWithResults) -> None:
    scan = result.scan
    typer.echo(f"Scan {scan.id}: {scan.status.value}")
    typer.echo(f"  file:    {scan.file_name} ({scan.file_size} bytes) -> {scan.file_path}")
    typer.echo(f"  name:    {scan.extracted_name or '-'}")
    typer.echo(f"  query:   {scan.search_query or '-'}")
    typer.echo(f"  summary: {scan.summary or '-'}")
    if scan.error_message:
        typer.echo(f"  error:   {scan.error_message}")
    for index, item in enumerate(result.results, start=1):
        score = f"{item.score:.2f}" if item.score is not None else "-"
        typer.echo(f"  {index}. [{score}] {item.title} <{item.url}>")


@app.command()
def scan(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    mime_type: Optional[str] = typer.Option(None, help="Override the guessed MIME type."),
) -> None:
    """Scan a local PDF file."""
    settings = _bootstrap()
    try:
        scanner = build_scanner(settings)
        try:
            outcome = scanner.scan_document(UploadedFile.from_path(path, mime_type=mime_type))
        finally:
            scanner.close()
    finally:
        close_pool()

    if outcome.scan is None:
        suffix = f" (scan {outcome.scan_id})" if outcome.scan_id is not None else ""
        typer.echo(f"Error: {outcome.error}{suffix}", err=True)
        raise typer.Exit(code=1)
    _print_scan(outcome.scan)


@app.command()
def show(scan_id: int = typer.Argument(..., help="ID of the scan to display.")) -> None:
    """Show a stored scan and its search results."""
    _bootstrap()
    try:
        result = ScanRepository().find_by_id(scan_id)
    except ScanNotFoundError as exc:
        typer.echo(f"Error: scan {scan_id} not found", err=True)
        raise typer.Exit(code=1) from exc
    except PersistenceError as exc:
        Log.error("Scan lookup failed", scan_id=scan_id, error=str(exc))
        typer.echo("Error: could not load scan", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        close_pool()
    _print_scan(result)


@app.command()
def delete(scan_id: int = typer.Argument(..., help="ID of the scan to delete.")) -> None:
    """Delete a scan, its results and its stored PDF."""
    settings = _bootstrap()
    store = LocalObjectStore(root=Path(settings.storage_root), bucket=settings.storage_bucket)
    repo = ScanRepository()
    try:
        file_path = repo.find_by_id(scan_id).scan.file_path
        repo.delete_scan(scan_id)
    except ScanNotFoundError as exc:
        typer.echo(f"Error: scan {scan_id} not found", err=True)
        raise typer.Exit(code=1) from exc
    except PersistenceError as exc:
        Log.error("Scan delete failed", scan_id=scan_id, error=str(exc))
        typer.echo("Error: could not delete scan", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        close_pool()

    try:
        store.delete(file_path)
    except StoreError as exc:
        Log.error("Stored object left behind", scan_id=scan_id, path=file_path, error=str(exc))
    Log.info("Scan deleted", scan_id=scan_id, path=file_path)
    typer.echo(f"Deleted scan {scan_id}")


@app.command()
def sweep(
    older_than_minutes: Optional[int] = typer.Option(
        None, min=1, help="Age of processing scans to fail (default: STALE_SCAN_MINUTES)."
    ),
) -> None:
    """Mark scans stuck in processing as failed."""
    settings = _bootstrap()
    minutes = older_than_minutes or settings.stale_scan_minutes
    try:
        count = ScanRepository().fail_stale_scans(minutes, STALE_SCAN_MESSAGE)
    except PersistenceError as exc:
        Log.error("Sweep failed", error=str(exc))
        typer.echo("Error: sweep failed", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        close_pool()
    Log.info("Sweep finished", failed_scans=count, older_than_minutes=minutes)
    typer.echo(f"Marked {count} stale scan(s) as failed")


@app.command("init-db")
def init_db() -> None:
    """Create the scans and scan_results tables."""
    _bootstrap()
    try:
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text())
            conn.commit()
    finally:
        close_pool()
    typer.echo("Schema applied")


def main() -> None:
    """Entry point for the ``cvscan`` console script."""
    app()


if __name__ == "__main__":
    main()
