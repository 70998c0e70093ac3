"""Main CLI entry point."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from db.enums import AppointmentStatus, EntryType, ExportKind, PeriodType

app = typer.Typer(
    name="clinic",
    help="Clinic dashboard backend CLI",
    add_completion=False,
)

console = Console()


@app.command("init-db")
def init_db(
    force: bool = typer.Option(False, "--force", "-f", help="Drop and recreate tables")
):
    """Initialize the database schema."""
    from db.connection import get_engine, init_database
    from db.models import Base

    with console.status("Initializing database..."):
        if force:
            Base.metadata.drop_all(get_engine())
            console.print("[yellow]Dropped existing tables[/yellow]")
        created = init_database()

    if created:
        console.print(f"[green]Created tables: {', '.join(created)}[/green]")
    else:
        console.print("[green]Database already initialized[/green]")


@app.command()
def seed():
    """Insert sample patients, appointments and financial entries."""
    from db.connection import get_session, init_database
    from db.sample_data import seed as seed_sample_data

    init_database()
    with get_session() as session:
        created = seed_sample_data(session)

    if created:
        console.print(f"[green]Seeded {created} rows[/green]")
    else:
        console.print("[yellow]Sample data already present, skipping[/yellow]")


@app.command()
def export(
    kind: ExportKind = typer.Argument(..., help="What to export"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Period start (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", "-e", help="Period end (YYYY-MM-DD)"),
    period_type: Optional[PeriodType] = typer.Option(None, "--period-type", "-t", help="day, week, month or custom"),
    status: Optional[AppointmentStatus] = typer.Option(None, "--status", help="Appointment status filter"),
    entry_type: Optional[EntryType] = typer.Option(None, "--type", help="Financial entry type filter"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory to write into"),
    filename: Optional[str] = typer.Option(None, "--filename", "-n", help="Base name, extension is added"),
):
    """Export clinic data to a CSV file."""
    from clinic.services.delivery import DirectoryDelivery
    from clinic.services.errors import DeliveryError, PeriodError
    from clinic.services.export import ExportService
    from clinic.services.periods import parse_period
    from config import get_settings
    from db.connection import get_session

    try:
        period = parse_period(start, end, period_type)
    except PeriodError as exc:
        raise typer.BadParameter(str(exc))

    settings = get_settings()
    delivery = DirectoryDelivery(output_dir or settings.export_dir)

    with get_session() as session:
        service = ExportService(session, delivery, settings.export)
        try:
            result = service.export(kind, period, filename, status, entry_type)
        except DeliveryError as exc:
            raise typer.BadParameter(str(exc), param_hint="--filename / --output-dir")

    if not result.delivered:
        console.print(f"[yellow]Nothing to export for {kind.value}[/yellow]")
        return

    table = Table(title="Export Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("File", result.filename)
    table.add_row("Written To", result.destination or "")
    table.add_row("Rows", str(result.row_count))
    table.add_row("Columns", ", ".join(result.columns))
    table.add_row("Bytes", str(result.byte_size))

    console.print(table)

    if result.warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for warn in result.warnings:
            console.print(f"  {warn}")


@app.command()
def statuses():
    """List status badges and their labels."""
    from clinic.services.status import STATUS_BADGES, FALLBACK_STATUS

    table = Table(title="Status Badges")
    table.add_column("Status", style="cyan")
    table.add_column("Label", style="green")
    table.add_column("Tone")
    table.add_column("Icon")
    table.add_column("Pulse", justify="center")

    for badge in STATUS_BADGES.values():
        table.add_row(badge.key, badge.label, badge.tone, badge.icon, "Yes" if badge.pulse else "No")

    console.print(table)
    console.print(f"\nUnknown statuses fall back to [bold]{FALLBACK_STATUS}[/bold]")


if __name__ == "__main__":
    app()
