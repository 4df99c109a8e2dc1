from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ledgerlens.db import get_connection, init_db, list_expenses
from ledgerlens.errors import FormatError, InternalInvariantError, LedgerLensError
from ledgerlens.exporter import export_expenses
from ledgerlens.importer import detect_file, import_file
from ledgerlens.log import configure_logging
from ledgerlens.registry import registry, resolve_key
from ledgerlens.settings import DEFAULTS, get_chunk_size, get_data_dir, get_workers, load_settings, save_settings

app = typer.Typer(help="Ledgerlens: recognize bank statement exports and import them as expenses.")

console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Logging level, e.g. INFO or DEBUG"),
):
    """Ledgerlens: recognize bank statement exports and import them as expenses."""
    configure_logging(log_level)


def get_db_path() -> Path:
    return get_data_dir() / "ledgerlens.db"


def _fail(exc: LedgerLensError) -> None:
    if isinstance(exc, FormatError):
        typer.echo(f"File is not valid delimited text: {exc}", err=True)
    elif isinstance(exc, InternalInvariantError):
        typer.echo(f"Definition is misconfigured: {exc}", err=True)
    else:
        typer.echo(f"Failed to parse file: {exc}", err=True)
    raise typer.Exit(1)


@app.command()
def init(
    data_dir: str = typer.Option(None, "--data-dir", help="Path for ledgerlens data (default: ~/Documents/ledgerlens)"),
    workers: int = typer.Option(None, "--workers", min=1, help="Threads used to match and parse statements"),
    chunk_size: int = typer.Option(None, "--chunk-size", min=1, help="Rows handed to each parsing thread at a time"),
):
    """Choose a data directory and pool sizes, and initialize the expense database."""
    settings = load_settings()

    if data_dir:
        settings["data_dir"] = str(Path(data_dir).expanduser().resolve())
    elif settings == DEFAULTS:
        chosen = typer.prompt("Data directory", default=settings["data_dir"])
        settings["data_dir"] = str(Path(chosen).expanduser().resolve())
    if workers is not None:
        settings["workers"] = workers
    if chunk_size is not None:
        settings["chunk_size"] = chunk_size

    save_settings(settings)

    resolved = Path(settings["data_dir"])
    resolved.mkdir(parents=True, exist_ok=True)
    conn = get_connection(resolved / "ledgerlens.db")
    init_db(conn)
    conn.close()

    typer.echo(
        f"Initialized ledgerlens at {resolved} "
        f"({settings['workers']} workers, chunks of {settings['chunk_size']} rows)"
    )


@app.command()
def definitions():
    """List the supported statement layouts."""
    table = Table(title="Definitions")
    table.add_column("Key", style="dim")
    table.add_column("Name")
    table.add_column("Header")
    table.add_column("Columns")
    for key, definition in registry.items():
        columns = ", ".join(
            f"{role}@{spec.position}{'' if spec.required else '?'}"
            for role, spec in definition.primary_columns.items()
        )
        table.add_row(key.value, definition.name, "yes" if definition.has_header else "no", columns)
    console.print(table)


@app.command()
def detect(file: Path = typer.Argument(help="Path to a CSV or XLSX statement")):
    """Show which definitions a statement file matches."""
    try:
        matched = detect_file(file, workers=get_workers())
    except LedgerLensError as exc:
        _fail(exc)
    except (OSError, ValueError) as exc:
        typer.echo(f"Cannot read {file}: {exc}", err=True)
        raise typer.Exit(1)

    if not matched:
        typer.echo("No matching definition found.")
        raise typer.Exit(1)

    table = Table(title=f"Matching definitions ({len(matched)})")
    table.add_column("Key")
    table.add_column("Name")
    for key in sorted(matched, key=lambda k: k.value):
        table.add_row(key.value, registry[key].name)
    console.print(table)


@app.command("import")
def import_cmd(
    file: Path = typer.Argument(help="Path to a CSV or XLSX statement"),
    definition: str = typer.Option(None, help="Definition key; detected when omitted"),
):
    """Parse a statement and store its expenses."""
    workers = get_workers()
    chunk_size = get_chunk_size()
    try:
        if definition:
            key = resolve_key(definition)
        else:
            matched = detect_file(file, workers=workers)
            if not matched:
                typer.echo("No matching definition found.")
                raise typer.Exit(1)
            candidates = sorted(matched, key=lambda k: k.value)
            if len(candidates) == 1:
                key = candidates[0]
            else:
                for i, candidate in enumerate(candidates, start=1):
                    typer.echo(f"  {i}. {registry[candidate].name} ({candidate.value})")
                choice = typer.prompt("Several definitions match; choose one", type=int)
                if not 1 <= choice <= len(candidates):
                    typer.echo(f"Invalid choice: {choice}")
                    raise typer.Exit(1)
                key = candidates[choice - 1]

        conn = get_connection(get_db_path())
        init_db(conn)
        try:
            result = import_file(conn, file, key, workers=workers, chunk_size=chunk_size)
        finally:
            conn.close()
    except LedgerLensError as exc:
        _fail(exc)
    except (OSError, ValueError) as exc:
        typer.echo(f"Cannot read {file}: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Using {registry[key].name}")
    typer.echo(f"{result['imported']} imported, {result['skipped']} skipped (duplicates)")


@app.command()
def expenses(
    export: Path = typer.Option(None, "--export", help="Write expenses to this CSV instead of printing them"),
):
    """List stored expenses, or export them in the migration layout."""
    conn = get_connection(get_db_path())
    init_db(conn)
    rows = list_expenses(conn)
    conn.close()

    if export:
        count = export_expenses(rows, export)
        typer.echo(f"Exported {count} expenses to {export}")
        return

    if not rows:
        typer.echo("No expenses stored.")
        return

    table = Table(title=f"Expenses ({len(rows)})")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Tags")
    for e in rows:
        color = "red" if e.amount > 0 else "green"
        table.add_row(
            e.date.strftime("%Y-%m-%d"), e.description,
            f"[{color}]${e.amount:,.2f}[/{color}]", ", ".join(sorted(e.tags)),
        )
    console.print(table)


if __name__ == "__main__":
    app()
