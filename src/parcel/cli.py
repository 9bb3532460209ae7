# src/parcel/cli.py
"""
Parcel Command Line Interface (CLI).

This module is a small terminal front end over the notes store, built with
`typer` and `rich`. Every command goes through the same path as the desktop
shell: the JSON backend is loaded through :class:`PersistenceGateway`, so
sanitization and corruption handling behave identically.

Usage
-----
    $ parcel list --search milk --sort title
    $ parcel add "Grocery List" --body "milk, eggs" --folder Notes --pin
    $ parcel folders
    $ parcel export --format markdown -o notes.md
    $ parcel path
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from parcel.core.contracts import NOTE_COLORS, Folder
from parcel.core.settings import load_settings
from parcel.core.store import NotesStore, PersistenceGateway
from parcel.core.store.views import UNTITLED
from parcel.storage import JsonFileBackend, export_json, export_markdown

load_dotenv()

app = typer.Typer(
    help="Parcel: local notes with folders, pins and colors.",
    rich_markup_mode="markdown",
)
console = Console()

SORT_CHOICES = ("updated", "created", "title")
EXPORT_FORMATS = ("json", "markdown")

DataDirOption = Annotated[
    Path | None,
    typer.Option(
        "--data-dir",
        "-d",
        help="Override the data directory (defaults to PARCEL_DATA_DIR or ~/.parcel).",
    ),
]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _open(data_dir: Path | None) -> PersistenceGateway:
    """Build a store + gateway for ``data_dir`` and hydrate it."""
    settings = load_settings()
    backend = JsonFileBackend(data_dir or settings.data_dir)
    gateway = PersistenceGateway(NotesStore(history_size=settings.history_size), backend)
    asyncio.run(gateway.hydrate())
    if gateway.store.error:
        console.print(f"[bold yellow]⚠️ {gateway.store.error}[/bold yellow]")
    return gateway


def _find_folder(store: NotesStore, name: str) -> Folder:
    wanted = name.strip().casefold()
    for folder in store.folders:
        if folder.name.strip().casefold() == wanted:
            return folder
    console.print(f"[bold red]❌ No folder named {name!r}[/bold red]")
    raise typer.Exit(code=1)


def _format_ms(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


def _check_choice(value: str, choices: tuple[str, ...], option: str) -> str:
    if value not in choices:
        raise typer.BadParameter(f"must be one of: {', '.join(choices)}", param_hint=option)
    return value


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command("list")  # type: ignore[misc]
def list_notes(
    search: Annotated[
        str, typer.Option("--search", "-s", help="Case-insensitive text to look for.")
    ] = "",
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help="Only notes in this folder.")
    ] = None,
    sort: Annotated[
        str, typer.Option("--sort", help="Sort key: updated, created or title.")
    ] = "updated",
    data_dir: DataDirOption = None,
) -> None:
    """List notes, pinned first, filtered and sorted like the notes sidebar."""
    _check_choice(sort, SORT_CHOICES, "--sort")
    store = _open(data_dir).store
    if folder is not None:
        store.set_active_folder(_find_folder(store, folder).id)
    store.set_search(search)
    store.set_sort_by(sort)

    names = {f.id: f.name for f in store.folders}
    notes = store.visible_notes()
    if not notes:
        console.print("[dim]No notes.[/dim]")
        return

    table = Table(title=f"Notes ({len(notes)})")
    table.add_column("", width=2)
    table.add_column("Title", style="bold")
    table.add_column("Folder")
    table.add_column("Color")
    table.add_column("Updated", style="dim")
    for note in notes:
        table.add_row(
            "📌" if note.pinned else "",
            escape(note.title) if note.title else f"[italic]{UNTITLED}[/italic]",
            escape(names.get(note.folder_id or "", "—")),
            note.color,
            _format_ms(note.updated_at),
        )
    console.print(table)


@app.command()  # type: ignore[misc]
def add(
    title: Annotated[str, typer.Argument(help="Title of the new note.")],
    body: Annotated[str, typer.Option("--body", "-b", help="Note text.")] = "",
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help="Folder name (default: first folder).")
    ] = None,
    color: Annotated[
        str, typer.Option("--color", "-c", help=f"One of: {', '.join(NOTE_COLORS)}.")
    ] = "paper",
    pin: Annotated[bool, typer.Option("--pin", help="Pin the note.")] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Create a note and save it."""
    _check_choice(color, NOTE_COLORS, "--color")
    gateway = _open(data_dir)
    store = gateway.store
    if store.error:
        # Refuse to overwrite a document we could not read.
        console.print("[bold red]❌ Not saving over an unreadable notes file.[/bold red]")
        raise typer.Exit(code=1)

    folder_id = _find_folder(store, folder).id if folder is not None else None
    note = store.create_note(folder_id=folder_id, color=color)  # type: ignore[arg-type]
    store.update_note(note.id, title=title, body=body, pinned=pin)

    if not asyncio.run(gateway.save()):
        console.print(f"[bold red]❌ {store.error}[/bold red]")
        raise typer.Exit(code=1)
    console.print(
        Panel.fit(
            f"[bold cyan]{escape(title or UNTITLED)}[/bold cyan]\nid: [dim]{note.id}[/dim]",
            title="Note saved",
            border_style="green",
        )
    )


@app.command()  # type: ignore[misc]
def folders(data_dir: DataDirOption = None) -> None:
    """List folders with their note counts."""
    store = _open(data_dir).store
    table = Table(title="Folders")
    table.add_column("Name", style="bold")
    table.add_column("Notes", justify="right")
    for folder in store.folders:
        count = sum(1 for n in store.notes if n.folder_id == folder.id)
        table.add_row(escape(folder.name), str(count))
    unfiled = sum(1 for n in store.notes if n.folder_id is None)
    if unfiled:
        table.add_row("[italic](no folder)[/italic]", str(unfiled))
    console.print(table)


@app.command()  # type: ignore[misc]
def export(
    fmt: Annotated[
        str, typer.Option("--format", help="Export format: json or markdown.")
    ] = "json",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout."),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Export all notes as JSON or Markdown."""
    _check_choice(fmt, EXPORT_FORMATS, "--format")
    document = _open(data_dir).store.document()
    text = export_json(document) if fmt == "json" else export_markdown(document)

    if output is None:
        typer.echo(text)
        return
    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        console.print(f"[bold red]⚠️ Failed to write {output}: {e}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print(f"[dim]Exported {len(document.notes)} note(s) to: {output}[/dim]")


@app.command()  # type: ignore[misc]
def path(data_dir: DataDirOption = None) -> None:
    """Print the directory that holds the notes document."""
    backend = JsonFileBackend(data_dir or load_settings().data_dir)
    typer.echo(str(backend.data_path))


if __name__ == "__main__":
    app()
