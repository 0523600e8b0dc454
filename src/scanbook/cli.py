#!/usr/bin/env python3
"""
Command line interface for scanbook.

Usage:
    scanbook assemble page-1.jpg page-2.jpg --output scan.pdf
    scanbook add page-1.jpg page-2.jpg --title "Lecture notes"
    scanbook add book.pdf
    scanbook scan --title "Receipts"
    scanbook books --search calculus
    scanbook export <book-id> -o book.pdf
    scanbook render <book-id> 3 --zoom 2.0 -o page-3.png
    scanbook notes add <book-id> 3 "Check this formula"
    scanbook ask summarize <book-id> 3
"""
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from scanbook.ai import AiAction, AiAssistant, TextGeneratorFactory
from scanbook.assembly.page_layout import PageSize
from scanbook.assembly.pdf_assembler import PdfAssembler
from scanbook.capture.camera import CameraSource
from scanbook.config import ScanbookConfig
from scanbook.exceptions import CameraUnavailableError, ScanbookError
from scanbook.imaging.normalizer import NormalizeOptions, PageNormalizer
from scanbook.session import ScanSession
from scanbook.storage.book_store import BookStore
from scanbook.storage.config import StorageConfig
from scanbook.storage.library import DocumentLibrary
from scanbook.storage.records import BookRecord, NoteRecord
from scanbook.viewer.document_viewer import DocumentViewer

app = typer.Typer(help="Scan pages into PDFs, keep them as books and read them with AI help.")
notes_app = typer.Typer(help="Manage notes attached to book pages.")
app.add_typer(notes_app, name="notes")


class CliState:
    """Configuration plus the store and library shared by one command run."""

    def __init__(self, config: ScanbookConfig) -> None:
        self.config = config
        self._store: Optional[BookStore] = None
        self._library: Optional[DocumentLibrary] = None

    @property
    def store(self) -> BookStore:
        if self._store is None:
            self._store = StorageConfig.create_book_store(self.config)
        return self._store

    @property
    def library(self) -> DocumentLibrary:
        if self._library is None:
            self._library = StorageConfig.create_library(self.config)
        return self._library

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


def _build_session(state: CliState, straighten: bool = False) -> ScanSession:
    config = state.config
    normalizer = PageNormalizer(NormalizeOptions(config.capture_max_dimension, config.capture_quality))
    assembler = PdfAssembler(
        page_size=PageSize.by_name(config.page_size),
        recompress=NormalizeOptions(config.assembly_max_dimension, config.assembly_quality),
    )
    return ScanSession(
        state.store,
        state.library,
        normalizer=normalizer,
        assembler=assembler,
        straighten=straighten,
    )


def _find_book(state: CliState, book_id: str) -> BookRecord:
    for book in state.store.list_books():
        if book.id == book_id:
            return book
    raise ScanbookError(f"No book with id {book_id}")


def _open_viewer(state: CliState, book_id: str, zoom: float = 1.5) -> DocumentViewer:
    book = _find_book(state, book_id)
    return DocumentViewer(state.library.load(book.file_path), zoom=zoom)


def _matches(book: BookRecord, search: str) -> bool:
    needle = search.lower()
    return needle in book.title.lower() or needle in book.author.lower()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[str],
        typer.Option("--config", help="JSON configuration file. Defaults to $SCANBOOK_CONFIG, then built-in defaults.")
    ] = None,
) -> None:
    config = ScanbookConfig.from_file(config_path) if config_path else ScanbookConfig.from_env()
    ctx.obj = CliState(config)
    ctx.call_on_close(ctx.obj.close)


@app.command()
def assemble(
    ctx: typer.Context,
    images: Annotated[List[Path], typer.Argument(help="Page images in page order")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output PDF path")] = None,
    straighten: Annotated[bool, typer.Option("--straighten", help="Correct the perspective of photographed pages")] = False,
) -> None:
    """Assemble images into a PDF file without adding it to the library."""
    session = _build_session(_state(ctx), straighten)
    try:
        session.add_files(images)
        path = session.quick_download(output or Path(f"scan-{len(session.pages)}-pages.pdf"))
    except (ScanbookError, OSError) as e:
        _fail(e)
    typer.echo(f"Created {path}")


@app.command()
def add(
    ctx: typer.Context,
    files: Annotated[List[Path], typer.Argument(help="One PDF, or page images in page order")],
    title: Annotated[str, typer.Option("--title", help="Book title")] = "",
    author: Annotated[str, typer.Option("--author", help="Book author")] = "",
    straighten: Annotated[bool, typer.Option("--straighten", help="Correct the perspective of photographed pages")] = False,
) -> None:
    """Add a PDF or a set of page images to the library as a book."""
    session = _build_session(_state(ctx), straighten)
    try:
        session.add_files(files)
        book = session.finalize(title=title, author=author)
    except (ScanbookError, OSError) as e:
        _fail(e)
    typer.echo(f"Added '{book.title}' ({book.id})")


@app.command()
def scan(
    ctx: typer.Context,
    title: Annotated[str, typer.Option("--title", help="Book title")] = "",
    author: Annotated[str, typer.Option("--author", help="Book author")] = "",
    device: Annotated[int, typer.Option("--device", help="Camera device index")] = 0,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Save the PDF here instead of adding a book")] = None,
    straighten: Annotated[bool, typer.Option("--straighten", help="Correct the perspective of photographed pages")] = False,
) -> None:
    """Capture pages with a camera. Enter captures, 'u' removes the last page, 'q' finishes."""
    session = _build_session(_state(ctx), straighten)
    try:
        with CameraSource(device_index=device) as camera:
            while True:
                choice = typer.prompt(f"[{len(session.pages)} pages] Enter=capture, u=undo, q=finish", default="", show_default=False)
                if choice.strip().lower() == "q":
                    break
                if choice.strip().lower() == "u":
                    session.remove_page(len(session.pages) - 1)
                    continue
                try:
                    session.capture_from(camera)
                except CameraUnavailableError as e:
                    # Captured pages are kept, the next prompt can retry.
                    typer.echo(f"Error: {e}", err=True)
        if output is not None:
            path = session.quick_download(output)
            typer.echo(f"Created {path}")
            return
        book = session.finalize(title=title, author=author)
    except (ScanbookError, OSError) as e:
        _fail(e)
    typer.echo(f"Added '{book.title}' ({book.id})")


@app.command()
def books(
    ctx: typer.Context,
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Only books whose title or author contains this text")] = None,
) -> None:
    """List the books in the library, newest first."""
    for book in _state(ctx).store.list_books():
        if search and not _matches(book, search):
            continue
        typer.echo(f"{book.id}  {book.title} - {book.author}  ({book.created_at})")


@app.command()
def export(
    ctx: typer.Context,
    book_id: str,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output PDF path, defaults to the book title")] = None,
) -> None:
    """Write the PDF of a stored book to a file."""
    state = _state(ctx)
    try:
        book = _find_book(state, book_id)
        path = output or Path(f"{book.title or book.id}.pdf")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(state.library.load(book.file_path))
    except (ScanbookError, OSError) as e:
        _fail(e)
    typer.echo(f"Exported '{book.title}' to {path}")


@app.command()
def render(
    ctx: typer.Context,
    book_id: str,
    page_number: int,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output PNG path")] = None,
    zoom: Annotated[float, typer.Option("--zoom", help="Render scale, clamped to 0.5-3.0")] = 1.5,
    steps: Annotated[int, typer.Option("--steps", help="Zoom steps of 0.2 applied after --zoom, negative zooms out")] = 0,
) -> None:
    """Render one page of a stored book as PNG."""
    try:
        viewer = _open_viewer(_state(ctx), book_id, zoom)
        for _ in range(abs(steps)):
            if steps > 0:
                viewer.zoom_in()
            else:
                viewer.zoom_out()
        path = output or Path(f"{book_id}-page-{page_number}.png")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(viewer.render_page(page_number))
    except (ScanbookError, IndexError, OSError) as e:
        _fail(e)
    typer.echo(f"Rendered page {page_number} at zoom {viewer.zoom} to {path}")


@notes_app.command("list")
def list_notes(ctx: typer.Context, book_id: str) -> None:
    """List the notes of a book by page."""
    for note in _state(ctx).store.list_notes(book_id):
        typer.echo(f"{note.id}  p.{note.page_number}: {note.content}")


@notes_app.command("add")
def add_note(ctx: typer.Context, book_id: str, page_number: int, content: str) -> None:
    """Attach a note to a page of a book."""
    if not content.strip():
        _fail(ValueError("Note content is empty"))
    note = NoteRecord.new(book_id, page_number, content)
    _state(ctx).store.save_note(note)
    typer.echo(f"Added note {note.id}")


@notes_app.command("delete")
def delete_note(ctx: typer.Context, note_id: str) -> None:
    """Delete a note."""
    _state(ctx).store.delete_note(note_id)
    typer.echo(f"Deleted note {note_id}")


@app.command("page-text")
def page_text(ctx: typer.Context, book_id: str, page_number: int) -> None:
    """Print the extracted text of a page."""
    try:
        typer.echo(_open_viewer(_state(ctx), book_id).page_text(page_number))
    except (ScanbookError, IndexError, OSError) as e:
        _fail(e)


@app.command()
def ask(
    ctx: typer.Context,
    action: Annotated[AiAction, typer.Argument(help="What to do with the page text")],
    book_id: str,
    page_number: int,
    question: Annotated[Optional[str], typer.Option("--question", "-q", help="Question for the 'answer' action")] = None,
) -> None:
    """Summarize, explain or answer a question about a page."""
    state = _state(ctx)
    generator = TextGeneratorFactory.create(
        "gemini", api_key=state.config.gemini_api_key, model=state.config.gemini_model
    )
    try:
        text = _open_viewer(state, book_id).page_text(page_number)
        typer.echo(AiAssistant(generator).run(action, text, question))
    except (ScanbookError, ValueError, IndexError, OSError) as e:
        _fail(e)


if __name__ == "__main__":
    app()
