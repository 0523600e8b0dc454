import json
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

from scanbook.exceptions import StoreUnavailableError
from scanbook.storage import BookRecord, FallbackBookStore, LocalBookStore, NoteRecord, RemoteBookStore
from scanbook.storage.handlers import LocalStorageHandler


def _store(handler: Callable[[httpx.Request], httpx.Response]) -> RemoteBookStore:
    client = httpx.Client(base_url="http://books.test", transport=httpx.MockTransport(handler))
    return RemoteBookStore("http://books.test", client=client)


def test_requests_follow_rest_api() -> None:
    """Test the method and path of every store operation."""
    seen: List[tuple] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        if request.method == "GET":
            return httpx.Response(200, json=[])
        return httpx.Response(200, json={"success": True})

    store = _store(handler)
    book = BookRecord.new("Title", "Author", "covers/x.jpg", "books/x.pdf")
    note = NoteRecord.new(book.id, 4, "hello")

    store.list_books()
    store.save_book(book)
    store.list_notes(book.id)
    store.save_note(note)
    store.delete_note(note.id)

    assert [(m, p) for m, p, _ in seen] == [
        ("GET", "/api/books"),
        ("POST", "/api/books"),
        ("GET", f"/api/books/{book.id}/notes"),
        ("POST", "/api/notes"),
        ("DELETE", f"/api/notes/{note.id}"),
    ]
    assert json.loads(seen[1][2])["title"] == "Title"
    assert json.loads(seen[3][2])["page_number"] == 4


def test_list_books_parses_records() -> None:
    """Test that API rows are turned into book records."""
    rows = [{"id": "b1", "title": "T", "author": "A", "cover_url": "c", "file_path": "f",
             "created_at": "2024-05-01 12:00:00"}]
    store = _store(lambda request: httpx.Response(200, json=rows))
    (book,) = store.list_books()
    assert book.id == "b1"
    assert book.created_at == "2024-05-01 12:00:00"


def test_server_error_raises_unavailable() -> None:
    """Test that non-2xx responses raise StoreUnavailableError."""
    store = _store(lambda request: httpx.Response(500))
    with pytest.raises(StoreUnavailableError):
        store.list_books()
    assert not store.is_available()


def test_connection_error_raises_unavailable() -> None:
    """Test that transport failures raise StoreUnavailableError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)
    with pytest.raises(StoreUnavailableError):
        store.save_note(NoteRecord.new("b", 1, "x"))
    assert not store.is_available()


def test_invalid_json_raises_unavailable() -> None:
    store = _store(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(StoreUnavailableError):
        store.list_books()


def test_null_columns_take_defaults() -> None:
    """Test that NULL columns from the server do not break record parsing."""
    rows = [{"id": "b1", "title": "T", "author": None, "cover_url": None, "file_path": None, "created_at": None}]
    store = _store(lambda request: httpx.Response(200, json=rows))
    (book,) = store.list_books()
    assert (book.title, book.author, book.cover_url, book.file_path) == ("T", "", "", "")
    assert book.created_at


def test_null_note_columns_take_defaults() -> None:
    rows = [{"id": "n1", "book_id": "b1", "page_number": None, "content": None, "highlight_data": None}]
    store = _store(lambda request: httpx.Response(200, json=rows))
    (note,) = store.list_notes("b1")
    assert (note.page_number, note.content, note.highlight_data) == (0, "", "")


def test_fallback_store_lists_books_with_null_columns(tmp_path: Path) -> None:
    """Test that listing through the fallback store survives rows with NULL columns."""
    rows = [{"id": "b1", "title": "T", "author": None, "cover_url": None, "file_path": "books/b1.pdf"}]
    store = FallbackBookStore(
        _store(lambda request: httpx.Response(200, json=rows)),
        LocalBookStore(LocalStorageHandler(tmp_path)),
    )
    assert [book.id for book in store.list_books()] == ["b1"]
    assert not store.is_degraded


def test_malformed_rows_degrade_to_local_store(tmp_path: Path) -> None:
    """Test that rows without an id are reported as an unavailable store."""
    store = _store(lambda request: httpx.Response(200, json=[{"title": "no id"}]))
    with pytest.raises(StoreUnavailableError):
        store.list_books()

    local = LocalBookStore(LocalStorageHandler(tmp_path))
    fallback = FallbackBookStore(store, local)
    assert fallback.list_books() == []
    assert fallback.is_degraded
