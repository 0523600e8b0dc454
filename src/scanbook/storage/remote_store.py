from typing import Any, List, Optional, Type, TypeVar

import httpx
from globalog import LOG

from scanbook.exceptions import StoreUnavailableError
from scanbook.storage.book_store import BookStore
from scanbook.storage.records import BookRecord, NoteRecord

R = TypeVar("R", BookRecord, NoteRecord)


class RemoteBookStore(BookStore):
    """
    Client of the book REST API:

        GET    /api/books
        POST   /api/books
        GET    /api/books/{book_id}/notes
        POST   /api/notes
        DELETE /api/notes/{note_id}
    """

    def __init__(self, base_url: str, timeout: float = 10.0, client: Optional[httpx.Client] = None) -> None:
        """
        Args:
            base_url: Server root, e.g. "http://localhost:3000"
            timeout: Request timeout in seconds
            client: Preconfigured client, used instead of creating one
        """
        self.base_url = base_url
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def is_available(self) -> bool:
        try:
            self._request("GET", "/api/books")
        except StoreUnavailableError as e:
            LOG.warning(f"Book API at {self.base_url} is unavailable: {e}")
            return False
        return True

    def list_books(self) -> List[BookRecord]:
        return self._records(BookRecord, "/api/books")

    def save_book(self, book: BookRecord) -> None:
        self._request("POST", "/api/books", json=book.to_dict())
        LOG.info(f"Saved book {book.id} to {self.base_url}")

    def list_notes(self, book_id: str) -> List[NoteRecord]:
        return self._records(NoteRecord, f"/api/books/{book_id}/notes")

    def save_note(self, note: NoteRecord) -> None:
        self._request("POST", "/api/notes", json=note.to_dict())

    def delete_note(self, note_id: str) -> None:
        self._request("DELETE", f"/api/notes/{note_id}")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RemoteBookStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise StoreUnavailableError(f"{method} {path} failed: {e}") from e
        if response.is_error:
            raise StoreUnavailableError(f"{method} {path} returned HTTP {response.status_code}")
        return response

    def _json(self, method: str, path: str) -> Any:
        response = self._request(method, path)
        try:
            return response.json()
        except ValueError as e:
            raise StoreUnavailableError(f"{method} {path} returned invalid JSON") from e

    def _records(self, record_type: Type[R], path: str) -> List[R]:
        rows = self._json("GET", path)
        try:
            return [record_type.from_dict(row) for row in rows]
        except (TypeError, ValueError, AttributeError) as e:
            raise StoreUnavailableError(f"GET {path} returned malformed {record_type.__name__} rows: {e}") from e
