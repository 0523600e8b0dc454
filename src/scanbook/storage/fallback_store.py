from typing import Any, List, Optional

from globalog import LOG

from scanbook.exceptions import StoreUnavailableError
from scanbook.storage.book_store import BookStore
from scanbook.storage.records import BookRecord, NoteRecord


class FallbackBookStore(BookStore):
    """
    A remote store backed by a local one.

    The active store is chosen by the remote's health check on first use. When
    the remote fails a request the call is served by the local store, which
    stays active until `reselect()`. Records are never copied between the two.
    """

    def __init__(self, remote: BookStore, local: BookStore) -> None:
        self.remote = remote
        self.local = local
        self._active: Optional[BookStore] = None

    @property
    def active(self) -> BookStore:
        if self._active is None:
            self.reselect()
        return self._active

    @property
    def is_degraded(self) -> bool:
        return self.active is self.local

    def reselect(self) -> BookStore:
        """Run the health check again and pick the active store."""
        self._active = self.remote if self.remote.is_available() else self.local
        LOG.info(f"Using {'remote' if self._active is self.remote else 'local'} book store")
        return self._active

    def is_available(self) -> bool:
        return self.remote.is_available() or self.local.is_available()

    def list_books(self) -> List[BookRecord]:
        return self._call("list_books")

    def save_book(self, book: BookRecord) -> None:
        self._call("save_book", book)

    def list_notes(self, book_id: str) -> List[NoteRecord]:
        return self._call("list_notes", book_id)

    def save_note(self, note: NoteRecord) -> None:
        self._call("save_note", note)

    def delete_note(self, note_id: str) -> None:
        self._call("delete_note", note_id)

    def close(self) -> None:
        self.remote.close()
        self.local.close()

    def _call(self, operation: str, *args: Any) -> Any:
        store = self.active
        if store is self.local:
            return getattr(self.local, operation)(*args)
        try:
            return getattr(store, operation)(*args)
        except StoreUnavailableError as e:
            LOG.warning(f"Remote store failed on {operation}, falling back to local store: {e}")
            self._active = self.local
            return getattr(self.local, operation)(*args)
