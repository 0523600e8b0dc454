from abc import ABC, abstractmethod
from typing import List

from scanbook.storage.records import BookRecord, NoteRecord


class BookStore(ABC):
    """
    Persistence of book and note records. Implementations raise
    StoreUnavailableError when their backend cannot serve a request.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Health check; never raises."""
        raise NotImplementedError()

    @abstractmethod
    def list_books(self) -> List[BookRecord]:
        """All books, newest first."""
        raise NotImplementedError()

    @abstractmethod
    def save_book(self, book: BookRecord) -> None:
        raise NotImplementedError()

    @abstractmethod
    def list_notes(self, book_id: str) -> List[NoteRecord]:
        """Notes of one book ordered by page number."""
        raise NotImplementedError()

    @abstractmethod
    def save_note(self, note: NoteRecord) -> None:
        raise NotImplementedError()

    @abstractmethod
    def delete_note(self, note_id: str) -> None:
        raise NotImplementedError()

    def close(self) -> None:
        """Release connections held by the store."""
