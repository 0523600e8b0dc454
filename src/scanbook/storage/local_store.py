import json
from typing import Any, Dict, List

from globalog import LOG

from scanbook.storage.book_store import BookStore
from scanbook.storage.handlers.storage_handler import StorageHandler
from scanbook.storage.records import BookRecord, NoteRecord


class LocalBookStore(BookStore):
    """
    Book store kept as two JSON documents (`books.json`, `notes.json`) in a storage handler.
    """

    BOOKS_KEY = "books.json"
    NOTES_KEY = "notes.json"

    def __init__(self, storage_handler: StorageHandler) -> None:
        self._storage = storage_handler

    def is_available(self) -> bool:
        return True

    def list_books(self) -> List[BookRecord]:
        return [BookRecord.from_dict(d) for d in self._load(self.BOOKS_KEY)]

    def save_book(self, book: BookRecord) -> None:
        books = self._load(self.BOOKS_KEY)
        books.insert(0, book.to_dict())
        self._dump(self.BOOKS_KEY, books)
        LOG.info(f"Saved book {book.id} locally")

    def list_notes(self, book_id: str) -> List[NoteRecord]:
        notes = [NoteRecord.from_dict(d) for d in self._load(self.NOTES_KEY) if d.get("book_id") == book_id]
        return sorted(notes, key=lambda n: n.page_number)

    def save_note(self, note: NoteRecord) -> None:
        notes = self._load(self.NOTES_KEY)
        notes.append(note.to_dict())
        self._dump(self.NOTES_KEY, notes)

    def delete_note(self, note_id: str) -> None:
        notes = self._load(self.NOTES_KEY)
        self._dump(self.NOTES_KEY, [n for n in notes if n.get("id") != note_id])

    def _load(self, key: str) -> List[Dict[str, Any]]:
        if not self._storage.exists(key):
            return []
        return json.loads(self._storage.download(key).decode('utf-8'))

    def _dump(self, key: str, records: List[Dict[str, Any]]) -> None:
        self._storage.upload(json.dumps(records, indent=2).encode('utf-8'), key)
