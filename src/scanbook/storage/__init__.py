from scanbook.storage.records import BookRecord, NoteRecord
from scanbook.storage.book_store import BookStore
from scanbook.storage.local_store import LocalBookStore
from scanbook.storage.remote_store import RemoteBookStore
from scanbook.storage.fallback_store import FallbackBookStore
from scanbook.storage.library import DocumentLibrary
from scanbook.storage.config import StorageConfig
