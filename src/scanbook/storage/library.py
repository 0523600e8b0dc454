from typing import Tuple

from globalog import LOG

from scanbook.assembly.pdf_assembler import AssembledDocument
from scanbook.storage.handlers.storage_handler import StorageHandler

_COVER_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
}


class DocumentLibrary:
    """
    Stores finished documents and their covers. The returned keys are the
    document and cover references kept in book records.
    """

    def __init__(self, storage_handler: StorageHandler) -> None:
        self._storage = storage_handler

    def save_document(self, book_id: str, document: AssembledDocument) -> Tuple[str, str]:
        """
        Returns:
            Tuple[str, str]: (document reference, cover reference)
        """
        file_path = f"books/{book_id}.pdf"
        cover_url = f"covers/{book_id}.{_COVER_EXTENSIONS.get(document.cover_mime_type, 'img')}"
        self._storage.upload(document.pdf_bytes, file_path)
        self._storage.upload(document.cover, cover_url)
        LOG.info(f"Stored document {file_path} ({document.page_count} pages)")
        return file_path, cover_url

    def load(self, reference: str) -> bytes:
        if not self._storage.exists(reference):
            raise FileNotFoundError(f"No stored document at {reference}")
        return self._storage.download(reference)
