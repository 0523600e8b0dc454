"""
ScanSession: the state of one scan, from the first captured page to the stored book.

Usage Example:
    from scanbook.session import ScanSession

    session = ScanSession(store, library)
    session.add_files([Path("p1.jpg"), Path("p2.png")])
    with CameraSource() as camera:
        session.capture_from(camera)
    session.remove_page(1)
    book = session.finalize(title="Lecture notes", author="")
"""
from pathlib import Path
from typing import Iterable, Optional

from globalog import LOG

from scanbook.assembly.pdf_assembler import AssembledDocument, PdfAssembler
from scanbook.capture.camera import CameraSource
from scanbook.capture.file_source import FileImageSource, FileSelection
from scanbook.exceptions import ImageDecodeError, PageDecodeError
from scanbook.imaging.normalizer import PageNormalizer
from scanbook.imaging.perspective import straighten_page
from scanbook.pages.page_sequence import PageSequence
from scanbook.pages.pending_page import PendingPage
from scanbook.storage.book_store import BookStore
from scanbook.storage.library import DocumentLibrary
from scanbook.storage.records import BookRecord, new_id

DEFAULT_TITLE = "Untitled Scan"
DEFAULT_AUTHOR = "Unknown"


class ScanSession:
    """
    Owns the page sequence of one scan and drives it through normalization,
    assembly and persistence. A session holds either captured/picked images or
    a single uploaded PDF, never both.
    """

    def __init__(
        self,
        store: BookStore,
        library: DocumentLibrary,
        normalizer: Optional[PageNormalizer] = None,
        assembler: Optional[PdfAssembler] = None,
        straighten: bool = False,
    ) -> None:
        self.store = store
        self.library = library
        self.normalizer = normalizer or PageNormalizer()
        self.assembler = assembler or PdfAssembler()
        self.straighten = straighten
        self.pages = PageSequence()
        self._uploaded_pdf: Optional[AssembledDocument] = None
        self.suggested_title = ""

    @property
    def is_pdf_upload(self) -> bool:
        return self._uploaded_pdf is not None

    def add_image_bytes(self, image_data: bytes) -> PendingPage:
        """
        Normalize an image and append it as the next page.

        Raises:
            ImageDecodeError: If the image cannot be decoded; the sequence is unchanged
        """
        page = self._prepare(image_data)
        self._append(page)
        return page

    def add_files(self, paths: Iterable[Path]) -> FileSelection:
        """
        Add picked files: one PDF replaces the session content, images are appended in order.
        Every image is normalized before any is appended, so a bad file leaves the session unchanged.

        Raises:
            PageDecodeError: If an image cannot be decoded; `index` is its position in the selection
        """
        selection = FileImageSource.classify(paths)
        if selection.is_pdf:
            self.use_pdf(FileImageSource.read(selection.pdf), selection.suggested_title)
            return selection
        pages = []
        for index, path in enumerate(selection.images):
            try:
                pages.append(self._prepare(FileImageSource.read(path)))
            except ImageDecodeError as e:
                LOG.error(f"Could not decode {path}, no page of the selection was added", exc_info=e)
                raise PageDecodeError(index, e, source=path.name) from e
        for page in pages:
            self._append(page)
        return selection

    def _prepare(self, image_data: bytes) -> PendingPage:
        if self.straighten:
            image_data = straighten_page(image_data)
        return self.normalizer.make_pending_page(image_data)

    def _append(self, page: PendingPage) -> None:
        if self._uploaded_pdf is not None:
            LOG.info("Switching from the uploaded PDF to scanned pages")
            self._uploaded_pdf = None
            self.suggested_title = ""
        position = self.pages.append(page)
        LOG.info(f"Added page {position} ({page.width}x{page.height})")

    def use_pdf(self, pdf_bytes: bytes, title: str = "") -> AssembledDocument:
        """
        Make an uploaded PDF the session's document. Pending pages are dropped.

        Raises:
            InvalidPdfError: If the bytes are not a usable PDF; the session is unchanged
        """
        document = PdfAssembler.from_pdf(pdf_bytes)
        self.pages.clear()
        self._uploaded_pdf = document
        self.suggested_title = title
        return document

    def capture_from(self, camera: CameraSource) -> PendingPage:
        """
        Take a still from an active camera and append it.

        Raises:
            CameraUnavailableError: If the camera cannot deliver a frame; pages already captured are kept
        """
        return self.add_image_bytes(camera.capture())

    def remove_page(self, index: int) -> Optional[PendingPage]:
        return self.pages.remove_at(index)

    def assemble(self) -> AssembledDocument:
        """
        Raises:
            EmptyPageSequenceError: If there is nothing to assemble
            PageDecodeError: If a page fails to decode
        """
        if self._uploaded_pdf is not None:
            return self._uploaded_pdf
        return self.assembler.assemble(self.pages.to_ordered_list())

    def quick_download(self, output_path: Path) -> Path:
        """Write the assembled document to a file without storing a book."""
        document = self.assemble()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'wb') as f:
            f.write(document.pdf_bytes)
        LOG.info(f"Saved {document.page_count} page PDF to {output_path}")
        return output_path

    def finalize(self, title: str = "", author: str = "") -> BookRecord:
        """
        Assemble the document, store it and save its book record, then start over.
        Nothing is stored if assembly fails.

        Returns:
            BookRecord: The saved record
        """
        document = self.assemble()
        book_id = new_id()
        file_path, cover_url = self.library.save_document(book_id, document)
        book = BookRecord(
            id=book_id,
            title=title.strip() or self.suggested_title or DEFAULT_TITLE,
            author=author.strip() or DEFAULT_AUTHOR,
            cover_url=cover_url,
            file_path=file_path,
        )
        self.store.save_book(book)
        LOG.info(f"Finalized book {book.id} '{book.title}' with {document.page_count} pages")
        self.reset()
        return book

    def reset(self) -> None:
        self.pages.clear()
        self._uploaded_pdf = None
        self.suggested_title = ""
