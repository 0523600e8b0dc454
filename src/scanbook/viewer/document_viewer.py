from typing import List, Optional

from scanbook.assembly.cover import render_pdf_page
from scanbook.assembly.pdf_utils import count_pdf_pages, extract_pages_text

MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
ZOOM_STEP = 0.2


class DocumentViewer:
    """
    Page-at-a-time access to a document: rendering at a zoom factor and plain
    text extraction for the AI assistant. Page numbers are 1-based.
    """

    def __init__(self, pdf_bytes: bytes, zoom: float = 1.5) -> None:
        self._pdf = pdf_bytes
        self.page_count = count_pdf_pages(pdf_bytes)
        self.zoom = self._clamp(zoom)
        self._texts: Optional[List[str]] = None

    def render_page(self, page_number: int) -> bytes:
        """Render a page as PNG at the current zoom."""
        self._check(page_number)
        return render_pdf_page(self._pdf, page_number, self.zoom)

    def page_text(self, page_number: int) -> str:
        """Plain text of a page, words joined by single spaces."""
        self._check(page_number)
        if self._texts is None:
            self._texts = extract_pages_text(self._pdf)
        return " ".join(self._texts[page_number - 1].split())

    def zoom_in(self) -> float:
        self.zoom = self._clamp(self.zoom + ZOOM_STEP)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = self._clamp(self.zoom - ZOOM_STEP)
        return self.zoom

    def _check(self, page_number: int) -> None:
        if not 1 <= page_number <= self.page_count:
            raise IndexError(f"Page {page_number} out of range 1..{self.page_count}")

    @staticmethod
    def _clamp(zoom: float) -> float:
        return round(min(MAX_ZOOM, max(MIN_ZOOM, zoom)), 2)
