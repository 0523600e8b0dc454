import fitz  # PyMuPDF
from globalog import LOG

from scanbook.exceptions import InvalidPdfError


def render_pdf_page(pdf_bytes: bytes, page_number: int = 1, scale: float = 1.0) -> bytes:
    """
    Render one page of a PDF to PNG bytes.

    Args:
        pdf_bytes: The PDF document
        page_number: 1-based page number
        scale: Zoom factor relative to 72 dpi

    Returns:
        bytes: PNG image of the page
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise InvalidPdfError(f"Could not open PDF for rendering: {e}") from e

    with doc:
        if not 1 <= page_number <= doc.page_count:
            raise IndexError(f"Page {page_number} out of range 1..{doc.page_count}")
        page = doc.load_page(page_number - 1)
        pixmap = page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        LOG.debug(f"Rendered page {page_number} at scale {scale}: {pixmap.width}x{pixmap.height}")
        return pixmap.tobytes("png")


def render_cover(pdf_bytes: bytes, scale: float = 0.5) -> bytes:
    """Render the first page of a PDF at a reduced scale for use as a cover thumbnail."""
    return render_pdf_page(pdf_bytes, 1, scale)
