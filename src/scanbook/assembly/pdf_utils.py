from io import BytesIO
from typing import List

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from scanbook.exceptions import InvalidPdfError


def is_pdf(data: bytes) -> bool:
    """
    Check if the given bytes represent a PDF file.

    Args:
        data: The file data as bytes.

    Returns:
        bool: True if the data is a PDF, False otherwise.
    """
    return data.startswith(b'%PDF')


def open_pdf(pdf_bytes: bytes) -> PdfReader:
    """
    Parse PDF bytes.

    Raises:
        InvalidPdfError: If the bytes are not a readable PDF
    """
    if not is_pdf(pdf_bytes):
        raise InvalidPdfError("Data does not start with a PDF header")
    try:
        return PdfReader(BytesIO(pdf_bytes))
    except (PdfReadError, ValueError, OSError) as e:
        raise InvalidPdfError(f"Could not parse PDF: {e}") from e


def count_pdf_pages(pdf_bytes: bytes) -> int:
    """
    Count the number of pages in a PDF file.

    Args:
        pdf_bytes: The PDF file data as bytes.

    Returns:
        int: The number of pages in the PDF.
    """
    reader = open_pdf(pdf_bytes)
    try:
        return len(reader.pages)
    except (PdfReadError, ValueError, KeyError) as e:
        raise InvalidPdfError(f"Could not read PDF page tree: {e}") from e


def extract_pages_text(pdf_bytes: bytes) -> List[str]:
    """
    Extract the plain text of every page, in page order.
    """
    reader = open_pdf(pdf_bytes)
    return [page.extract_text() or "" for page in reader.pages]
