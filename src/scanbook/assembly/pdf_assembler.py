"""
PdfAssembler: builds a multi-page PDF from an ordered sequence of pending pages.

Usage Example:
    from scanbook.assembly import PdfAssembler
    from scanbook.imaging import PageNormalizer

    normalizer = PageNormalizer()
    pages = [normalizer.make_pending_page(data) for data in images]
    document = PdfAssembler().assemble(pages)
    Path("scan.pdf").write_bytes(document.pdf_bytes)

Each page is drawn on its own output page of a fixed size, scaled uniformly to
fit and anchored at the top-left corner. Upright JPEG pages within the
recompression bound are embedded byte for byte, anything else is re-encoded
once. Uploaded PDFs bypass assembly through `from_pdf`.
"""
import io
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from globalog import LOG
from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from scanbook.assembly.cover import render_cover
from scanbook.assembly.page_layout import A4, PageSize, Placement, fit_to_page
from scanbook.assembly.pdf_utils import count_pdf_pages
from scanbook.exceptions import EmptyPageSequenceError, ImageDecodeError, InvalidPdfError, PageDecodeError
from scanbook.imaging.normalizer import ASSEMBLY_OPTIONS, NormalizeOptions, PageNormalizer, decode_image
from scanbook.pages.pending_page import PendingPage


@dataclass(frozen=True)
class AssembledDocument:
    """
    A finished document and its cover thumbnail.

    Attributes:
        pdf_bytes: The PDF file
        cover: Cover thumbnail image bytes
        cover_mime_type: MIME type of `cover`
        page_count: Number of pages in `pdf_bytes`
        placements: Image rectangle per page, empty for pass-through PDFs
    """
    pdf_bytes: bytes
    cover: bytes
    cover_mime_type: str
    page_count: int
    placements: List[Placement] = field(default_factory=list)

    @property
    def is_passthrough(self) -> bool:
        return not self.placements


@dataclass(frozen=True)
class _EmbeddedImage:
    data: bytes
    width: int
    height: int


EXIF_ORIENTATION = 0x0112


def _embeddable_as_is(data: bytes) -> bool:
    """True for upright RGB or grayscale JPEG data, which the PDF can carry unchanged."""
    if not data.startswith(b"\xff\xd8\xff"):
        return False
    with Image.open(io.BytesIO(data)) as raw:
        return raw.mode in ("RGB", "L") and raw.getexif().get(EXIF_ORIENTATION, 1) == 1


class PdfAssembler:
    """Assembles pending pages into a PDF document."""

    def __init__(self, page_size: PageSize = A4, recompress: Optional[NormalizeOptions] = ASSEMBLY_OPTIONS) -> None:
        """
        Args:
            page_size: Size of every output page
            recompress: Bound applied to pages larger than it before embedding;
                None embeds every page exactly as captured
        """
        self.page_size = page_size
        self.recompress = recompress

    def assemble(self, pages: Iterable[PendingPage]) -> AssembledDocument:
        """
        Build a PDF with one page per pending page, in order.

        Args:
            pages: Ordered pending pages, e.g. `PageSequence.to_ordered_list()`

        Returns:
            AssembledDocument: The PDF, with the first page image as its cover

        Raises:
            EmptyPageSequenceError: If there are no pages
            PageDecodeError: If any page fails to decode; nothing is produced
        """
        pages = list(pages)
        if not pages:
            raise EmptyPageSequenceError()

        start_time = time.time()
        # Every page is decoded before drawing starts so a bad page aborts the whole batch.
        images = [self._prepare(index, page) for index, page in enumerate(pages)]

        buf = io.BytesIO()
        pdf = canvas.Canvas(buf, pagesize=(self.page_size.width, self.page_size.height))
        placements = []
        for image in images:
            placement = fit_to_page(image.width, image.height, self.page_size)
            pdf.drawImage(
                ImageReader(io.BytesIO(image.data)),
                placement.x,
                self.page_size.height - placement.y - placement.height,
                width=placement.width,
                height=placement.height,
            )
            pdf.showPage()
            placements.append(placement)
        pdf.save()

        pdf_bytes = buf.getvalue()
        LOG.info(
            f"Assembled PDF: pages={len(placements)}, size={len(pdf_bytes)} bytes, "
            f"page_size={self.page_size.name}, elapsed={time.time() - start_time:.2f}s"
        )
        return AssembledDocument(
            pdf_bytes=pdf_bytes,
            cover=images[0].data,
            cover_mime_type="image/jpeg",
            page_count=len(placements),
            placements=placements,
        )

    def _prepare(self, index: int, page: PendingPage) -> _EmbeddedImage:
        try:
            image = decode_image(page.image_data)
        except ImageDecodeError as e:
            LOG.error(f"Page {index} failed to decode, aborting assembly", exc_info=e)
            raise PageDecodeError(index, e) from e

        within_bounds = self.recompress is None or max(image.size) <= self.recompress.max_dimension
        if within_bounds and _embeddable_as_is(page.image_data):
            return _EmbeddedImage(page.image_data, image.width, image.height)

        options = self.recompress or NormalizeOptions(max_dimension=max(image.size), quality=0.95)
        normalized = PageNormalizer.normalize_image(image, options)
        return _EmbeddedImage(normalized.data, normalized.width, normalized.height)

    @staticmethod
    def from_pdf(pdf_bytes: bytes, cover_scale: float = 0.5) -> AssembledDocument:
        """
        Use an uploaded PDF as the finished document without re-assembling it.

        Args:
            pdf_bytes: The uploaded PDF
            cover_scale: Render scale of the first page for the cover

        Returns:
            AssembledDocument: The same bytes, with a rendered cover

        Raises:
            InvalidPdfError: If the bytes are not a PDF with at least one page
        """
        page_count = count_pdf_pages(pdf_bytes)
        if page_count == 0:
            raise InvalidPdfError("PDF has no pages")
        cover = render_cover(pdf_bytes, cover_scale)
        LOG.info(f"Using uploaded PDF as is: pages={page_count}, size={len(pdf_bytes)} bytes")
        return AssembledDocument(
            pdf_bytes=pdf_bytes,
            cover=cover,
            cover_mime_type="image/png",
            page_count=page_count,
        )
