from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from globalog import LOG

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp', '.tif', '.tiff'}
PDF_EXTENSION = '.pdf'


@dataclass
class FileSelection:
    """
    The outcome of a file pick: either one PDF used as is, or images in pick order.
    """
    pdf: Optional[Path] = None
    images: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)

    @property
    def is_pdf(self) -> bool:
        return self.pdf is not None

    @property
    def suggested_title(self) -> str:
        return self.pdf.stem if self.pdf is not None else ""


class FileImageSource:
    """Turns picked or dropped files into a selection for the scan pipeline."""

    @staticmethod
    def classify(paths: Iterable[Path]) -> FileSelection:
        """
        Split picked files. If any PDF is present the first one wins and all
        images are ignored; otherwise every supported image is kept in order.

        Args:
            paths: Picked files in the order the user picked them

        Returns:
            FileSelection: The classified selection
        """
        paths = [Path(p) for p in paths]
        pdfs = [p for p in paths if p.suffix.lower() == PDF_EXTENSION]
        if pdfs:
            if len(pdfs) > 1 or len(pdfs) < len(paths):
                LOG.warning(f"Using {pdfs[0].name} as the document, ignoring {len(paths) - 1} other file(s)")
            return FileSelection(pdf=pdfs[0], skipped=[p for p in paths if p != pdfs[0]])

        selection = FileSelection()
        for path in paths:
            if path.suffix.lower() in IMAGE_EXTENSIONS:
                selection.images.append(path)
            else:
                LOG.warning(f"Skipping unsupported file {path.name}")
                selection.skipped.append(path)
        return selection

    @staticmethod
    def read(path: Path) -> bytes:
        with open(path, 'rb') as f:
            return f.read()
