"""
Scanbook - scan pages into PDFs, keep them as books and read them with AI help
"""

__version__ = "0.1.0"

from scanbook.config import ScanbookConfig
from scanbook.pages import PendingPage, PageSequence
from scanbook.imaging.normalizer import PageNormalizer, NormalizeOptions, CAPTURE_OPTIONS, ASSEMBLY_OPTIONS
from scanbook.assembly import PdfAssembler, AssembledDocument, A4, LETTER
from scanbook.capture import CameraSource, FileImageSource
from scanbook.session import ScanSession
from scanbook.async_session import AsyncScanSession
