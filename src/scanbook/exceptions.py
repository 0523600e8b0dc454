from typing import Optional


class ScanbookError(Exception):
    """
    Base class for all errors raised by scanbook.
    """
    def __init__(self, message: str) -> None:
        super().__init__(message)


class CameraUnavailableError(ScanbookError):
    """
    Raised when the capture device cannot be opened or delivers no frames
    (permission denied, no device, device busy).
    """


class ImageDecodeError(ScanbookError):
    """
    Raised when image bytes cannot be decoded.
    """


class PageDecodeError(ScanbookError):
    """
    Raised when a page of a batch fails to decode. The whole batch is aborted;
    `index` is the 0-based position of the failing page and `source` names the
    file it came from, when known.
    """
    def __init__(self, index: int, cause: Optional[Exception] = None, source: Optional[str] = None) -> None:
        self.index = index
        self.cause = cause
        self.source = source
        origin = f" ({source})" if source else ""
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Page {index}{origin} could not be decoded{detail}")


class EmptyPageSequenceError(ScanbookError):
    """
    Raised when assembly is requested for a sequence without pages.
    """
    def __init__(self, message: str = "Cannot assemble a document from an empty page sequence") -> None:
        super().__init__(message)


class InvalidPdfError(ScanbookError):
    """
    Raised when bytes expected to hold a PDF document cannot be parsed as one.
    """


class StoreUnavailableError(ScanbookError):
    """
    Raised by a book store when its backend cannot be reached or rejects a request.
    """


class AiRequestError(ScanbookError):
    """
    Raised when the text generation service fails. The message is always the
    generic user-facing one; the original exception is chained.
    """
    GENERIC_MESSAGE = "AI failed to process. Please try again."

    def __init__(self, message: str = GENERIC_MESSAGE) -> None:
        super().__init__(message)
