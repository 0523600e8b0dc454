"""
Page normalization: bounded downscaling and JPEG re-encoding of page images
before they enter a page sequence or a PDF.
"""
import io
from dataclasses import dataclass
from typing import Tuple

from globalog import LOG
from PIL import Image, ImageOps

from scanbook.exceptions import ImageDecodeError
from scanbook.pages.pending_page import PendingPage


@dataclass(frozen=True)
class NormalizeOptions:
    """
    Target constraints for normalization.

    Attributes:
        max_dimension: Upper bound in pixels for the longer edge
        quality: JPEG quality in (0, 1]
    """
    max_dimension: int
    quality: float

    def __post_init__(self) -> None:
        if self.max_dimension <= 0:
            raise ValueError(f"max_dimension must be positive, got {self.max_dimension}")
        if not 0 < self.quality <= 1:
            raise ValueError(f"quality must be in (0, 1], got {self.quality}")

    @property
    def jpeg_quality(self) -> int:
        """Quality on Pillow's 1-100 scale."""
        return max(1, min(100, round(self.quality * 100)))


CAPTURE_OPTIONS = NormalizeOptions(max_dimension=1600, quality=0.8)
ASSEMBLY_OPTIONS = NormalizeOptions(max_dimension=1200, quality=0.75)
PREVIEW_OPTIONS = NormalizeOptions(max_dimension=320, quality=0.7)


@dataclass(frozen=True)
class NormalizedImage:
    data: bytes
    width: int
    height: int


def fit_within(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Compute the size of an image whose longer edge is at most `max_dimension`,
    keeping the aspect ratio. Images already within bounds are never upscaled.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        max_dimension: Bound for the longer edge

    Returns:
        Tuple[int, int]: The (width, height) to resize to
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size {width}x{height}")
    if max(width, height) <= max_dimension:
        return width, height
    if width >= height:
        return max_dimension, max(1, round(height * max_dimension / width))
    return max(1, round(width * max_dimension / height)), max_dimension


def decode_image(image_bytes: bytes) -> Image.Image:
    """
    Decode image bytes into a fully loaded Pillow image with EXIF orientation applied.

    Raises:
        ImageDecodeError: If the bytes are not a decodable image
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Could not decode image ({len(image_bytes)} bytes): {e}") from e
    return ImageOps.exif_transpose(image)


def to_rgb(image: Image.Image) -> Image.Image:
    """
    Convert an image to RGB, flattening any transparency onto a white background.
    """
    if image.mode == 'RGB':
        return image
    has_alpha = image.mode in ('RGBA', 'LA', 'PA') or (image.mode == 'P' and 'transparency' in image.info)
    if has_alpha:
        rgba = image.convert('RGBA')
        rgb_img = Image.new('RGB', rgba.size, (255, 255, 255))
        rgb_img.paste(rgba, mask=rgba.split()[3])
        return rgb_img
    return image.convert('RGB')


class PageNormalizer:
    """
    Downscales and re-encodes page images as JPEG.

    Normalization is lossy and bounded: the longer edge never exceeds
    `options.max_dimension` and the aspect ratio is kept. Small images keep
    their size and are only re-encoded.
    """

    def __init__(self, options: NormalizeOptions = CAPTURE_OPTIONS, preview_options: NormalizeOptions = PREVIEW_OPTIONS) -> None:
        self.options = options
        self.preview_options = preview_options

    def normalize(self, image_bytes: bytes) -> NormalizedImage:
        """
        Normalize encoded image bytes with this normalizer's options.
        """
        return self.normalize_image(decode_image(image_bytes), self.options)

    @staticmethod
    def normalize_image(image: Image.Image, options: NormalizeOptions) -> NormalizedImage:
        """
        Normalize an already decoded image.

        Args:
            image: Decoded Pillow image
            options: Target dimension and quality

        Returns:
            NormalizedImage: JPEG bytes and final size
        """
        rgb = to_rgb(image)
        width, height = fit_within(rgb.width, rgb.height, options.max_dimension)
        if (width, height) != rgb.size:
            LOG.debug(f"Downscaling {rgb.width}x{rgb.height} -> {width}x{height}")
            rgb = rgb.resize((width, height), Image.Resampling.LANCZOS)

        buf = io.BytesIO()
        rgb.save(buf, format='JPEG', quality=options.jpeg_quality, optimize=True)
        return NormalizedImage(data=buf.getvalue(), width=width, height=height)

    def make_pending_page(self, image_bytes: bytes) -> PendingPage:
        """
        Normalize raw image bytes and build the pending page with its preview.

        Raises:
            ImageDecodeError: If the bytes are not a decodable image
        """
        image = decode_image(image_bytes)
        normalized = self.normalize_image(image, self.options)
        preview = self.normalize_image(image, self.preview_options)
        LOG.debug(f"Normalized page to {normalized.width}x{normalized.height}, {len(normalized.data)} bytes")
        return PendingPage(
            image_data=normalized.data,
            preview=preview.data,
            width=normalized.width,
            height=normalized.height,
        )
