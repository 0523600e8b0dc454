from dataclasses import dataclass

from reportlab.lib import pagesizes


@dataclass(frozen=True)
class PageSize:
    """Output page size in PDF points (1/72 inch)."""
    name: str
    width: float
    height: float

    @classmethod
    def by_name(cls, name: str) -> "PageSize":
        try:
            return PAGE_SIZES[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown page size '{name}'. Available: {', '.join(PAGE_SIZES)}") from None


A4 = PageSize("A4", *pagesizes.A4)
LETTER = PageSize("LETTER", *pagesizes.LETTER)

PAGE_SIZES = {size.name: size for size in (A4, LETTER)}


@dataclass(frozen=True)
class Placement:
    """
    Rectangle an image occupies on its page, in points.
    `x` and `y` are measured from the top-left corner of the page.
    """
    x: float
    y: float
    width: float
    height: float


def fit_to_page(image_width: int, image_height: int, page: PageSize) -> Placement:
    """
    Scale an image uniformly so it fits entirely on the page and anchor it at
    the top-left origin. The image is letterboxed, never stretched or cropped.

    Args:
        image_width: Image width in pixels
        image_height: Image height in pixels
        page: Output page size

    Returns:
        Placement: Where to draw the image
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid image size {image_width}x{image_height}")
    scale = min(page.width / image_width, page.height / image_height)
    return Placement(x=0.0, y=0.0, width=image_width * scale, height=image_height * scale)
